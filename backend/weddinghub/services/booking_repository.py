"""
Booking persistence and query shaping.

Every write commits on its own. Callers that pair a booking write with an
event write (creation, deletion) therefore issue two independent commits;
see booking_service for how the gap between them is handled.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from weddinghub.core.clock import Clock
from weddinghub.core.exceptions import NotFound, ValidationError
from weddinghub.core.logging import get_logger
from weddinghub.core.metrics import record_booking_operation
from weddinghub.models.booking import Booking, PAYMENT_PENDING, STATUS_PENDING
from weddinghub.services import state_machine

logger = get_logger(__name__)


@dataclass(frozen=True)
class BookingDraft:
    event_id: int
    vendor_id: int
    user_id: int
    event_date: datetime
    amount: float
    advance_paid: float = 0
    service_details: Optional[dict] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class BookingFilter:
    """Exactly one owner scope, plus optional narrowing."""

    owner_user_id: Optional[int] = None
    owner_vendor_id: Optional[int] = None
    status: Optional[str] = None
    event_id: Optional[int] = None

    def __post_init__(self):
        if (self.owner_user_id is None) == (self.owner_vendor_id is None):
            raise ValueError("BookingFilter needs exactly one of owner_user_id / owner_vendor_id")


async def create(db: AsyncSession, draft: BookingDraft, clock: Clock) -> Booking:
    if draft.amount < 0 or draft.advance_paid < 0:
        raise ValidationError(
            "Amounts must be non-negative",
            errors=[
                {"field": name, "message": "Must be greater than or equal to 0"}
                for name in ("amount", "advance_paid")
                if getattr(draft, name) < 0
            ],
        )

    now = clock()
    booking = Booking(
        event_id=draft.event_id,
        vendor_id=draft.vendor_id,
        user_id=draft.user_id,
        service_details=draft.service_details,
        booking_date=now,
        event_date=draft.event_date,
        amount=draft.amount,
        advance_paid=draft.advance_paid,
        status=STATUS_PENDING,
        payment_status=PAYMENT_PENDING,
        notes=draft.notes,
        created_at=now,
        updated_at=now,
    )
    db.add(booking)
    await db.commit()
    await db.refresh(booking)

    record_booking_operation("create")
    logger.info(
        "booking_created",
        booking_id=booking.id,
        user_id=draft.user_id,
        event_id=draft.event_id,
        vendor_id=draft.vendor_id,
        amount=draft.amount,
    )
    return booking


async def get(db: AsyncSession, booking_id: int) -> Booking:
    result = await db.execute(select(Booking).where(Booking.id == booking_id))
    booking = result.scalar_one_or_none()

    if not booking:
        raise NotFound(f"Booking {booking_id} not found")
    return booking


async def list_bookings(db: AsyncSession, booking_filter: BookingFilter) -> list[Booking]:
    """
    Bookings in scope, newest event first.
    Ties on event_date fall back to insertion order.
    """
    query = select(Booking)

    if booking_filter.owner_user_id is not None:
        query = query.where(Booking.user_id == booking_filter.owner_user_id)
    else:
        query = query.where(Booking.vendor_id == booking_filter.owner_vendor_id)

    if booking_filter.status:
        query = query.where(Booking.status == booking_filter.status)
    if booking_filter.event_id is not None:
        query = query.where(Booking.event_id == booking_filter.event_id)

    result = await db.execute(query.order_by(Booking.event_date.desc(), Booking.id.asc()))
    return list(result.scalars().all())


async def list_rated_for_vendor(db: AsyncSession, vendor_id: int) -> list[Booking]:
    result = await db.execute(
        select(Booking)
        .where(Booking.vendor_id == vendor_id, Booking.rating.is_not(None))
        .order_by(Booking.id.asc())
    )
    return list(result.scalars().all())


async def update(db: AsyncSession, booking: Booking, patch: dict[str, Any], clock: Clock) -> list[str]:
    """
    Apply ``patch`` through the state machine and commit.
    Returns the changed field names.
    """
    changed = state_machine.apply_patch(booking, patch, clock)
    await db.commit()
    await db.refresh(booking)

    record_booking_operation("update")
    logger.info("booking_updated", booking_id=booking.id, changed=changed)
    return changed


async def delete(db: AsyncSession, booking: Booking) -> None:
    booking_id = booking.id
    await db.delete(booking)
    await db.commit()

    record_booking_operation("delete")
    logger.info("booking_deleted", booking_id=booking_id)
