"""
Booking lifecycle service.

CONSISTENCY BETWEEN BOOKINGS AND EVENTS
=======================================

Problem:
  Events keep an ordered list of their booking ids, while bookings live in
  their own table. Creating or deleting a booking touches both.

Approach:
  Two independent commits, in a fixed order.

  Create:  1. INSERT booking, commit
           2. append booking id to event.booking_ids, commit
  Delete:  1. remove booking id from event.booking_ids, commit
           2. DELETE booking, commit

  A failure between the two steps leaves either a booking the event does not
  list yet, or an event entry pointing at a booking that is still present.
  Readers tolerate both. The link step is best effort: a database error
  there is logged and not retried, and the primary write stands.

  Where the store supports it, a single transaction spanning both writes
  would close the window.

Concurrent updates to the same booking are last-write-wins per field; no
version column guards them.
"""

from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from weddinghub.core.clock import Clock
from weddinghub.core.exceptions import Unauthorized
from weddinghub.core.logging import get_logger
from weddinghub.models.booking import Booking
from weddinghub.schemas.booking import BookingCreate
from weddinghub.services import booking_repository, event_service, rating_service, vendor_service
from weddinghub.services.authorization import Principal
from weddinghub.services.booking_repository import BookingDraft
from weddinghub.services.resolver_factory import (
    ensure_can_delete,
    ensure_can_read,
    ensure_can_write,
    resolver_for,
)

logger = get_logger(__name__)


async def create_booking(
    db: AsyncSession,
    principal: Principal,
    booking_data: BookingCreate,
    clock: Clock,
) -> Booking:
    """
    Book a vendor for one of the principal's events.
    The event must belong to the principal and the vendor must exist.
    """
    event = await event_service.get_event(db, booking_data.event_id)
    if event.user_id != principal.user_id:
        logger.warning(
            "booking_create_denied",
            event_id=event.id,
            user_id=principal.user_id,
        )
        raise Unauthorized("Not authorized to book for this event")

    await vendor_service.get_vendor(db, booking_data.vendor_id)

    service_details = booking_data.service_details.model_dump() if booking_data.service_details else None
    booking = await booking_repository.create(
        db,
        BookingDraft(
            event_id=event.id,
            vendor_id=booking_data.vendor_id,
            user_id=principal.user_id,
            event_date=booking_data.event_date,
            amount=booking_data.amount,
            advance_paid=booking_data.advance_paid,
            service_details=service_details,
            notes=booking_data.notes,
        ),
        clock,
    )

    booking_id = booking.id
    try:
        await event_service.attach_booking(db, event, booking_id, clock)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(
            "event_booking_link_failed",
            event_id=booking_data.event_id,
            booking_id=booking_id,
            error=str(e),
        )
        # rollback expired the committed booking; reload it for the response
        await db.refresh(booking)
    return booking


async def get_booking(db: AsyncSession, principal: Principal, booking_id: int) -> Booking:
    booking = await booking_repository.get(db, booking_id)
    ensure_can_read(principal, booking)
    return booking


async def list_bookings(
    db: AsyncSession,
    principal: Principal,
    status: Optional[str] = None,
    event_id: Optional[int] = None,
) -> list[Booking]:
    """Bookings visible to the principal; empty for a vendor with no profile."""
    scope = resolver_for(principal).list_scope(status=status, event_id=event_id)
    if scope is None:
        return []
    return await booking_repository.list_bookings(db, scope)


async def update_booking(
    db: AsyncSession,
    principal: Principal,
    booking_id: int,
    patch: dict[str, Any],
    clock: Clock,
) -> Booking:
    """
    Patch a booking. Status changes go through the state machine; a changed
    rating re-aggregates the vendor's rating once the booking is committed.
    """
    booking = await booking_repository.get(db, booking_id)
    ensure_can_write(principal, booking)

    previous_rating = booking.rating
    changed = await booking_repository.update(db, booking, patch, clock)

    if "rating" in changed and booking.rating != previous_rating:
        await rating_service.recompute(db, booking.vendor_id)
    return booking


async def delete_booking(
    db: AsyncSession,
    principal: Principal,
    booking_id: int,
    clock: Clock,
) -> None:
    booking = await booking_repository.get(db, booking_id)
    ensure_can_delete(principal, booking)

    event_id = booking.event_id
    vendor_id = booking.vendor_id
    was_rated = booking.rating is not None
    try:
        await event_service.detach_booking(db, event_id, booking_id, clock)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(
            "event_booking_unlink_failed",
            event_id=event_id,
            booking_id=booking_id,
            error=str(e),
        )
        await db.refresh(booking)

    await booking_repository.delete(db, booking)

    if was_rated:
        await rating_service.recompute(db, vendor_id)
