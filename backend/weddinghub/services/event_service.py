"""
Event service: ownership lookups and the booking back-reference list.

Events own an ordered ``booking_ids`` list. It is not a foreign-key
relationship; the booking service keeps it in step with the bookings table
through separate writes.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from weddinghub.core.clock import Clock
from weddinghub.core.exceptions import NotFound, Unauthorized, ValidationError
from weddinghub.core.logging import get_logger
from weddinghub.models.event import Event
from weddinghub.models.user import ROLE_ADMIN
from weddinghub.schemas.event import EventCreate
from weddinghub.services.authorization import Principal

logger = get_logger(__name__)

REQUIRED_FIELDS = frozenset(
    {"event_type", "event_name", "start_date", "end_date", "guest_count", "budget_currency", "status"}
)


async def create_event(db: AsyncSession, event_data: EventCreate, owner_id: int, clock: Clock) -> Event:
    now = clock()
    event = Event(
        **event_data.model_dump(),
        user_id=owner_id,
        status="Planning",
        booking_ids=[],
        created_at=now,
        updated_at=now,
    )
    db.add(event)
    await db.commit()
    await db.refresh(event)

    logger.info("event_created", event_id=event.id, user_id=owner_id, event_type=event.event_type)
    return event


async def get_event(db: AsyncSession, event_id: int) -> Event:
    result = await db.execute(select(Event).where(Event.id == event_id))
    event = result.scalar_one_or_none()

    if not event:
        raise NotFound(f"Event {event_id} not found")
    return event


def ensure_event_access(principal: Principal, event: Event) -> None:
    if event.user_id != principal.user_id and principal.role != ROLE_ADMIN:
        raise Unauthorized("Not authorized")


async def list_events(
    db: AsyncSession,
    owner_id: int,
    event_type: Optional[str] = None,
    status: Optional[str] = None,
) -> list[Event]:
    query = select(Event).where(Event.user_id == owner_id)
    if event_type:
        query = query.where(Event.event_type == event_type)
    if status:
        query = query.where(Event.status == status)

    result = await db.execute(query.order_by(Event.start_date.desc(), Event.id.asc()))
    return list(result.scalars().all())


def _as_utc(value: datetime) -> datetime:
    # SQLite hands timezone-aware columns back naive
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


async def update_event(db: AsyncSession, event: Event, patch: dict[str, Any], clock: Clock) -> Event:
    """Apply a partial update. Dates are checked against the stored values they are paired with."""
    nulled = sorted(name for name in REQUIRED_FIELDS if name in patch and patch[name] is None)
    if nulled:
        raise ValidationError(
            "Required event fields cannot be cleared",
            errors=[{"field": name, "message": "Field cannot be null"} for name in nulled],
        )

    start_date = _as_utc(patch.get("start_date", event.start_date))
    end_date = _as_utc(patch.get("end_date", event.end_date))
    if end_date < start_date:
        raise ValidationError(
            "Request validation failed",
            errors=[{"field": "end_date", "message": "end_date must not be before start_date"}],
        )

    for field, value in patch.items():
        setattr(event, field, value)
    event.updated_at = clock()
    await db.commit()
    await db.refresh(event)

    logger.info("event_updated", event_id=event.id, changed=sorted(patch))
    return event


async def delete_event(db: AsyncSession, event: Event) -> None:
    event_id = event.id
    await db.delete(event)
    await db.commit()
    logger.info("event_deleted", event_id=event_id)


async def attach_booking(db: AsyncSession, event: Event, booking_id: int, clock: Clock) -> None:
    """Append ``booking_id`` to the event's back-references (set semantics)."""
    current = list(event.booking_ids or [])
    if booking_id in current:
        return
    # Reassign rather than mutate so the JSON column is flagged dirty
    event.booking_ids = [*current, booking_id]
    event.updated_at = clock()
    await db.commit()
    logger.debug("event_booking_attached", event_id=event.id, booking_id=booking_id)


async def detach_booking(db: AsyncSession, event_id: int, booking_id: int, clock: Clock) -> None:
    """Remove ``booking_id`` from the event's back-references, if the event still exists."""
    result = await db.execute(select(Event).where(Event.id == event_id))
    event = result.scalar_one_or_none()
    if event is None:
        logger.warning("event_missing_on_detach", event_id=event_id, booking_id=booking_id)
        return

    current = list(event.booking_ids or [])
    if booking_id not in current:
        return
    event.booking_ids = [existing for existing in current if existing != booking_id]
    event.updated_at = clock()
    await db.commit()
    logger.debug("event_booking_detached", event_id=event_id, booking_id=booking_id)
