"""
Event endpoints. Events are owned by the customer who created them.
"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from weddinghub.api.deps import get_current_principal
from weddinghub.core.clock import Clock, get_clock
from weddinghub.db.session import get_db
from weddinghub.schemas.event import EventCreate, EventResponse, EventUpdate
from weddinghub.services import event_service
from weddinghub.services.authorization import Principal

router = APIRouter(prefix="/events", tags=["Events"])


@router.post("/", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event_endpoint(
    event_data: EventCreate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    return await event_service.create_event(db, event_data, principal.user_id, clock)


@router.get("/", response_model=list[EventResponse])
async def list_events_endpoint(
    event_type: Optional[Literal["Wedding", "Social Gathering"]] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    """The caller's events, latest start date first."""
    return await event_service.list_events(db, principal.user_id, event_type, status_filter)


@router.get("/{event_id}", response_model=EventResponse)
async def get_event_endpoint(
    event_id: int,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    event = await event_service.get_event(db, event_id)
    event_service.ensure_event_access(principal, event)
    return event


@router.put("/{event_id}", response_model=EventResponse)
async def update_event_endpoint(
    event_id: int,
    event_update: EventUpdate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Partial update. Booking references are managed through the booking endpoints."""
    event = await event_service.get_event(db, event_id)
    event_service.ensure_event_access(principal, event)
    return await event_service.update_event(db, event, event_update.model_dump(exclude_unset=True), clock)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event_endpoint(
    event_id: int,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    event = await event_service.get_event(db, event_id)
    event_service.ensure_event_access(principal, event)
    await event_service.delete_event(db, event)
