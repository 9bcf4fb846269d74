"""
Booking endpoints: create, read, patch and delete bookings.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from weddinghub.api.deps import get_current_principal
from weddinghub.core.clock import Clock, get_clock
from weddinghub.db.session import get_db
from weddinghub.schemas.booking import (
    BookingCreate,
    BookingDeleteResponse,
    BookingResponse,
    BookingStatusName,
    BookingUpdate,
)
from weddinghub.services import booking_service
from weddinghub.services.authorization import Principal

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.get("/", response_model=list[BookingResponse])
async def list_bookings(
    status_filter: Optional[BookingStatusName] = Query(None, alias="status"),
    event_id: Optional[int] = Query(None),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    """
    Bookings visible to the caller.
    Vendors see bookings placed with their profile; everyone else sees the
    bookings they placed. Newest event date first.
    """
    return await booking_service.list_bookings(db, principal, status=status_filter, event_id=event_id)


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: int,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    return await booking_service.get_booking(db, principal, booking_id)


@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Book a vendor for one of the caller's events. Starts Pending/Pending."""
    return await booking_service.create_booking(db, principal, booking_data, clock)


@router.put("/{booking_id}", response_model=BookingResponse)
async def update_booking(
    booking_id: int,
    booking_update: BookingUpdate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """
    Patch booking fields. Status must follow
    Pending -> Confirmed -> In Progress -> Completed, with Cancelled reachable
    from any non-terminal state.
    """
    patch = booking_update.model_dump(exclude_unset=True)
    return await booking_service.update_booking(db, principal, booking_id, patch, clock)


@router.delete("/{booking_id}", response_model=BookingDeleteResponse)
async def delete_booking(
    booking_id: int,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Delete a booking and detach it from its event."""
    await booking_service.delete_booking(db, principal, booking_id, clock)
    return BookingDeleteResponse(message="Booking deleted", booking_id=booking_id)
