"""
Pydantic schemas for booking-related request/response validation.
"""

from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field

BookingStatusName = Literal["Pending", "Confirmed", "In Progress", "Completed", "Cancelled"]
PaymentStatusName = Literal["Pending", "Partial", "Paid", "Refunded"]


class ServiceDetails(BaseModel):
    service_name: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    quantity: Optional[float] = Field(None, ge=0)
    unit: Optional[str] = Field(None, max_length=64)


class BookingCreate(BaseModel):
    event_id: int
    vendor_id: int
    event_date: datetime
    amount: float = Field(..., ge=0)
    advance_paid: float = Field(default=0, ge=0)
    service_details: Optional[ServiceDetails] = None
    notes: Optional[str] = Field(None, max_length=2000)


class BookingUpdate(BaseModel):
    """
    Partial update. Only fields present in the request body are applied.

    The reference fields are accepted so that a client echoing them back
    unchanged is not rejected; changing their value is an invalid mutation.
    """

    event_id: Optional[int] = None
    vendor_id: Optional[int] = None
    user_id: Optional[int] = None
    service_details: Optional[ServiceDetails] = None
    event_date: Optional[datetime] = None
    amount: Optional[float] = Field(None, ge=0)
    advance_paid: Optional[float] = Field(None, ge=0)
    status: Optional[BookingStatusName] = None
    payment_status: Optional[PaymentStatusName] = None
    notes: Optional[str] = Field(None, max_length=2000)
    rating: Optional[int] = Field(None, ge=1, le=5)
    review: Optional[str] = Field(None, max_length=5000)


class PaymentReference(BaseModel):
    order_id: str
    payment_id: Optional[str] = None
    signature: Optional[str] = None


class BookingResponse(BaseModel):
    id: int
    event_id: int
    vendor_id: int
    user_id: int
    service_details: Optional[ServiceDetails] = None
    booking_date: datetime
    event_date: datetime
    amount: float
    advance_paid: float
    status: str
    payment_status: str
    payment: Optional[PaymentReference] = None
    notes: Optional[str] = None
    rating: Optional[int] = None
    review: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class BookingDeleteResponse(BaseModel):
    message: str
    booking_id: int
