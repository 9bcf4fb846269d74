"""
Pydantic schemas for event-related request/response validation.
"""

from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field, model_validator


class EventCreate(BaseModel):
    event_type: Literal["Wedding", "Social Gathering"]
    event_name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    start_date: datetime
    end_date: datetime
    venue_name: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=120)
    guest_count: int = Field(..., ge=1)
    budget_amount: Optional[float] = Field(None, ge=0)
    budget_currency: str = Field(default="INR", min_length=3, max_length=3)

    @model_validator(mode="after")
    def end_not_before_start(self) -> "EventCreate":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class EventResponse(BaseModel):
    id: int
    user_id: int
    event_type: str
    event_name: str
    description: Optional[str]
    start_date: datetime
    end_date: datetime
    venue_name: Optional[str]
    city: Optional[str]
    guest_count: int
    budget_amount: Optional[float]
    budget_currency: str
    status: str
    booking_ids: list[int]
    created_at: datetime

    model_config = {"from_attributes": True}


class EventUpdate(BaseModel):
    """
    Partial update. Only fields present in the request body are applied.

    ``booking_ids`` is maintained by the booking service and is not accepted
    here, nor are the owner and timestamps.
    """

    event_type: Optional[Literal["Wedding", "Social Gathering"]] = None
    event_name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    venue_name: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=120)
    guest_count: Optional[int] = Field(None, ge=1)
    budget_amount: Optional[float] = Field(None, ge=0)
    budget_currency: Optional[str] = Field(None, min_length=3, max_length=3)
    status: Optional[Literal["Planning", "Confirmed", "In Progress", "Completed", "Cancelled"]] = None
