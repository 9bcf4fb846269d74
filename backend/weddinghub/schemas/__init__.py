from weddinghub.schemas.booking import BookingCreate, BookingUpdate, BookingResponse
from weddinghub.schemas.event import EventCreate, EventResponse
from weddinghub.schemas.payment import (
    CreateOrderRequest, CreateOrderResponse, VerifyPaymentRequest, VerifyPaymentResponse,
)
from weddinghub.schemas.vendor import VendorCreate, VendorResponse

__all__ = [
    "BookingCreate", "BookingUpdate", "BookingResponse",
    "EventCreate", "EventResponse",
    "CreateOrderRequest", "CreateOrderResponse", "VerifyPaymentRequest", "VerifyPaymentResponse",
    "VendorCreate", "VendorResponse",
]
