"""
Pydantic schemas for the payment gateway endpoints.

Verification accepts both our field names and the ``razorpay_*`` names the
hosted checkout widget hands back to the browser.
"""

from pydantic import AliasChoices, BaseModel, Field

from weddinghub.schemas.booking import BookingResponse


class CreateOrderRequest(BaseModel):
    booking_id: int
    amount: int = Field(..., gt=0, description="Amount in the smallest currency unit (paise)")
    currency: str = "INR"


class CreateOrderResponse(BaseModel):
    order_id: str
    amount: int
    currency: str
    key: str


class VerifyPaymentRequest(BaseModel):
    booking_id: int
    order_id: str = Field(..., min_length=1, validation_alias=AliasChoices("order_id", "razorpay_order_id"))
    payment_id: str = Field(..., min_length=1, validation_alias=AliasChoices("payment_id", "razorpay_payment_id"))
    signature: str = Field(..., min_length=1, validation_alias=AliasChoices("signature", "razorpay_signature"))


class VerifyPaymentResponse(BaseModel):
    message: str
    booking: BookingResponse
