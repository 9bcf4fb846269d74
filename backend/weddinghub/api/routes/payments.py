"""
Payment endpoints backed by the Razorpay gateway.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from weddinghub.api.deps import get_current_principal
from weddinghub.core.clock import Clock, get_clock
from weddinghub.db.session import get_db
from weddinghub.schemas.booking import BookingResponse
from weddinghub.schemas.payment import (
    CreateOrderRequest,
    CreateOrderResponse,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)
from weddinghub.services import payment_service
from weddinghub.services.authorization import Principal
from weddinghub.services.payment_gateway import RazorpayGateway, get_payment_gateway

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.post("/create-order", response_model=CreateOrderResponse)
async def create_order(
    order_request: CreateOrderRequest,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
    gateway: RazorpayGateway = Depends(get_payment_gateway),
):
    """
    Create a gateway order for a booking.
    Returns the order id and the public key the checkout widget needs.
    """
    order = await payment_service.create_order(
        db,
        gateway,
        principal,
        order_request.booking_id,
        order_request.amount,
        order_request.currency,
    )
    return CreateOrderResponse(
        order_id=order.order_id,
        amount=order.amount,
        currency=order.currency,
        key=gateway.key_id,
    )


@router.post("/verify", response_model=VerifyPaymentResponse)
async def verify_payment(
    verify_request: VerifyPaymentRequest,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
    gateway: RazorpayGateway = Depends(get_payment_gateway),
    clock: Clock = Depends(get_clock),
):
    """
    Verify the checkout callback signature and confirm the booking.
    Any authenticated caller may submit it; the signature is the proof.
    """
    booking = await payment_service.verify_payment(
        db,
        gateway,
        principal,
        verify_request.booking_id,
        verify_request.order_id,
        verify_request.payment_id,
        verify_request.signature,
        clock,
    )
    return VerifyPaymentResponse(
        message="Payment verified and booking confirmed",
        booking=BookingResponse.model_validate(booking),
    )
