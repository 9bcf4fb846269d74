"""
Payment flow: order creation and callback verification for bookings.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from weddinghub.core.clock import Clock
from weddinghub.core.config import get_settings
from weddinghub.core.exceptions import (
    GatewayUnavailable,
    InvalidSignature,
    Unauthorized,
    UnsupportedCurrency,
    ValidationError,
)
from weddinghub.core.logging import get_logger
from weddinghub.core.metrics import record_payment_order, record_payment_verification
from weddinghub.models.booking import Booking
from weddinghub.models.user import ROLE_ADMIN
from weddinghub.services import booking_repository, state_machine
from weddinghub.services.authorization import Principal
from weddinghub.services.payment_gateway import GatewayOrder, RazorpayGateway

logger = get_logger(__name__)
settings = get_settings()


async def create_order(
    db: AsyncSession,
    gateway: RazorpayGateway,
    principal: Principal,
    booking_id: int,
    amount: int,
    currency: str = "INR",
) -> GatewayOrder:
    """
    Mint a gateway order for ``amount`` minor units.
    Only the customer who placed the booking, or an admin, may pay for it.
    The booking itself is not modified.
    """
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise ValidationError(
            "Invalid amount",
            errors=[{"field": "amount", "message": "amount (paise) must be a positive integer"}],
        )
    if currency not in settings.SUPPORTED_CURRENCIES:
        record_payment_order("unsupported_currency")
        raise UnsupportedCurrency(f"Currency '{currency}' is not supported; only INR is accepted")

    booking = await booking_repository.get(db, booking_id)
    if booking.user_id != principal.user_id and principal.role != ROLE_ADMIN:
        raise Unauthorized("Not authorized")

    try:
        order = await gateway.create_order(amount, currency, receipt=f"booking_{booking_id}")
    except GatewayUnavailable:
        record_payment_order("gateway_unavailable")
        raise

    record_payment_order("created")
    logger.info(
        "payment_order_created",
        booking_id=booking_id,
        order_id=order.order_id,
        amount=order.amount,
        currency=order.currency,
    )
    return order


async def verify_payment(
    db: AsyncSession,
    gateway: RazorpayGateway,
    principal: Principal,
    booking_id: int,
    order_id: str,
    payment_id: str,
    signature: str,
    clock: Clock,
) -> Booking:
    """
    Confirm a booking from a gateway callback.

    The signature is checked before the booking is even loaded; a mismatch
    leaves the booking untouched. The caller's identity is only logged.
    """
    if not gateway.verify_signature(order_id, payment_id, signature):
        record_payment_verification(False)
        logger.warning(
            "payment_signature_invalid",
            booking_id=booking_id,
            order_id=order_id,
            user_id=principal.user_id,
        )
        raise InvalidSignature("Invalid payment signature")

    booking = await booking_repository.get(db, booking_id)
    state_machine.confirm_payment(booking, order_id, payment_id, signature, clock)
    await db.commit()
    await db.refresh(booking)

    record_payment_verification(True)
    logger.info(
        "payment_verified",
        booking_id=booking_id,
        order_id=order_id,
        payment_id=payment_id,
        user_id=principal.user_id,
    )
    return booking
