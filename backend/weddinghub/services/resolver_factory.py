"""
Authorization resolver factory.
Maps a principal's role to its resolver and enforces decisions.
"""

from weddinghub.core.exceptions import Unauthorized
from weddinghub.core.logging import get_logger
from weddinghub.core.metrics import record_authorization_denial
from weddinghub.models.booking import Booking
from weddinghub.models.user import ROLE_ADMIN, ROLE_CUSTOMER, ROLE_VENDOR
from weddinghub.services.authorization import (
    AdminResolver,
    AuthorizationResolver,
    CustomerResolver,
    DenyAllResolver,
    Principal,
    VendorResolver,
)

logger = get_logger(__name__)

_RESOLVERS: dict[str, type[AuthorizationResolver]] = {
    ROLE_ADMIN: AdminResolver,
    ROLE_VENDOR: VendorResolver,
    ROLE_CUSTOMER: CustomerResolver,
}


def resolver_for(principal: Principal) -> AuthorizationResolver:
    resolver_cls = _RESOLVERS.get(principal.role, DenyAllResolver)
    return resolver_cls(principal)


def _deny(principal: Principal, booking: Booking, action: str) -> None:
    record_authorization_denial(principal.role, action)
    logger.warning(
        "booking_access_denied",
        booking_id=booking.id,
        user_id=principal.user_id,
        role=principal.role,
        action=action,
    )
    raise Unauthorized("Not authorized")


def ensure_can_read(principal: Principal, booking: Booking) -> None:
    if not resolver_for(principal).can_read(booking):
        _deny(principal, booking, "read")


def ensure_can_write(principal: Principal, booking: Booking) -> None:
    if not resolver_for(principal).can_write(booking):
        _deny(principal, booking, "write")


def ensure_can_delete(principal: Principal, booking: Booking) -> None:
    if not resolver_for(principal).can_delete(booking):
        _deny(principal, booking, "delete")
