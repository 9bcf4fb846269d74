"""
Authorization resolver interface.
Every role answers the same capability questions about a booking.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from weddinghub.models.booking import Booking
from weddinghub.services.booking_repository import BookingFilter


@dataclass(frozen=True)
class Principal:
    """The authenticated identity behind a request."""

    user_id: int
    role: str
    vendor_id: Optional[int] = None


class AuthorizationResolver(ABC):
    """
    Interface for booking access decisions.

    Implementations:
    - AdminResolver: every booking
    - VendorResolver: bookings placed with the principal's vendor profile
    - CustomerResolver: bookings the principal created
    - DenyAllResolver: unknown roles
    """

    def __init__(self, principal: Principal):
        self.principal = principal

    @abstractmethod
    def list_scope(self, status: Optional[str] = None, event_id: Optional[int] = None) -> Optional[BookingFilter]:
        """Filter selecting the bookings this principal lists, or None for none at all."""
        pass

    @abstractmethod
    def can_read(self, booking: Booking) -> bool:
        pass

    @abstractmethod
    def can_write(self, booking: Booking) -> bool:
        pass

    def can_delete(self, booking: Booking) -> bool:
        """Only the customer who placed the booking, or an admin, may delete it."""
        return booking.user_id == self.principal.user_id
