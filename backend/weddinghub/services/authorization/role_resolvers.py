"""
Per-role authorization resolvers.
"""

from typing import Optional

from weddinghub.models.booking import Booking
from weddinghub.services.authorization.resolver import AuthorizationResolver
from weddinghub.services.booking_repository import BookingFilter


class AdminResolver(AuthorizationResolver):
    """Admins may act on any booking."""

    def list_scope(self, status: Optional[str] = None, event_id: Optional[int] = None) -> Optional[BookingFilter]:
        # Listing stays scoped to bookings the admin placed; single reads are unrestricted
        return BookingFilter(owner_user_id=self.principal.user_id, status=status, event_id=event_id)

    def can_read(self, booking: Booking) -> bool:
        return True

    def can_write(self, booking: Booking) -> bool:
        return True

    def can_delete(self, booking: Booking) -> bool:
        return True


class VendorResolver(AuthorizationResolver):
    """
    Vendors see and update bookings placed with their own profile.
    A vendor without a profile matches nothing.
    """

    def list_scope(self, status: Optional[str] = None, event_id: Optional[int] = None) -> Optional[BookingFilter]:
        if self.principal.vendor_id is None:
            return None
        return BookingFilter(owner_vendor_id=self.principal.vendor_id, status=status, event_id=event_id)

    def _owns(self, booking: Booking) -> bool:
        vendor_id = self.principal.vendor_id
        return vendor_id is not None and vendor_id == booking.vendor_id

    def can_read(self, booking: Booking) -> bool:
        return self._owns(booking)

    def can_write(self, booking: Booking) -> bool:
        return self._owns(booking)


class CustomerResolver(AuthorizationResolver):
    """Customers act on the bookings they created."""

    def list_scope(self, status: Optional[str] = None, event_id: Optional[int] = None) -> Optional[BookingFilter]:
        return BookingFilter(owner_user_id=self.principal.user_id, status=status, event_id=event_id)

    def can_read(self, booking: Booking) -> bool:
        return booking.user_id == self.principal.user_id

    def can_write(self, booking: Booking) -> bool:
        return booking.user_id == self.principal.user_id


class DenyAllResolver(AuthorizationResolver):

    def list_scope(self, status: Optional[str] = None, event_id: Optional[int] = None) -> Optional[BookingFilter]:
        return None

    def can_read(self, booking: Booking) -> bool:
        return False

    def can_write(self, booking: Booking) -> bool:
        return False

    def can_delete(self, booking: Booking) -> bool:
        return False
