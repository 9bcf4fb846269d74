"""
Unit tests for the per-role authorization resolvers.
"""

import pytest

from weddinghub.core.exceptions import Unauthorized
from weddinghub.models.booking import Booking
from weddinghub.services.authorization import (
    AdminResolver,
    CustomerResolver,
    DenyAllResolver,
    Principal,
    VendorResolver,
)
from weddinghub.services.booking_repository import BookingFilter
from weddinghub.services.resolver_factory import (
    ensure_can_delete,
    ensure_can_read,
    ensure_can_write,
    resolver_for,
)

BOOKING = Booking(id=7, event_id=1, vendor_id=5, user_id=100, status="Pending")

CUSTOMER = Principal(user_id=100, role="customer")
OTHER_CUSTOMER = Principal(user_id=101, role="customer")
VENDOR = Principal(user_id=200, role="vendor", vendor_id=5)
OTHER_VENDOR = Principal(user_id=201, role="vendor", vendor_id=6)
VENDOR_WITHOUT_PROFILE = Principal(user_id=202, role="vendor")
ADMIN = Principal(user_id=1, role="admin")


@pytest.mark.parametrize(
    "principal,expected",
    [
        (CUSTOMER, CustomerResolver),
        (VENDOR, VendorResolver),
        (ADMIN, AdminResolver),
        (Principal(user_id=9, role="auditor"), DenyAllResolver),
    ],
)
def test_resolver_for_role(principal, expected):
    assert isinstance(resolver_for(principal), expected)


def test_customer_resolver():
    own = resolver_for(CUSTOMER)
    assert own.can_read(BOOKING) and own.can_write(BOOKING) and own.can_delete(BOOKING)

    other = resolver_for(OTHER_CUSTOMER)
    assert not other.can_read(BOOKING)
    assert not other.can_write(BOOKING)
    assert not other.can_delete(BOOKING)


def test_vendor_resolver():
    owning = resolver_for(VENDOR)
    assert owning.can_read(BOOKING)
    assert owning.can_write(BOOKING)
    # Vendors never delete bookings placed with them
    assert not owning.can_delete(BOOKING)

    for principal in (OTHER_VENDOR, VENDOR_WITHOUT_PROFILE):
        resolver = resolver_for(principal)
        assert not resolver.can_read(BOOKING)
        assert not resolver.can_write(BOOKING)


def test_admin_resolver_allows_everything():
    resolver = resolver_for(ADMIN)
    assert resolver.can_read(BOOKING)
    assert resolver.can_write(BOOKING)
    assert resolver.can_delete(BOOKING)


def test_unknown_role_is_denied():
    resolver = resolver_for(Principal(user_id=100, role="auditor"))
    assert not resolver.can_read(BOOKING)
    assert not resolver.can_delete(BOOKING)
    assert resolver.list_scope() is None


def test_list_scopes():
    assert resolver_for(CUSTOMER).list_scope(status="Pending") == BookingFilter(owner_user_id=100, status="Pending")
    assert resolver_for(VENDOR).list_scope(event_id=3) == BookingFilter(owner_vendor_id=5, event_id=3)
    assert resolver_for(ADMIN).list_scope() == BookingFilter(owner_user_id=1)
    assert resolver_for(VENDOR_WITHOUT_PROFILE).list_scope() is None


def test_booking_filter_needs_one_owner():
    with pytest.raises(ValueError):
        BookingFilter()
    with pytest.raises(ValueError):
        BookingFilter(owner_user_id=1, owner_vendor_id=2)


def test_ensure_helpers_raise_unauthorized():
    ensure_can_read(CUSTOMER, BOOKING)
    ensure_can_write(VENDOR, BOOKING)
    ensure_can_delete(ADMIN, BOOKING)

    with pytest.raises(Unauthorized):
        ensure_can_read(OTHER_CUSTOMER, BOOKING)
    with pytest.raises(Unauthorized):
        ensure_can_write(OTHER_VENDOR, BOOKING)
    with pytest.raises(Unauthorized):
        ensure_can_delete(VENDOR, BOOKING)
