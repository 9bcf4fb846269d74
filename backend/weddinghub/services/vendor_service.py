"""
Vendor profile service.

Profile uniqueness per user is left to the ``uq_vendor_user`` constraint; a
racing second insert surfaces as DuplicateVendorProfile.
"""

from typing import Any, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from weddinghub.core.clock import Clock
from weddinghub.core.exceptions import DuplicateVendorProfile, InvalidMutation, NotFound, Unauthorized, ValidationError
from weddinghub.core.logging import get_logger
from weddinghub.models.booking import Booking
from weddinghub.models.user import ROLE_ADMIN, ROLE_CUSTOMER, ROLE_VENDOR, User
from weddinghub.models.vendor import Vendor
from weddinghub.schemas.vendor import VendorCreate
from weddinghub.services.authorization import Principal

logger = get_logger(__name__)

REQUIRED_FIELDS = frozenset({"business_name", "category", "city", "price_currency", "availability"})


async def create_vendor(db: AsyncSession, vendor_data: VendorCreate, user_id: int, clock: Clock) -> Vendor:
    now = clock()
    vendor = Vendor(
        **vendor_data.model_dump(),
        user_id=user_id,
        rating_average=0,
        rating_count=0,
        availability=True,
        is_verified=False,
        created_at=now,
        updated_at=now,
    )
    db.add(vendor)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.warning("vendor_profile_duplicate", user_id=user_id)
        raise DuplicateVendorProfile("User already has a vendor profile")
    await db.refresh(vendor)

    # Promote the owner so future requests resolve to a vendor principal
    await db.execute(
        update(User)
        .where(User.id == user_id, User.role != ROLE_ADMIN)
        .values(role=ROLE_VENDOR, updated_at=now)
    )
    await db.commit()

    logger.info("vendor_created", vendor_id=vendor.id, user_id=user_id, category=vendor.category)
    return vendor


async def get_vendor(db: AsyncSession, vendor_id: int) -> Vendor:
    # populate_existing: rating columns may have been rewritten by a bulk UPDATE
    result = await db.execute(
        select(Vendor).where(Vendor.id == vendor_id).execution_options(populate_existing=True)
    )
    vendor = result.scalar_one_or_none()

    if not vendor:
        raise NotFound(f"Vendor {vendor_id} not found")
    return vendor


async def find_vendor_id_for_user(db: AsyncSession, user_id: int) -> Optional[int]:
    result = await db.execute(select(Vendor.id).where(Vendor.user_id == user_id))
    return result.scalar_one_or_none()


async def list_vendors(
    db: AsyncSession,
    category: Optional[str] = None,
    city: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
) -> list[Vendor]:
    """Vendors matching the filters, best rated first."""
    query = select(Vendor)
    if category:
        query = query.where(Vendor.category == category)
    if city:
        query = query.where(Vendor.city.ilike(f"%{city}%"))
    if min_price is not None:
        query = query.where(Vendor.price_min >= min_price)
    if max_price is not None:
        query = query.where(Vendor.price_max <= max_price)

    result = await db.execute(
        query.order_by(Vendor.rating_average.desc(), Vendor.created_at.desc(), Vendor.id.desc())
    )
    return list(result.scalars().all())


def ensure_vendor_access(principal: Principal, vendor: Vendor) -> None:
    if vendor.user_id != principal.user_id and principal.role != ROLE_ADMIN:
        raise Unauthorized("Not authorized")


async def update_vendor(db: AsyncSession, vendor: Vendor, patch: dict[str, Any], clock: Clock) -> Vendor:
    nulled = sorted(name for name in REQUIRED_FIELDS if name in patch and patch[name] is None)
    if nulled:
        raise ValidationError(
            "Required vendor fields cannot be cleared",
            errors=[{"field": name, "message": "Field cannot be null"} for name in nulled],
        )

    for field, value in patch.items():
        setattr(vendor, field, value)
    vendor.updated_at = clock()
    await db.commit()
    await db.refresh(vendor)

    logger.info("vendor_updated", vendor_id=vendor.id, changed=sorted(patch))
    return vendor


async def delete_vendor(db: AsyncSession, vendor: Vendor, clock: Clock) -> None:
    """
    Delete a vendor profile and demote its owner back to a customer.

    Bookings keep a foreign key to their vendor, so a profile that has any
    booking is refused.
    """
    result = await db.execute(select(Booking.id).where(Booking.vendor_id == vendor.id).limit(1))
    if result.scalar_one_or_none() is not None:
        raise InvalidMutation("Vendor has bookings and cannot be deleted")

    vendor_id, user_id = vendor.id, vendor.user_id
    await db.delete(vendor)
    await db.execute(
        update(User)
        .where(User.id == user_id, User.role != ROLE_ADMIN)
        .values(role=ROLE_CUSTOMER, updated_at=clock())
    )
    await db.commit()

    logger.info("vendor_deleted", vendor_id=vendor_id, user_id=user_id)
