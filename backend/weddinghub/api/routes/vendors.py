"""
Vendor endpoints with Redis caching on the listing.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from weddinghub.api.deps import get_current_principal
from weddinghub.core.clock import Clock, get_clock
from weddinghub.core.logging import get_logger
from weddinghub.db.session import get_db
from weddinghub.models.vendor import VENDOR_CATEGORIES
from weddinghub.schemas.vendor import VendorCreate, VendorResponse, VendorUpdate
from weddinghub.services import vendor_service
from weddinghub.services.authorization import Principal
from weddinghub.services.cache_service import (
    get_cached_vendors,
    invalidate_vendor_cache,
    make_vendor_list_key,
    set_cached_vendors,
)

logger = get_logger(__name__)
router = APIRouter(prefix="/vendors", tags=["Vendors"])


@router.get("/", response_model=list[VendorResponse])
async def list_vendors_endpoint(
    category: Optional[str] = Query(None),
    city: Optional[str] = Query(None, max_length=120),
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    db: AsyncSession = Depends(get_db),
):
    """
    Public vendor listing, best rated first.
    Cached in Redis; the cache is dropped whenever a rating is re-aggregated.
    """
    key = make_vendor_list_key(category, city, min_price, max_price)
    cached = await get_cached_vendors(key)
    if cached is not None:
        logger.info("vendors_list_cache_hit", key=key)
        return [VendorResponse(**item) for item in cached]

    vendors = await vendor_service.list_vendors(db, category, city, min_price, max_price)
    response = [VendorResponse.from_vendor(vendor) for vendor in vendors]

    await set_cached_vendors(key, [item.model_dump(mode="json") for item in response])
    return response


@router.get("/categories", response_model=list[str])
async def list_categories():
    return list(VENDOR_CATEGORIES)


@router.get("/{vendor_id}", response_model=VendorResponse)
async def get_vendor_endpoint(
    vendor_id: int,
    db: AsyncSession = Depends(get_db),
):
    vendor = await vendor_service.get_vendor(db, vendor_id)
    return VendorResponse.from_vendor(vendor)


@router.post("/", response_model=VendorResponse, status_code=status.HTTP_201_CREATED)
async def create_vendor_endpoint(
    vendor_data: VendorCreate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Create the caller's vendor profile. One profile per user."""
    vendor = await vendor_service.create_vendor(db, vendor_data, principal.user_id, clock)
    await invalidate_vendor_cache()
    return VendorResponse.from_vendor(vendor)


@router.put("/{vendor_id}", response_model=VendorResponse)
async def update_vendor_endpoint(
    vendor_id: int,
    vendor_update: VendorUpdate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    vendor = await vendor_service.get_vendor(db, vendor_id)
    vendor_service.ensure_vendor_access(principal, vendor)
    vendor = await vendor_service.update_vendor(db, vendor, vendor_update.model_dump(exclude_unset=True), clock)
    await invalidate_vendor_cache()
    return VendorResponse.from_vendor(vendor)


@router.delete("/{vendor_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_vendor_endpoint(
    vendor_id: int,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Delete a vendor profile. The owner reverts to a customer unless they are an admin."""
    vendor = await vendor_service.get_vendor(db, vendor_id)
    vendor_service.ensure_vendor_access(principal, vendor)
    await vendor_service.delete_vendor(db, vendor, clock)
    await invalidate_vendor_cache()
