"""
Vendor rating aggregation.

The vendor's displayed rating is derived data: the mean of every rated
booking placed with that vendor. It is recomputed from scratch on each
rating change and whenever a rated booking is deleted, so repeated runs over
the same bookings give the same result.
Two concurrent recomputes may read different snapshots; the last writer wins
and the next rating change corrects any drift.
"""

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from weddinghub.core.logging import get_logger
from weddinghub.core.metrics import rating_recomputes
from weddinghub.models.vendor import Vendor
from weddinghub.services import booking_repository
from weddinghub.services.cache_service import invalidate_vendor_cache

logger = get_logger(__name__)


async def recompute(db: AsyncSession, vendor_id: int) -> tuple[float, int]:
    """Recompute and store the vendor's rating. Returns (average, count)."""
    rated = await booking_repository.list_rated_for_vendor(db, vendor_id)

    count = len(rated)
    average = sum(booking.rating for booking in rated) / count if count else 0.0

    await db.execute(
        update(Vendor)
        .where(Vendor.id == vendor_id)
        .values(rating_average=average, rating_count=count)
    )
    await db.commit()
    rating_recomputes.inc()

    logger.info("vendor_rating_recomputed", vendor_id=vendor_id, average=average, count=count)
    await invalidate_vendor_cache()
    return average, count
