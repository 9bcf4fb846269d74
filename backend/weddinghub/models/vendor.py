"""
Vendor model: a business offering services for events.

Key design decisions:
- Unique constraint on user_id: one vendor profile per user, enforced by the
  database rather than by a read-then-insert check
- rating_average / rating_count are derived fields written only by the
  rating aggregator
"""

from sqlalchemy import Column, Integer, String, Boolean, Float, ForeignKey, UniqueConstraint, CheckConstraint, Index, Numeric

from weddinghub.db.base import Base, TimestampMixin

VENDOR_CATEGORIES = (
    "Tent House",
    "DJ",
    "Catering",
    "Confectioner",
    "Photography",
    "Videography",
    "Decoration",
    "Mehendi Artist",
    "Makeup Artist",
    "Bridal Wear",
    "Groom Wear",
    "Jewelry",
    "Florist",
    "Transportation",
    "Wedding Planner",
    "Sound System",
    "Generator",
    "Lighting",
    "Furniture",
    "Other",
)


class Vendor(Base, TimestampMixin):
    __tablename__ = "vendors"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    business_name = Column(String(255), nullable=False)
    category = Column(String(64), nullable=False)
    description = Column(String(2000), nullable=True)
    city = Column(String(120), nullable=False)
    price_min = Column(Numeric(14, 2, asdecimal=False), nullable=True)
    price_max = Column(Numeric(14, 2, asdecimal=False), nullable=True)
    price_currency = Column(String(3), nullable=False, default="INR")
    rating_average = Column(Float, nullable=False, default=0)
    rating_count = Column(Integer, nullable=False, default=0)
    availability = Column(Boolean, nullable=False, default=True)
    is_verified = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        UniqueConstraint("user_id", name="uq_vendor_user"),
        CheckConstraint("rating_average >= 0 AND rating_average <= 5", name="check_vendor_rating_range"),
        CheckConstraint("rating_count >= 0", name="check_vendor_rating_count"),
        Index("ix_vendors_category", "category"),
        Index("ix_vendors_city", "city"),
    )

    def __repr__(self) -> str:
        return f"<Vendor(id={self.id}, name={self.business_name}, rating={self.rating_average})>"
