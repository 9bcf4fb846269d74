"""
Pydantic schemas for vendor profiles.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from weddinghub.models.vendor import VENDOR_CATEGORIES


def _strip_blank(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


def _known_category(value: str) -> str:
    if value not in VENDOR_CATEGORIES:
        raise ValueError(f"unknown category '{value}'")
    return value


class VendorCreate(BaseModel):
    business_name: str = Field(..., min_length=1, max_length=255)
    category: str
    description: Optional[str] = Field(None, max_length=2000)
    city: str = Field(..., min_length=1, max_length=120)
    price_min: Optional[float] = Field(None, ge=0)
    price_max: Optional[float] = Field(None, ge=0)
    price_currency: str = Field(default="INR", min_length=3, max_length=3)

    @field_validator("business_name", "city")
    @classmethod
    def strip_blank(cls, value: str) -> str:
        return _strip_blank(value)

    @field_validator("category")
    @classmethod
    def known_category(cls, value: str) -> str:
        return _known_category(value)


class VendorUpdate(BaseModel):
    """
    Partial update of a vendor profile.

    The rating aggregate, verification flag and owner are not accepted; the
    aggregate is written only by the rating service.
    """

    business_name: Optional[str] = Field(None, min_length=1, max_length=255)
    category: Optional[str] = None
    description: Optional[str] = Field(None, max_length=2000)
    city: Optional[str] = Field(None, min_length=1, max_length=120)
    price_min: Optional[float] = Field(None, ge=0)
    price_max: Optional[float] = Field(None, ge=0)
    price_currency: Optional[str] = Field(None, min_length=3, max_length=3)
    availability: Optional[bool] = None

    @field_validator("business_name", "city")
    @classmethod
    def strip_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _strip_blank(value)

    @field_validator("category")
    @classmethod
    def known_category(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _known_category(value)


class VendorRatings(BaseModel):
    average: float
    count: int


class VendorResponse(BaseModel):
    id: int
    user_id: int
    business_name: str
    category: str
    description: Optional[str]
    city: str
    price_min: Optional[float]
    price_max: Optional[float]
    price_currency: str
    ratings: VendorRatings
    availability: bool
    is_verified: bool
    created_at: datetime

    @classmethod
    def from_vendor(cls, vendor) -> "VendorResponse":
        return cls(
            id=vendor.id,
            user_id=vendor.user_id,
            business_name=vendor.business_name,
            category=vendor.category,
            description=vendor.description,
            city=vendor.city,
            price_min=vendor.price_min,
            price_max=vendor.price_max,
            price_currency=vendor.price_currency,
            ratings=VendorRatings(average=vendor.rating_average, count=vendor.rating_count),
            availability=vendor.availability,
            is_verified=vendor.is_verified,
            created_at=vendor.created_at,
        )
