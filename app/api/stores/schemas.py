from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.utils import normalize_slug


class StoreBase(BaseModel):
    name: str = Field(min_length=3, max_length=100)
    slug: Optional[str] = None
    image: str = Field(min_length=1)
    description: Optional[str] = None
    categories: List[int] = []
    network_id: Optional[int] = None
    store_network_url: Optional[str] = None
    direct_url: Optional[str] = None
    total_coupon_used_times: Optional[int] = Field(default=0, ge=0)

    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    meta_keywords: Optional[List[str]] = None
    focus_keywords: Optional[List[str]] = None

    is_popular: Optional[bool] = False
    is_active: Optional[bool] = True

    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator('slug')
    @classmethod
    def clean_slug(cls, value: Optional[str]) -> Optional[str]:
        return normalize_slug(value) if value else None


class StoreCreate(StoreBase):
    pass


class StoreUpdate(StoreBase):
    name: Optional[str] = Field(default=None, min_length=3, max_length=100)
    image: Optional[str] = None
    categories: Optional[List[int]] = None


class Store(StoreBase):
    id: int
    slug: str
    meta_keywords: List[str] = []
    focus_keywords: List[str] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(
        from_attributes=True,
    )

    @field_validator('categories', mode='before')
    @classmethod
    def category_ids(cls, value):
        return [getattr(c, 'id', c) for c in value or []]


class StoreWithCoupons(Store):
    coupons: List['CouponWithStore'] = []


class StoreFilter(BaseModel):
    id_in: Optional[List[int]] = None
    is_active: Optional[bool] = None
    is_popular: Optional[bool] = None
    network_id: Optional[int] = None


class CouponCount(BaseModel):
    store_id: int
    total: int


from app.api.coupons.schemas import CouponWithStore  # noqa: E402

StoreWithCoupons.model_rebuild()
