from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    TypeAdapter,
    ValidationInfo,
    field_validator,
)

from app.api.coupons.discounts import DiscountTier

DEAL_COUPON_CODE = 'NO_CODE'
UNKNOWN_STORE_NAME = 'Unknown Store'

_http_url = TypeAdapter(HttpUrl)


class CouponType(str, Enum):
    COUPON = 'coupon'
    DEAL = 'deal'


class CouponStatus(str, Enum):
    ACTIVE = 'active'
    EXPIRED = 'expired'


class CatalogTab(str, Enum):
    ALL = 'all'
    PROMO = 'promo'
    DEAL = 'deal'


class SortPolicy(str, Enum):
    RELEVANCE = 'relevance'
    NEWEST = 'newest'
    DISCOUNT_DESC = 'discount_desc'
    DISCOUNT_ASC = 'discount_asc'
    MOST_USED = 'most_used'


class CouponFields(BaseModel):
    title: str
    description: Optional[str] = None
    coupon_type: CouponType
    status: CouponStatus
    coupon_code: Optional[str] = None
    expiration_date: Optional[datetime] = None
    coupon_url: Optional[str] = None
    store_name: Optional[str] = None
    store_id: int
    is_top_one: bool = False
    discount: Optional[str] = None
    uses: int = 0
    verified: bool = False
    position: int = 0


class CouponCreate(CouponFields):
    title: str = Field(min_length=3, max_length=100)
    coupon_code: Optional[str] = Field(default=None, validate_default=True)
    uses: int = Field(default=0, ge=0)

    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator('coupon_code')
    @classmethod
    def check_coupon_code(cls, value: Optional[str], info: ValidationInfo) -> str:
        if info.data.get('coupon_type') == CouponType.DEAL:
            return DEAL_COUPON_CODE
        if not value or len(value) < 2:
            raise ValueError('Coupon code must contain at least 2 characters')
        return value

    @field_validator('expiration_date', mode='before')
    @classmethod
    def empty_expiration_date(cls, value):
        return value or None

    @field_validator('store_id', mode='before')
    @classmethod
    def check_store_id(cls, value):
        if value is None or value == '':
            raise ValueError('Invalid Store ID')
        return value

    @field_validator('coupon_url', 'description', 'store_name', 'discount')
    @classmethod
    def empty_to_none(cls, value: Optional[str]) -> Optional[str]:
        return value or None

    @field_validator('coupon_url')
    @classmethod
    def check_coupon_url(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        try:
            _http_url.validate_python(value)
        except ValueError:
            raise ValueError('Invalid URL')
        return value


class CouponUpdate(CouponCreate):
    pass


class CouponInlineUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=3, max_length=100)
    is_top_one: Optional[bool] = None
    verified: Optional[bool] = None
    discount: Optional[str] = None
    uses: Optional[int] = Field(default=None, ge=0)
    position: Optional[int] = None

    model_config = ConfigDict(str_strip_whitespace=True)


class CouponPosition(BaseModel):
    id: int
    position: int


class CouponPositionsResult(BaseModel):
    modified: int


class Coupon(CouponFields):
    id: int
    coupon_code: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(
        from_attributes=True,
    )


class StoreProjection(BaseModel):
    id: int
    name: str
    image: Optional[str] = None
    slug: str
    categories: List[int] = []
    store_network_url: Optional[str] = None
    direct_url: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    meta_keywords: List[str] = []
    focus_keywords: List[str] = []

    model_config = ConfigDict(
        from_attributes=True,
    )

    @field_validator('categories', mode='before')
    @classmethod
    def category_ids(cls, value):
        return [getattr(c, 'id', c) for c in value or []]


class CouponWithStore(Coupon):
    store: Optional[StoreProjection] = None
    display_store_name: str = UNKNOWN_STORE_NAME
    discount_tier: DiscountTier = DiscountTier.NONE


class CouponCatalogFilter(BaseModel):
    tab: CatalogTab = CatalogTab.ALL
    categories: Optional[List[int]] = None
    verified: bool = False
    codes_only: bool = False
    deals_only: bool = False
    free_shipping: bool = False
