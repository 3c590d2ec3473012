from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.utils import normalize_slug


class CategoryBase(BaseModel):
    name: str = Field(min_length=2, max_length=50)
    slug: str = Field(min_length=1)
    description: Optional[str] = None
    is_popular: Optional[bool] = False
    is_trending: Optional[bool] = False

    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator('slug')
    @classmethod
    def clean_slug(cls, value: str) -> str:
        return normalize_slug(value)


class CategoryCreate(CategoryBase):
    pass


class CategoryUpdate(CategoryBase):
    name: Optional[str] = Field(default=None, min_length=2, max_length=50)
    slug: Optional[str] = None

    @field_validator('slug')
    @classmethod
    def clean_slug(cls, value: Optional[str]) -> Optional[str]:
        return normalize_slug(value) if value else value


class Category(CategoryBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(
        from_attributes=True,
    )


class CategoryWithCounts(Category):
    total_stores: int
    total_coupons: int


class CategoryFilter(BaseModel):
    id_in: Optional[List[int]] = None
    is_popular: Optional[bool] = None
    is_trending: Optional[bool] = None
