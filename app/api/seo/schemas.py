from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.utils import normalize_slug


class TemplateType(str, Enum):
    SETTINGS = 'settings'
    BLOGS = 'blogs'
    EVENTS = 'events'
    STORES = 'stores'


class SEOTemplateBase(BaseModel):
    meta_title: str = Field(min_length=3, max_length=150)
    meta_description: str = Field(min_length=10, max_length=300)
    meta_keywords: List[str] = []
    focus_keywords: List[str] = []
    slug: str = Field(min_length=1)
    template_type: TemplateType

    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator('slug')
    @classmethod
    def clean_slug(cls, value: str) -> str:
        return normalize_slug(value)


class SEOTemplateCreate(SEOTemplateBase):
    pass


class SEOTemplate(SEOTemplateBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(
        from_attributes=True,
    )


class SEOTemplateFilter(BaseModel):
    template_type: Optional[TemplateType] = None


class RenderedSEO(BaseModel):
    meta_title: str
    meta_description: str
    meta_keywords: List[str] = []
    focus_keywords: List[str] = []
    slug: str
