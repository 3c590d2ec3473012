from typing import TYPE_CHECKING, List

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.orm import Mapped, relationship

from app.core.database import Base
from app.core.utils import current_time

if TYPE_CHECKING:
    from app.api.stores.models import Store


class Category(Base):
    __tablename__ = 'categories'

    id = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
        unique=True,
        index=True,
    )
    name = Column(String, unique=True, index=True, nullable=False)
    slug = Column(String, unique=True, index=True, nullable=False)
    description = Column(String)
    is_popular = Column(Boolean, nullable=False, default=False)
    is_trending = Column(Boolean, nullable=False, default=False)

    stores: Mapped[List['Store']] = relationship(
        'Store',
        secondary='store_categories',
        back_populates='categories',
        viewonly=True,
    )

    created_at = Column(DateTime, default=current_time)
    updated_at = Column(DateTime, default=current_time, onupdate=current_time)
