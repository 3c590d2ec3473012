from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Table,
)
from sqlalchemy.orm import Mapped, relationship

from app.core.database import Base
from app.core.utils import current_time, join_list, split_list

if TYPE_CHECKING:
    from app.api.categories.models import Category
    from app.api.networks.models import Network

# Association table for store-category many-to-many relationship
store_categories = Table(
    'store_categories',
    Base.metadata,
    Column('store_id', Integer, ForeignKey('stores.id'), primary_key=True),
    Column('category_id', Integer, ForeignKey('categories.id'), primary_key=True),
)


class Store(Base):
    __tablename__ = 'stores'

    id = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
        unique=True,
        index=True,
    )
    name = Column(String, index=True, nullable=False)
    slug = Column(String, index=True, nullable=False, unique=True)
    image = Column(String, nullable=False)
    description = Column(String)
    store_network_url = Column(String)
    direct_url = Column(String)
    total_coupon_used_times = Column(Integer, nullable=False, default=0)

    meta_title = Column(String)
    meta_description = Column(String)
    _meta_keywords = Column('meta_keywords', String)
    _focus_keywords = Column('focus_keywords', String)

    is_popular = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)

    network_id = Column(Integer, ForeignKey('networks.id'), nullable=True)
    network: Mapped[Optional['Network']] = relationship(
        'Network', back_populates='stores', lazy='joined'
    )
    categories: Mapped[List['Category']] = relationship(
        'Category',
        secondary=store_categories,
        back_populates='stores',
        lazy='selectin',
    )

    created_at = Column(DateTime, default=current_time)
    updated_at = Column(DateTime, default=current_time, onupdate=current_time)

    @property
    def meta_keywords(self) -> list[str]:
        return split_list(self._meta_keywords)

    @meta_keywords.setter
    def meta_keywords(self, value) -> None:
        self._meta_keywords = join_list(value)

    @property
    def focus_keywords(self) -> list[str]:
        return split_list(self._focus_keywords)

    @focus_keywords.setter
    def focus_keywords(self, value) -> None:
        self._focus_keywords = join_list(value)

    @property
    def affiliate_url(self) -> Optional[str]:
        """URL coupons of this store redeem through by default."""
        if self.network_id:
            return self.store_network_url or (
                self.network.store_network_url if self.network else None
            )
        return self.direct_url
