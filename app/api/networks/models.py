from typing import TYPE_CHECKING, List

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import Mapped, relationship

from app.core.database import Base
from app.core.utils import current_time

if TYPE_CHECKING:
    from app.api.stores.models import Store


class Network(Base):
    __tablename__ = 'networks'

    id = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
        unique=True,
        index=True,
    )
    network_name = Column(String, unique=True, index=True, nullable=False)
    store_network_url = Column(String, unique=True, nullable=False)

    stores: Mapped[List['Store']] = relationship('Store', back_populates='network')

    created_at = Column(DateTime, default=current_time)
    updated_at = Column(DateTime, default=current_time, onupdate=current_time)
