from sqlalchemy import Boolean, Column, DateTime, Integer, String

from app.core.database import Base
from app.core.utils import current_time


class Coupon(Base):
    __tablename__ = 'coupons'

    id = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
        unique=True,
        index=True,
    )
    title = Column(String, nullable=False)
    description = Column(String)
    coupon_type = Column(String, index=True, nullable=False)
    status = Column(String, nullable=False)
    coupon_code = Column(String, nullable=False)
    expiration_date = Column(DateTime, nullable=True)
    coupon_url = Column(String)
    discount = Column(String)
    uses = Column(Integer, nullable=False, default=0)
    verified = Column(Boolean, nullable=False, default=False)
    is_top_one = Column(Boolean, index=True, nullable=False, default=False)
    position = Column(Integer, nullable=False, default=0)

    # Deleting a store does not cascade to its coupons, so there is no
    # foreign key constraint here.
    store_id = Column(Integer, index=True, nullable=False)
    store_name = Column(String)

    created_at = Column(DateTime, default=current_time)
    updated_at = Column(DateTime, default=current_time, onupdate=current_time)
