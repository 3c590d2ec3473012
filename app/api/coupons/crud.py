from typing import List, Optional, Tuple

from sqlalchemy import select, update
from sqlalchemy.orm import Query, Session

from app.api.base_crud import CRUDBase
from app.api.coupons import catalog, models, schemas
from app.api.coupons.discounts import derive_discount, discount_tier
from app.api.stores.crud import store as store_crud
from app.api.stores.models import Store
from app.core.exceptions.validation_exceptions import FieldValidationError
from app.core.logger import logger


def to_coupon_with_store(
    coupon: models.Coupon, store: Optional[Store]
) -> schemas.CouponWithStore:
    """Attach the store projection to a coupon; a missing store becomes None."""
    data = schemas.Coupon.model_validate(coupon).model_dump()
    projection = schemas.StoreProjection.model_validate(store) if store else None
    display_name = coupon.store_name or (
        projection.name if projection else schemas.UNKNOWN_STORE_NAME
    )
    return schemas.CouponWithStore(
        **data,
        store=projection,
        display_store_name=display_name,
        discount_tier=discount_tier(coupon.discount),
    )


class CRUDCoupon(
    CRUDBase[models.Coupon, schemas.CouponCreate, schemas.CouponUpdate]
):
    def _prepare_data(
        self, db: Session, obj: schemas.CouponCreate, **kwargs
    ) -> dict:
        data = obj.model_dump(mode='json', **kwargs)
        data['expiration_date'] = obj.expiration_date
        if data.get('title') and data.get('discount') is None:
            data['discount'] = derive_discount(data['title'])
        return data

    def _newest_first(self, query: Query) -> Query:
        return query.order_by(self.model.created_at.desc(), self.model.id.desc())

    def _default_coupon_url(self, db: Session, data: dict) -> dict:
        if not data.get('coupon_url'):
            store = store_crud.get(db, data['store_id'])
            data['coupon_url'] = store.affiliate_url if store else None
        return data

    def create(self, db: Session, obj: schemas.CouponCreate) -> models.Coupon:
        data = self._default_coupon_url(db, self._prepare_data(db, obj))
        db_obj = self.model(**data)
        db.add(db_obj)
        db_obj = self._commit(db, db_obj)
        logger.info('Coupon created: %s (store %s)', db_obj.id, db_obj.store_id)
        store_crud.refresh_meta_title(db, db_obj.store_id)
        return db_obj

    def get_all(self, db: Session) -> List[models.Coupon]:
        return self._newest_first(db.query(self.model)).all()

    def update(
        self, db: Session, id: int, obj: schemas.CouponUpdate
    ) -> Optional[models.Coupon]:
        """Replace every field of the coupon, None when it does not exist."""
        db_obj = self.get(db, id)
        if not db_obj:
            return None

        previous_store_id = db_obj.store_id
        data = self._default_coupon_url(db, self._prepare_data(db, obj))
        for field, value in data.items():
            setattr(db_obj, field, value)

        db_obj = self._commit(db, db_obj)
        logger.info('Coupon updated: %s', id)
        store_crud.refresh_meta_title(db, db_obj.store_id)
        if previous_store_id != db_obj.store_id:
            store_crud.refresh_meta_title(db, previous_store_id)
        return db_obj

    def update_inline(
        self, db: Session, id: int, obj: schemas.CouponInlineUpdate
    ) -> Optional[models.Coupon]:
        db_obj = self.get(db, id)
        if not db_obj:
            return None

        data = obj.model_dump(exclude_unset=True)
        if data.get('title'):
            data['discount'] = derive_discount(data['title'])
        for field, value in data.items():
            setattr(db_obj, field, value)

        db_obj = self._commit(db, db_obj)
        logger.info('Coupon %s updated inline: %s', id, sorted(data))
        return db_obj

    def update_positions(
        self, db: Session, positions: List[schemas.CouponPosition]
    ) -> int:
        if not positions:
            raise FieldValidationError(
                {'positions': ['Invalid or empty position data.']}
            )

        modified = 0
        for item in positions:
            result = db.execute(
                update(self.model)
                .where(self.model.id == item.id, self.model.position != item.position)
                .values(position=item.position)
                .execution_options(synchronize_session=False)
            )
            modified += result.rowcount
        db.commit()
        logger.info('Updated %s coupon positions', modified)
        return modified

    def delete(self, db: Session, id: int) -> Optional[models.Coupon]:
        deleted = super().delete(db, id)
        if deleted:
            store_crud.refresh_meta_title(db, deleted.store_id)
        return deleted

    def get_top(
        self, db: Session, coupon_type: schemas.CouponType
    ) -> List[models.Coupon]:
        query = db.query(self.model).filter(
            self.model.coupon_type == coupon_type.value,
            self.model.is_top_one.is_(True),
        )
        return self._newest_first(query).all()

    def get_top_deals_by_uses(self, db: Session, limit: int = 10) -> List[models.Coupon]:
        return (
            db.query(self.model)
            .filter(self.model.coupon_type == schemas.CouponType.DEAL.value)
            .order_by(self.model.uses.desc(), self.model.created_at.desc())
            .limit(limit)
            .all()
        )

    def get_by_store(self, db: Session, store_id: int) -> List[models.Coupon]:
        return (
            db.query(self.model)
            .filter(self.model.store_id == store_id)
            .order_by(
                self.model.position,
                self.model.created_at.desc(),
                self.model.id.desc(),
            )
            .all()
        )

    def record_use(self, db: Session, coupon_id: int) -> bool:
        """
        Count one redemption of a coupon.

        The increments run as UPDATE ... SET uses = uses + 1 inside the
        database so that concurrent redemptions are never lost. The owning
        store's running total is bumped in the same transaction.
        """
        result = db.execute(
            update(self.model)
            .where(self.model.id == coupon_id)
            .values(uses=self.model.uses + 1)
            .execution_options(synchronize_session=False)
        )
        if not result.rowcount:
            db.rollback()
            logger.error('Cannot record use, coupon not found: %s', coupon_id)
            return False

        store_id = (
            select(self.model.store_id)
            .where(self.model.id == coupon_id)
            .scalar_subquery()
        )
        db.execute(
            update(Store)
            .where(Store.id == store_id)
            .values(total_coupon_used_times=Store.total_coupon_used_times + 1)
            .execution_options(synchronize_session=False)
        )
        db.commit()
        logger.info('Recorded use of coupon %s', coupon_id)
        return True

    # Join stage

    def _joined(self, db: Session) -> Query:
        query = db.query(self.model, Store).outerjoin(
            Store, Store.id == self.model.store_id
        )
        return self._newest_first(query)

    def _with_stores(self, rows) -> List[schemas.CouponWithStore]:
        return [to_coupon_with_store(coupon, store) for coupon, store in rows]

    def get_with_stores(self, db: Session) -> List[schemas.CouponWithStore]:
        return self._with_stores(self._joined(db).all())

    def get_top_with_stores(
        self, db: Session, coupon_type: schemas.CouponType
    ) -> List[schemas.CouponWithStore]:
        rows = (
            self._joined(db)
            .filter(
                self.model.coupon_type == coupon_type.value,
                self.model.is_top_one.is_(True),
            )
            .all()
        )
        return self._with_stores(rows)

    def get_by_store_with_store(
        self, db: Session, store: Store
    ) -> List[schemas.CouponWithStore]:
        return [to_coupon_with_store(c, store) for c in self.get_by_store(db, store.id)]

    def query_catalog(
        self,
        db: Session,
        criteria: schemas.CouponCatalogFilter,
        sort_by: schemas.SortPolicy = schemas.SortPolicy.RELEVANCE,
        page: int = 1,
        per_page: Optional[int] = 10,
    ) -> Tuple[catalog.Page, int]:
        """Run join, filter, sort and paginate; returns the page and the filtered total."""
        coupons = self.get_with_stores(db)
        coupons = catalog.filter_coupons(coupons, criteria)
        coupons = catalog.sort_coupons(coupons, sort_by)
        return catalog.paginate(coupons, page, per_page), len(coupons)


coupon = CRUDCoupon(models.Coupon)
