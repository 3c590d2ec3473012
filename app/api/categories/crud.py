from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.api.base_crud import CRUDBase
from app.api.categories import models, schemas
from app.api.coupons.models import Coupon
from app.api.stores.models import Store, store_categories


class CRUDCategory(
    CRUDBase[models.Category, schemas.CategoryCreate, schemas.CategoryUpdate]
):
    def get_popular(self, db: Session) -> List[models.Category]:
        return self.find(db, limit=None, filters=schemas.CategoryFilter(is_popular=True))

    def get_trending(self, db: Session) -> List[models.Category]:
        return self.find(
            db, limit=None, filters=schemas.CategoryFilter(is_trending=True)
        )

    def get_names(self, db: Session) -> List[str]:
        return [name for (name,) in db.query(self.model.name).all()]

    def get_with_counts(self, db: Session) -> List[schemas.CategoryWithCounts]:
        store_counts = dict(
            db.query(
                store_categories.c.category_id,
                func.count(store_categories.c.store_id),
            )
            .group_by(store_categories.c.category_id)
            .all()
        )
        coupon_counts = dict(
            db.query(store_categories.c.category_id, func.count(Coupon.id))
            .join(Store, Store.id == store_categories.c.store_id)
            .join(Coupon, Coupon.store_id == Store.id)
            .group_by(store_categories.c.category_id)
            .all()
        )

        result = []
        for category in self.find(db, limit=None):
            data = schemas.Category.model_validate(category).model_dump()
            result.append(
                schemas.CategoryWithCounts(
                    **data,
                    total_stores=store_counts.get(category.id, 0),
                    total_coupons=coupon_counts.get(category.id, 0),
                )
            )
        return result

    def delete(self, db: Session, id: int) -> Optional[models.Category]:
        """Detach the category from its stores, then delete it."""
        db.execute(
            store_categories.delete().where(store_categories.c.category_id == id)
        )
        return super().delete(db, id)


category = CRUDCategory(models.Category)
