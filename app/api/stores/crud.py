import re
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.api.base_crud import CRUDBase
from app.api.categories.models import Category
from app.api.coupons.discounts import parse_numeric_discount
from app.api.coupons.models import Coupon
from app.api.seo.crud import seo_template as seo_crud
from app.api.seo.schemas import TemplateType
from app.api.seo.templating import render_store_seo
from app.api.stores import models, schemas
from app.core.logger import logger

SEO_FIELDS = ('meta_title', 'meta_description', 'meta_keywords', 'focus_keywords')
# Matches a previous discount with either symbol and its trailing whitespace
EXISTING_DISCOUNT_PATTERN = re.compile(r'[%$]?\d+\s*[%$]?\s*')


def apply_max_discount(meta_title: str, discounts: List[Optional[str]]) -> str:
    """
    Write the best numeric discount among `discounts` into a store meta title.

    Every `d_c` placeholder is replaced; without a placeholder the first
    numeric discount already in the title is replaced, otherwise the discount
    is appended as "- <discount> Off". Dollar amounts read "$25", percentages
    read "40%". Titles are left untouched when no discount carries a number.
    """
    best = None
    for discount in discounts:
        parsed = parse_numeric_discount(discount)
        if parsed and (best is None or parsed[0] > best[0]):
            best = parsed

    if best is None:
        return meta_title

    value, symbol = best
    discount_text = f'${value} ' if symbol == '$' else f'{value}% '
    if 'd_c' in meta_title:
        return meta_title.replace('d_c', discount_text)
    if EXISTING_DISCOUNT_PATTERN.search(meta_title):
        return EXISTING_DISCOUNT_PATTERN.sub(
            lambda _: discount_text, meta_title, count=1
        )
    return f'{meta_title} - {discount_text}Off'


class CRUDStore(CRUDBase[models.Store, schemas.StoreCreate, schemas.StoreUpdate]):
    def _load_categories(self, db: Session, ids: List[int]) -> List[Category]:
        if not ids:
            return []
        return db.query(Category).filter(Category.id.in_(ids)).all()

    def _seo_defaults(self, db: Session, name: str) -> dict:
        template = seo_crud.get_latest(db, TemplateType.STORES)
        return render_store_seo(template, name).model_dump()

    def create(self, db: Session, obj: schemas.StoreCreate) -> models.Store:
        data = obj.model_dump(exclude={'categories'})
        rendered = self._seo_defaults(db, data['name'])
        for field in SEO_FIELDS:
            if not data.get(field):
                data[field] = rendered[field]
        data['slug'] = data.get('slug') or rendered['slug']

        db_obj = self.model(**data)
        db_obj.categories = self._load_categories(db, obj.categories)
        db.add(db_obj)
        db_obj = self._commit(db, db_obj)
        logger.info('Store created: %s (%s)', db_obj.id, db_obj.slug)
        return db_obj

    def update(
        self, db: Session, id: int, obj: schemas.StoreUpdate
    ) -> Optional[models.Store]:
        db_obj = self.get(db, id)
        if not db_obj:
            return None

        data = obj.model_dump(exclude_unset=True, exclude={'categories'})
        if data.get('name') and data['name'] != db_obj.name:
            rendered = self._seo_defaults(db, data['name'])
            for field in SEO_FIELDS + ('slug',):
                if not data.get(field):
                    data[field] = rendered[field]

        for field, value in data.items():
            setattr(db_obj, field, value)
        if obj.categories is not None:
            db_obj.categories = self._load_categories(db, obj.categories)

        db_obj = self._commit(db, db_obj)
        logger.info('Store updated: %s', id)
        return db_obj

    def get_by_slug(self, db: Session, slug: str) -> Optional[models.Store]:
        return db.query(self.model).filter(self.model.slug == slug).first()

    def get_active(self, db: Session) -> List[models.Store]:
        return self.find(db, limit=None, filters=schemas.StoreFilter(is_active=True))

    def get_popular(self, db: Session) -> List[models.Store]:
        return self.find(
            db,
            limit=None,
            filters=schemas.StoreFilter(is_popular=True, is_active=True),
        )

    def get_recently_updated(self, db: Session, limit: int = 10) -> List[models.Store]:
        return self.find(db, limit=limit, sort_by='updated_at')

    def get_by_network(self, db: Session, network_id: int) -> List[models.Store]:
        return self.find(
            db, limit=None, filters=schemas.StoreFilter(network_id=network_id)
        )

    def get_by_categories(
        self, db: Session, category_ids: List[int]
    ) -> List[models.Store]:
        if not category_ids:
            return []
        return (
            db.query(self.model)
            .filter(self.model.categories.any(Category.id.in_(category_ids)))
            .order_by(self.model.created_at.desc(), self.model.id.desc())
            .all()
        )

    def count_coupons(self, db: Session, store_id: int) -> int:
        return (
            db.query(func.count(Coupon.id)).filter(Coupon.store_id == store_id).scalar()
        )

    def refresh_meta_title(self, db: Session, store_id: Optional[int]) -> None:
        """Rewrite the store meta title with the best discount among its coupons."""
        if not store_id:
            return
        store = db.get(self.model, store_id)
        if not store or not store.meta_title:
            logger.warning('Skipping meta title refresh for store %s', store_id)
            return

        discounts = [
            d for (d,) in db.query(Coupon.discount).filter(Coupon.store_id == store_id)
        ]
        meta_title = apply_max_discount(store.meta_title, discounts)
        if meta_title != store.meta_title:
            store.meta_title = meta_title
            db.commit()
            logger.info('Store %s meta title set to: %s', store_id, meta_title)


store = CRUDStore(models.Store)
