from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.api.coupons.crud import coupon as coupon_crud
from app.api.stores import schemas
from app.api.stores.crud import store as store_crud
from app.core.database import get_db
from app.core.logger import logger
from app.core.security import require_admin_key

router = APIRouter()


@router.get('/', response_model=list[schemas.Store])
def get_stores(
    filters: schemas.StoreFilter = Depends(),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    return store_crud.find(db=db, skip=skip, limit=limit, filters=filters)


@router.get('/active', response_model=list[schemas.Store])
def get_active_stores(db: Session = Depends(get_db)):
    return store_crud.get_active(db=db)


@router.get('/popular', response_model=list[schemas.Store])
def get_popular_stores(db: Session = Depends(get_db)):
    return store_crud.get_popular(db=db)


@router.get('/recent', response_model=list[schemas.Store])
def get_recently_updated_stores(
    limit: int = Query(default=10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    return store_crud.get_recently_updated(db=db, limit=limit)


@router.get('/by-categories', response_model=list[schemas.Store])
def get_stores_by_categories(
    category_ids: List[int] = Query(default=[]),
    db: Session = Depends(get_db),
):
    return store_crud.get_by_categories(db=db, category_ids=category_ids)


@router.get('/network/{network_id}', response_model=list[schemas.Store])
def get_stores_by_network(network_id: int, db: Session = Depends(get_db)):
    return store_crud.get_by_network(db=db, network_id=network_id)


@router.get('/slug/{slug}', response_model=schemas.StoreWithCoupons)
def get_store_by_slug(slug: str, db: Session = Depends(get_db)):
    store = store_crud.get_by_slug(db=db, slug=slug)
    if not store:
        raise HTTPException(status_code=404, detail='Store not found')

    data = schemas.Store.model_validate(store).model_dump()
    coupons = coupon_crud.get_by_store_with_store(db=db, store=store)
    return schemas.StoreWithCoupons(**data, coupons=coupons)


@router.get('/{store_id}', response_model=schemas.Store)
def get_store(store_id: int, db: Session = Depends(get_db)):
    store = store_crud.get(db=db, id=store_id)
    if not store:
        raise HTTPException(status_code=404, detail='Store not found')
    return store


@router.get('/{store_id}/coupon-count', response_model=schemas.CouponCount)
def get_store_coupon_count(store_id: int, db: Session = Depends(get_db)):
    if not store_crud.get(db=db, id=store_id):
        raise HTTPException(status_code=404, detail='Store not found')
    total = store_crud.count_coupons(db=db, store_id=store_id)
    return schemas.CouponCount(store_id=store_id, total=total)


@router.post(
    '/',
    response_model=schemas.Store,
    dependencies=[Depends(require_admin_key)],
)
def create_store(store: schemas.StoreCreate, db: Session = Depends(get_db)):
    logger.info('Creating store: %s', store.name)
    return store_crud.create(db=db, obj=store)


@router.put(
    '/{store_id}',
    response_model=schemas.Store,
    dependencies=[Depends(require_admin_key)],
)
def update_store(
    store_id: int,
    store: schemas.StoreUpdate,
    db: Session = Depends(get_db),
):
    updated = store_crud.update(db=db, id=store_id, obj=store)
    if not updated:
        raise HTTPException(status_code=404, detail='Store not found')
    return updated


@router.delete(
    '/{store_id}',
    response_model=schemas.Store,
    dependencies=[Depends(require_admin_key)],
)
def delete_store(store_id: int, db: Session = Depends(get_db)):
    deleted = store_crud.delete(db=db, id=store_id)
    if not deleted:
        raise HTTPException(status_code=404, detail='Store not found')
    return deleted
