from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from fastapi.responses import RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.common.schemas import PaginatedResponse, PaginationMetadata
from app.api.coupons import catalog, schemas
from app.api.coupons.crud import coupon as coupon_crud
from app.core.database import get_db
from app.core.logger import logger
from app.core.security import require_admin_key

router = APIRouter()


@router.get('/', response_model=PaginatedResponse[schemas.CouponWithStore])
def get_catalog(
    tab: schemas.CatalogTab = Query(default=schemas.CatalogTab.ALL),
    categories: Optional[List[int]] = Query(default=None),
    verified: bool = Query(default=False),
    codes_only: bool = Query(default=False),
    deals_only: bool = Query(default=False),
    free_shipping: bool = Query(default=False),
    sort_by: schemas.SortPolicy = Query(default=schemas.SortPolicy.RELEVANCE),
    per_page: str = Query(default='10', pattern='^(5|10|20|50|all)$'),
    page: int = Query(default=1),
    db: Session = Depends(get_db),
):
    criteria = schemas.CouponCatalogFilter(
        tab=tab,
        categories=categories,
        verified=verified,
        codes_only=codes_only,
        deals_only=deals_only,
        free_shipping=free_shipping,
    )
    page_size = catalog.parse_per_page(per_page)
    result, total = coupon_crud.query_catalog(
        db=db,
        criteria=criteria,
        sort_by=sort_by,
        page=page,
        per_page=page_size,
    )
    return PaginatedResponse[schemas.CouponWithStore](
        items=result.items,
        pagination=PaginationMetadata(
            page=result.page,
            per_page=page_size,
            total=total,
            total_pages=result.total_pages,
        ),
    )


@router.get('/all', response_model=list[schemas.Coupon])
def get_all_coupons(db: Session = Depends(get_db)):
    return coupon_crud.get_all(db=db)


@router.get('/with-stores', response_model=list[schemas.CouponWithStore])
def get_coupons_with_stores(db: Session = Depends(get_db)):
    return coupon_crud.get_with_stores(db=db)


@router.get('/top/{coupon_type}', response_model=list[schemas.CouponWithStore])
def get_top_coupons(
    coupon_type: schemas.CouponType,
    db: Session = Depends(get_db),
):
    return coupon_crud.get_top_with_stores(db=db, coupon_type=coupon_type)


@router.get('/top-deals/by-uses', response_model=list[schemas.Coupon])
def get_top_deals_by_uses(
    limit: int = Query(default=10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    return coupon_crud.get_top_deals_by_uses(db=db, limit=limit)


@router.get('/store/{store_id}', response_model=list[schemas.Coupon])
def get_coupons_by_store(store_id: int, db: Session = Depends(get_db)):
    return coupon_crud.get_by_store(db=db, store_id=store_id)


@router.put(
    '/positions',
    response_model=schemas.CouponPositionsResult,
    dependencies=[Depends(require_admin_key)],
)
def update_coupon_positions(
    positions: List[schemas.CouponPosition],
    db: Session = Depends(get_db),
):
    modified = coupon_crud.update_positions(db=db, positions=positions)
    return schemas.CouponPositionsResult(modified=modified)


@router.get('/{coupon_id}', response_model=schemas.Coupon)
def get_coupon(coupon_id: int, db: Session = Depends(get_db)):
    coupon = coupon_crud.get(db=db, id=coupon_id)
    if not coupon:
        raise HTTPException(status_code=404, detail='Coupon not found')
    return coupon


@router.get('/{coupon_id}/redeem')
def redeem_coupon(coupon_id: int, db: Session = Depends(get_db)):
    coupon = coupon_crud.get(db=db, id=coupon_id)
    if not coupon or not coupon.coupon_url:
        raise HTTPException(status_code=404, detail='Coupon not found')

    coupon_url = coupon.coupon_url
    try:
        coupon_crud.record_use(db=db, coupon_id=coupon_id)
    except SQLAlchemyError as e:
        # The shopper is redirected even when the use cannot be counted
        db.rollback()
        logger.error('Failed to record use of coupon %s: %s', coupon_id, e)
    return RedirectResponse(coupon_url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)


@router.post('/{coupon_id}/uses', status_code=status.HTTP_204_NO_CONTENT)
def record_coupon_use(coupon_id: int, db: Session = Depends(get_db)):
    if not coupon_crud.record_use(db=db, coupon_id=coupon_id):
        raise HTTPException(status_code=404, detail='Coupon not found')
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    '/',
    response_model=schemas.Coupon,
    dependencies=[Depends(require_admin_key)],
)
def create_coupon(coupon: schemas.CouponCreate, db: Session = Depends(get_db)):
    logger.info('Creating coupon: %s', coupon.title)
    return coupon_crud.create(db=db, obj=coupon)


@router.put(
    '/{coupon_id}',
    response_model=schemas.Coupon,
    dependencies=[Depends(require_admin_key)],
)
def update_coupon(
    coupon_id: int,
    coupon: schemas.CouponUpdate,
    db: Session = Depends(get_db),
):
    updated = coupon_crud.update(db=db, id=coupon_id, obj=coupon)
    if not updated:
        raise HTTPException(status_code=404, detail='Coupon not found')
    return updated


@router.patch(
    '/{coupon_id}',
    response_model=schemas.Coupon,
    dependencies=[Depends(require_admin_key)],
)
def update_coupon_inline(
    coupon_id: int,
    coupon: schemas.CouponInlineUpdate,
    db: Session = Depends(get_db),
):
    updated = coupon_crud.update_inline(db=db, id=coupon_id, obj=coupon)
    if not updated:
        raise HTTPException(status_code=404, detail='Coupon not found')
    return updated


@router.delete(
    '/{coupon_id}',
    response_model=schemas.Coupon,
    dependencies=[Depends(require_admin_key)],
)
def delete_coupon(coupon_id: int, db: Session = Depends(get_db)):
    deleted = coupon_crud.delete(db=db, id=coupon_id)
    if not deleted:
        raise HTTPException(status_code=404, detail='Coupon not found')
    return deleted
