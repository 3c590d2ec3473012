from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.categories import schemas
from app.api.categories.crud import category as category_crud
from app.core.database import get_db
from app.core.security import require_admin_key

router = APIRouter()


@router.get('/', response_model=list[schemas.Category])
def get_categories(db: Session = Depends(get_db)):
    return category_crud.find(db=db, limit=None)


@router.get('/counts', response_model=list[schemas.CategoryWithCounts])
def get_categories_with_counts(db: Session = Depends(get_db)):
    return category_crud.get_with_counts(db=db)


@router.get('/popular', response_model=list[schemas.Category])
def get_popular_categories(db: Session = Depends(get_db)):
    return category_crud.get_popular(db=db)


@router.get('/trending', response_model=list[schemas.Category])
def get_trending_categories(db: Session = Depends(get_db)):
    return category_crud.get_trending(db=db)


@router.get('/names', response_model=list[str])
def get_category_names(db: Session = Depends(get_db)):
    return category_crud.get_names(db=db)


@router.get('/{category_id}', response_model=schemas.Category)
def get_category(category_id: int, db: Session = Depends(get_db)):
    category = category_crud.get(db=db, id=category_id)
    if not category:
        raise HTTPException(status_code=404, detail='Category not found')
    return category


@router.post(
    '/',
    response_model=schemas.Category,
    dependencies=[Depends(require_admin_key)],
)
def create_category(
    category: schemas.CategoryCreate,
    db: Session = Depends(get_db),
):
    return category_crud.create(db=db, obj=category)


@router.put(
    '/{category_id}',
    response_model=schemas.Category,
    dependencies=[Depends(require_admin_key)],
)
def update_category(
    category_id: int,
    category: schemas.CategoryUpdate,
    db: Session = Depends(get_db),
):
    updated = category_crud.update(db=db, id=category_id, obj=category)
    if not updated:
        raise HTTPException(status_code=404, detail='Category not found')
    return updated


@router.delete(
    '/{category_id}',
    response_model=schemas.Category,
    dependencies=[Depends(require_admin_key)],
)
def delete_category(category_id: int, db: Session = Depends(get_db)):
    deleted = category_crud.delete(db=db, id=category_id)
    if not deleted:
        raise HTTPException(status_code=404, detail='Category not found')
    return deleted
