from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.seo import schemas
from app.api.seo.crud import seo_template as seo_crud
from app.core.database import get_db
from app.core.security import require_admin_key

router = APIRouter()


@router.get('/', response_model=list[schemas.SEOTemplate])
def get_seo_templates(
    filters: schemas.SEOTemplateFilter = Depends(),
    db: Session = Depends(get_db),
):
    return seo_crud.find(db=db, limit=None, filters=filters)


@router.get('/latest/{template_type}', response_model=Optional[schemas.SEOTemplate])
def get_latest_seo_template(
    template_type: schemas.TemplateType,
    db: Session = Depends(get_db),
):
    return seo_crud.get_latest(db=db, template_type=template_type)


@router.get('/slug/{slug}', response_model=schemas.SEOTemplate)
def get_seo_template_by_slug(slug: str, db: Session = Depends(get_db)):
    template = seo_crud.get_by_slug(db=db, slug=slug)
    if not template:
        raise HTTPException(status_code=404, detail='SEO template not found')
    return template


@router.get('/{template_id}', response_model=schemas.SEOTemplate)
def get_seo_template(template_id: int, db: Session = Depends(get_db)):
    template = seo_crud.get(db=db, id=template_id)
    if not template:
        raise HTTPException(status_code=404, detail='SEO template not found')
    return template


@router.post(
    '/',
    response_model=schemas.SEOTemplate,
    dependencies=[Depends(require_admin_key)],
)
def create_seo_template(
    template: schemas.SEOTemplateCreate,
    db: Session = Depends(get_db),
):
    return seo_crud.create(db=db, obj=template)


@router.put(
    '/{template_id}',
    response_model=schemas.SEOTemplate,
    dependencies=[Depends(require_admin_key)],
)
def update_seo_template(
    template_id: int,
    template: schemas.SEOTemplateCreate,
    db: Session = Depends(get_db),
):
    updated = seo_crud.update(db=db, id=template_id, obj=template)
    if not updated:
        raise HTTPException(status_code=404, detail='SEO template not found')
    return updated


@router.delete(
    '/{template_id}',
    response_model=schemas.SEOTemplate,
    dependencies=[Depends(require_admin_key)],
)
def delete_seo_template(template_id: int, db: Session = Depends(get_db)):
    deleted = seo_crud.delete(db=db, id=template_id)
    if not deleted:
        raise HTTPException(status_code=404, detail='SEO template not found')
    return deleted
