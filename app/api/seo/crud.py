from typing import Optional

from sqlalchemy.orm import Session

from app.api.base_crud import CRUDBase
from app.api.seo import models, schemas
from app.core.utils import normalize_slug


class CRUDSEOTemplate(
    CRUDBase[models.SEOTemplate, schemas.SEOTemplateCreate, schemas.SEOTemplateCreate]
):
    def _prepare_data(self, db: Session, obj: schemas.SEOTemplateCreate, **kwargs):
        data = obj.model_dump(**kwargs)
        if 'template_type' in data:
            data['template_type'] = data['template_type'].value
        return data

    def get_by_slug(self, db: Session, slug: str) -> Optional[models.SEOTemplate]:
        return (
            db.query(self.model).filter(self.model.slug == normalize_slug(slug)).first()
        )

    def get_latest(
        self, db: Session, template_type: schemas.TemplateType
    ) -> Optional[models.SEOTemplate]:
        return (
            db.query(self.model)
            .filter(self.model.template_type == template_type.value)
            .order_by(self.model.created_at.desc(), self.model.id.desc())
            .first()
        )


seo_template = CRUDSEOTemplate(models.SEOTemplate)
