from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.api.base_crud import CRUDBase
from app.api.networks import models, schemas


class CRUDNetwork(
    CRUDBase[models.Network, schemas.NetworkCreate, schemas.NetworkUpdate]
):
    def get_by_name(self, db: Session, name: str) -> Optional[models.Network]:
        return (
            db.query(self.model)
            .filter(func.lower(self.model.network_name) == name.lower())
            .first()
        )


network = CRUDNetwork(models.Network)
