from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.networks import schemas
from app.api.networks.crud import network as network_crud
from app.core.database import get_db
from app.core.security import require_admin_key

router = APIRouter()


@router.get('/', response_model=list[schemas.Network])
def get_networks(db: Session = Depends(get_db)):
    return network_crud.find(db=db, limit=None)


@router.get('/{network_id}', response_model=schemas.Network)
def get_network(network_id: int, db: Session = Depends(get_db)):
    network = network_crud.get(db=db, id=network_id)
    if not network:
        raise HTTPException(status_code=404, detail='Network not found')
    return network


@router.post(
    '/',
    response_model=schemas.Network,
    dependencies=[Depends(require_admin_key)],
)
def create_network(network: schemas.NetworkCreate, db: Session = Depends(get_db)):
    return network_crud.create(db=db, obj=network)


@router.put(
    '/{network_id}',
    response_model=schemas.Network,
    dependencies=[Depends(require_admin_key)],
)
def update_network(
    network_id: int,
    network: schemas.NetworkUpdate,
    db: Session = Depends(get_db),
):
    updated = network_crud.update(db=db, id=network_id, obj=network)
    if not updated:
        raise HTTPException(status_code=404, detail='Network not found')
    return updated


@router.delete(
    '/{network_id}',
    response_model=schemas.Network,
    dependencies=[Depends(require_admin_key)],
)
def delete_network(network_id: int, db: Session = Depends(get_db)):
    deleted = network_crud.delete(db=db, id=network_id)
    if not deleted:
        raise HTTPException(status_code=404, detail='Network not found')
    return deleted
