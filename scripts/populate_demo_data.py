import json
import os

from sqlalchemy.orm import Session

from app.api.categories import schemas as category_schemas
from app.api.categories.crud import category as category_crud
from app.api.coupons import schemas as coupon_schemas
from app.api.coupons.crud import coupon as coupon_crud
from app.api.networks import schemas as network_schemas
from app.api.networks.crud import network as network_crud
from app.api.stores import schemas as store_schemas
from app.api.stores.crud import store as store_crud
from app.core.config import settings
from app.core.database import SessionLocal, create_db


def load_catalog_json(json_path: str) -> dict:
    with open(json_path, 'r') as f:
        return json.load(f)


def get_or_create_category(db: Session, data: dict):
    category = (
        db.query(category_crud.model)
        .filter(category_crud.model.slug == data['slug'])
        .first()
    )
    if not category:
        category = category_crud.create(db, category_schemas.CategoryCreate(**data))
        print(f'Category created: {category.id} - {category.name}')
    return category


def get_or_create_network(db: Session, data: dict):
    network = network_crud.get_by_name(db, data['network_name'])
    if not network:
        network = network_crud.create(db, network_schemas.NetworkCreate(**data))
        print(f'Network created: {network.id} - {network.network_name}')
    return network


def get_or_create_store(db: Session, data: dict, categories: dict, networks: dict):
    """Create a store if not exists; categories and network are referenced by name."""
    data = dict(data)
    category_ids = [categories[name].id for name in data.pop('categories', [])]
    network_name = data.pop('network', None)
    if network_name:
        data['network_id'] = networks[network_name].id

    store_schema = store_schemas.StoreCreate(**data, categories=category_ids)
    store = store_crud.get_by_slug(db, store_schema.slug) if store_schema.slug else None
    if not store:
        store = store_crud.create(db, store_schema)
        print(f'Store created: {store.id} - {store.name}')
    return store


def create_coupons(db: Session, store, coupons: list) -> int:
    existing = {c.title for c in coupon_crud.get_by_store(db, store.id)}
    created = 0
    for data in coupons:
        if data['title'] in existing:
            print(f'Coupon already exists: {data["title"]}')
            continue
        coupon_crud.create(
            db,
            coupon_schemas.CouponCreate(
                **data, store_id=store.id, store_name=store.name
            ),
        )
        created += 1
    return created


def populate_catalog(db: Session, catalog: dict) -> None:
    categories = {
        c['name']: get_or_create_category(db, c) for c in catalog.get('categories', [])
    }
    networks = {
        n['network_name']: get_or_create_network(db, n)
        for n in catalog.get('networks', [])
    }
    for data in catalog.get('stores', []):
        data = dict(data)
        coupons = data.pop('coupons', [])
        store = get_or_create_store(db, data, categories, networks)
        created = create_coupons(db, store, coupons)
        print(f'{created} coupons added to {store.name}')


def main():
    create_db()
    db = SessionLocal()
    try:
        print('\nDatabase Connection Information:')
        print('Database Type: PostgreSQL')
        print(f'Host: {settings.DB_HOST}')
        print(f'Port: {settings.DB_PORT}')
        print(f'Database Name: {settings.DB_NAME}')
        print(f'Username: {settings.DB_USERNAME}')

        print('\nThis script will create demo data in the database:')
        print('Categories, networks, stores and coupons from catalog.json')

        confirm = input('Do you want to proceed? (y/N): ')
        if confirm.lower() != 'y':
            print('Operation cancelled')
            return

        json_path = os.path.join(os.path.dirname(__file__), 'catalog.json')
        populate_catalog(db, load_catalog_json(json_path))
    finally:
        db.close()


if __name__ == '__main__':
    main()
