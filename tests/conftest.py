from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.categories.models import Category
from app.api.coupons.models import Coupon
from app.api.networks.models import Network
from app.api.stores.models import Store
from app.core.config import Environment, settings
from app.core.database import Base, get_db
from app.core.utils import current_time
from main import app


@pytest.fixture(scope='session', autouse=True)
def check_test_environment():
    if settings.ENVIRONMENT != Environment.TEST:
        raise RuntimeError(
            f'Tests can only be executed in test environment. Current environment: {settings.ENVIRONMENT}'
        )


@pytest.fixture(scope='session', autouse=True)
def setup_test_api_keys():
    """Set a default admin API key for testing to avoid None values in headers"""
    original_admin_key = settings.ADMIN_API_KEY
    settings.ADMIN_API_KEY = 'test_admin_api_key'

    yield

    settings.ADMIN_API_KEY = original_admin_key


@pytest.fixture(scope='session')
def test_db_engine():
    engine = create_engine(
        settings.SQLALCHEMY_TEST_DATABASE_URL,
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope='session')
def session_factory(test_db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=test_db_engine)


@pytest.fixture(scope='function')
def db_session(test_db_engine, session_factory):
    """Create a fresh database session for each test"""
    # Drop and recreate all tables before each test
    Base.metadata.drop_all(bind=test_db_engine)
    Base.metadata.create_all(bind=test_db_engine)

    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope='function')
def client(db_session):
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return {'x-api-key': settings.ADMIN_API_KEY}


@pytest.fixture(scope='function')
def create_test_category(db_session):
    """Factory fixture to create test categories"""

    def _create_category(name: str, **kwargs):
        category = Category(
            name=name,
            slug=name.lower().replace(' ', '-'),
            **kwargs,
        )
        db_session.add(category)
        db_session.commit()
        return category

    yield _create_category


@pytest.fixture(scope='function')
def test_network(db_session):
    network = Network(
        network_name='Test Network',
        store_network_url='https://network.example.com/track',
    )
    db_session.add(network)
    db_session.commit()
    return network


@pytest.fixture(scope='function')
def create_test_store(db_session):
    """Factory fixture to create test stores"""

    def _create_store(name: str, categories=None, **kwargs):
        kwargs.setdefault('meta_title', f'{name} Coupons')
        kwargs.setdefault('direct_url', f'https://{name.lower()}.example.com')
        store = Store(
            name=name,
            slug=name.lower().replace(' ', '-'),
            image=f'https://cdn.example.com/{name.lower()}.png',
            **kwargs,
        )
        store.categories = categories or []
        db_session.add(store)
        db_session.commit()
        return store

    yield _create_store


@pytest.fixture(scope='function')
def test_store(create_test_store):
    return create_test_store('Acme')


@pytest.fixture(scope='function')
def create_test_coupon(db_session):
    """Factory fixture to create coupons straight in the database"""

    def _create_coupon(store_id: int, title: str = 'Save 10% on shoes', **kwargs):
        kwargs.setdefault('coupon_type', 'coupon')
        kwargs.setdefault('status', 'active')
        kwargs.setdefault(
            'coupon_code', 'NO_CODE' if kwargs['coupon_type'] == 'deal' else 'SAVE10'
        )
        kwargs.setdefault('coupon_url', 'https://acme.example.com/deal')
        coupon = Coupon(title=title, store_id=store_id, **kwargs)
        db_session.add(coupon)
        db_session.commit()
        return coupon

    yield _create_coupon


@pytest.fixture
def coupon_payload(test_store):
    return {
        'title': 'Get 15% off sitewide',
        'description': 'Valid on all products',
        'coupon_type': 'coupon',
        'status': 'active',
        'coupon_code': 'SAVE15',
        'expiration_date': (current_time() + timedelta(days=30)).isoformat(),
        'store_id': test_store.id,
    }
