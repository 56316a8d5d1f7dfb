"""
Pytest fixtures for parlour backend tests.

Provides an in-memory database, a test client, a seeded admin and
helpers for authenticated requests.
"""

import pytest
from parlour import create_app
from parlour.extensions import db
from parlour.models import Product, Service
from parlour.services.auth_service import create_user


TEST_CONFIG = {
    'TESTING': True,
    'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
    'SQLALCHEMY_TRACK_MODIFICATIONS': False,
    'JWT_SECRET': 'test-signing-key',
    'BCRYPT_ROUNDS': 4,
}


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app(TEST_CONFIG)

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def admin_user(db_session):
    """The default admin/admin123 account."""
    return create_user(username="admin", password="admin123", role="admin")


@pytest.fixture(scope='function')
def admin_headers(client, admin_user):
    token = get_auth_token(client, "admin", "admin123")
    assert token, "admin login failed"
    return auth_headers(token)


@pytest.fixture(scope='function')
def shampoo(db_session):
    """Product with 10 units at cost 5, shelf price 20."""
    product = Product(name="Shampoo", sku="SH-001", stock=10, cost_price=5, sell_price=20)
    db_session.add(product)
    db_session.commit()
    return product


@pytest.fixture(scope='function')
def haircut(db_session):
    """Service priced 300 costing 50."""
    service = Service(name="Haircut", description="Wash and cut", price=300, cost=50)
    db_session.add(service)
    db_session.commit()
    return service


def get_auth_token(client, username: str, password: str) -> str:
    """Helper to get auth token for a user."""
    response = client.post('/api/auth/login', json={
        'username': username,
        'password': password
    })
    if response.status_code == 200:
        return response.json.get('token')
    return None


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}
