"""
Pytest fixtures for goodies backend tests.

Provides test database setup, user/product/event factories, identity
tokens signed like the provider's, and the test client.
"""

import base64
from datetime import datetime, timedelta, timezone

import jwt
import pytest
from goodies import create_app
from goodies.choices import Condition, ProductType, Role, Status
from goodies.extensions import db
from goodies.models import Product, User
from goodies.services import event_service

JWT_TEST_KEY = "goodies-test-signing-key-0123456789abcdef"
WEBHOOK_TEST_SECRET = "whsec_" + base64.b64encode(b"goodies-test-webhook-secret-0123").decode()


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'SECRET_KEY': 'test-secret-key',
        'IDENTITY_JWT_KEY': JWT_TEST_KEY,
        'IDENTITY_JWT_ALGORITHMS': 'HS256',
        'IDENTITY_JWT_ISSUER': None,
        'CLERK_WEBHOOK_SECRET': WEBHOOK_TEST_SECRET,
    })

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


def make_user(db_session, name: str, role: str = Role.MEMBER) -> User:
    user = User(
        external_id=f"user_{name}",
        email=f"{name}@example.com",
        nickname=name,
        role=role,
    )
    db_session.add(user)
    db_session.commit()
    return user


def make_product(db_session, owner: User, name: str = "Rei Ayanami 1/7", **overrides) -> Product:
    fields = dict(
        owner_user_id=owner.id,
        name=name,
        description="Scale figure",
        quantity=1,
        character_names=["Rei Ayanami"],
        license_names=["Evangelion"],
        product_types=[ProductType.PREPAINTED],
        condition=Condition.NEW,
        status=Status.IN_COLLECTION,
        storage_location="Shelf A",
        purchase_location="Akihabara",
        purchase_date=datetime(2024, 3, 1, 12, 0, 0),
        purchase_price_cents=12000,
        threshold=0,
    )
    fields.update(overrides)
    product = Product(**fields)
    db_session.add(product)
    db_session.commit()
    return product


def make_event(owner: User, name: str = "Spring Swap Meet", **overrides) -> int:
    patch = {
        "name": name,
        "description": "Community sale",
        "location": "Club room",
        "start_time": datetime(2030, 4, 1, 10, 0, 0),
        "end_time": datetime(2030, 4, 1, 18, 0, 0),
    }
    patch.update(overrides)
    return event_service.create_event(patch=patch, actor=owner)


@pytest.fixture(scope='function')
def member(db_session):
    """Plain member with no special role."""
    return make_user(db_session, "alice", Role.MEMBER)


@pytest.fixture(scope='function')
def other_member(db_session):
    return make_user(db_session, "bob", Role.MEMBER)


@pytest.fixture(scope='function')
def admin(db_session):
    """Global Administrator."""
    return make_user(db_session, "root", Role.ADMINISTRATOR)


@pytest.fixture(scope='function')
def product(db_session, member):
    """Product owned by member."""
    return make_product(db_session, member)


@pytest.fixture(scope='function')
def event_id(db_session, member):
    """Event created (and administered) by member."""
    return make_event(member)


def identity_token(external_id: str, expires_in: timedelta = timedelta(hours=1)) -> str:
    """Session token as the identity provider would issue it."""
    claims = {
        "sub": external_id,
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    return jwt.encode(claims, JWT_TEST_KEY, algorithm="HS256")


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


def headers_for(user: User) -> dict:
    return auth_headers(identity_token(user.external_id))
