import os

# must be set before storefront.* is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["ORDER_TRANSITIONS"] = "lifecycle"

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.api.auth import create_access_token
from storefront.data.database import Base, get_db, init_db
from storefront.data.models.product import ProductModel
from storefront.domain.schemas import Principal
from storefront.main import app


@pytest.fixture(scope="function")
def db_session():
    """
    Fresh in-memory database per test.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def alice():
    return Principal(id=1, name="Alice", role="user")


@pytest.fixture
def bob():
    return Principal(id=2, name="Bob", role="user")


@pytest.fixture
def admin():
    return Principal(id=99, name="Admin", role="admin")


def _headers(principal: Principal):
    token = create_access_token(principal.id, principal.name, principal.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def alice_headers(alice):
    return _headers(alice)


@pytest.fixture
def bob_headers(bob):
    return _headers(bob)


@pytest.fixture
def admin_headers(admin):
    return _headers(admin)


class FakeNotifier:
    def __init__(self):
        self.created = []
        self.changed = []

    def send_order_created(self, user_id, order_id):
        self.created.append((user_id, order_id))

    def send_status_changed(self, user_id, order_id, status):
        self.changed.append((user_id, order_id, status))


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def make_product(db_session):
    """Insert a product straight through the ORM."""
    counter = {"n": 0}
    base_time = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _make(**overrides):
        counter["n"] += 1
        n = counter["n"]
        data = {
            "name": f"Product {n}",
            "description": f"Description of product {n}",
            "price": Decimal("10.00"),
            "category": "Electronics",
            "brand": "Acme",
            "images": [{"public_id": f"img{n}", "url": f"https://cdn.example.com/{n}.jpg"}],
            "stock": 5,
            "sku": f"SKU-{n}",
            "tags": [],
            "user_id": 99,
            "created_at": base_time + timedelta(minutes=n),
        }
        data.update(overrides)
        product = ProductModel(**data)
        db_session.add(product)
        db_session.commit()
        db_session.refresh(product)
        return product

    return _make
