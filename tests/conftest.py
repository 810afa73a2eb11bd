import os

# Test configuration must be in place before any kiosk module reads settings
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["CACHE_ENABLED"] = "false"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["SEED_FILE"] = ""
os.environ["ADMIN_PIN"] = "1234"

import pytest
from fastapi.testclient import TestClient

from kiosk.main import app
from kiosk.database import Base, SessionLocal, engine
from kiosk.services.product import Product
from kiosk.services.product_store import ProductStore

ADMIN_HEADERS = {"X-Admin-Pin": "1234"}


@pytest.fixture(scope="function")
def client():
    """Create test client with fresh database and product store for each test."""
    with TestClient(app) as test_client:
        yield test_client

    # Drop tables after test
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create database session for direct database access in tests."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def store():
    """In-memory product store without persistence."""
    return ProductStore([
        Product(id=1, name="Taro Milk Tea", category="Boba Drink", price=2.50, stock=10),
        Product(id=2, name="Tiramisu", category="Dessert", price=4.00, stock=3),
        Product(id=3, name="Brown Sugar Boba", category="Boba Drink", price=3.25, stock=0),
    ])


@pytest.fixture
def seeded_client(client):
    """Test client with a small catalog registered through the admin API."""
    for product in (
        {"id": 1, "name": "Taro Milk Tea", "category": "Boba Drink", "price": 2.50, "stock": 10},
        {"id": 2, "name": "Tiramisu", "category": "Dessert", "price": 4.00, "stock": 3},
    ):
        response = client.post("/api/v1/admin/products", json=product, headers=ADMIN_HEADERS)
        assert response.status_code == 201
    return client
