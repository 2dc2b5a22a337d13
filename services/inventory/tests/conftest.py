import os

# Point the service at a private in-memory database before it is imported
os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from inventory_api import models, products, schemas, stores
from inventory_api.database import SessionLocal, engine
from inventory_api.main import app

from helpers import store_data


@pytest.fixture(autouse=True)
def setup_db():
    models.Base.metadata.create_all(bind=engine)
    yield
    models.Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client():
    return TestClient(app)


@pytest.fixture()
def make_store(db):
    def _make_store(name="Main Street", **overrides):
        return stores.create_store(db, schemas.StoreCreate(**store_data(name, **overrides)))

    return _make_store


@pytest.fixture()
def store(make_store):
    return make_store()


@pytest.fixture()
def make_product(db, store):
    counter = {"n": 0}

    def _make_product(**overrides):
        counter["n"] += 1
        data = {
            "name": f"Product {counter['n']}",
            "sku": f"SKU-{counter['n']:04d}",
            "category": "General",
            "price": Decimal("10.00"),
            "quantity": 20,
            "min_stock": 10,
            "store_id": store.id,
        }
        data.update(overrides)
        return products.create_product(db, schemas.ProductCreate(**data))

    return _make_product
