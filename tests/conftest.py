"""Wspolne fixtures: swieza baza sqlite w pamieci na kazdy test + TestClient."""
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from kushalwear.data.database import Database
from kushalwear.data.models.product import ProductModel
from kushalwear.data.seed import create_admin
from kushalwear.main import create_app
from kushalwear.services.lock_service import LocalLockService

PASSWORD = "Secret123"
ADMIN_EMAIL = "admin@kushalwear.com"


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def database():
    db = Database("sqlite://")
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def session(database):
    s = database.session()
    yield s
    s.close()


@pytest.fixture
def client(database):
    app = create_app(database=database, lock_service=LocalLockService())
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_product(session):
    def _make(product_id="P1", **overrides) -> str:
        data = dict(
            id=product_id,
            name="Classic Tee",
            description="Soft cotton t-shirt",
            price=Decimal("19.99"),
            category="men",
            sizes=["S", "M", "L"],
            colors=[{"name": "Black", "hex": "#000000"}],
            stock=10,
            tags=["tee", "cotton"],
        )
        data.update(overrides)
        session.add(ProductModel(**data))
        session.commit()
        return product_id

    return _make


@pytest.fixture
def product(make_product):
    return make_product()


@pytest.fixture
def register(client):
    def _register(email="user@example.com", name="Test User", password=PASSWORD) -> dict:
        res = client.post("/api/auth/signup", json={"name": name, "email": email, "password": password})
        assert res.status_code == 201, res.text
        return bearer(res.json()["token"])

    return _register


@pytest.fixture
def headers(register):
    return register()


@pytest.fixture
def admin_headers(client, session):
    create_admin(session, ADMIN_EMAIL, PASSWORD, "Admin")
    res = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": PASSWORD})
    assert res.status_code == 200, res.text
    return bearer(res.json()["token"])
