import os
import tempfile

# konfiguracja musi byc ustawiona przed importem aplikacji
_tmpdir = tempfile.mkdtemp(prefix="storefront-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{_tmpdir}/test.db"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["RATE_LIMIT_API_MAX"] = "100000"
os.environ["RATE_LIMIT_AUTH_MAX"] = "100000"

from decimal import Decimal  # noqa: E402

import fakeredis  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from storefront.api.deps import get_redis  # noqa: E402
from storefront.data import models  # noqa: E402,F401
from storefront.data.database import Base, SessionLocal, engine  # noqa: E402
from storefront.data.models import ProductModel, UserModel  # noqa: E402
from storefront.main import create_app  # noqa: E402
from storefront.utils.security import hash_password  # noqa: E402

PASSWORD = "Secret123"


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture()
def fake_redis():
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture()
def app(fake_redis):
    app = create_app()
    app.dependency_overrides[get_redis] = lambda: fake_redis
    return app


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def make_user(db):
    def _make(email="customer@example.com", role="customer", name="Test Customer", password=PASSWORD):
        user = UserModel(name=name, email=email, password_hash=hash_password(password), role=role)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture()
def make_product(db):
    def _make(name="Classic Watch", price="100.00", stock=10, category="Men", description=None):
        product = ProductModel(
            name=name,
            description=description or f"{name} with a leather strap.",
            price=Decimal(price),
            category=category,
            image_url="https://example.com/watch.jpg",
            stock=stock,
        )
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make


@pytest.fixture()
def login(client):
    def _login(email, password=PASSWORD):
        resp = client.post("/api/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        return {"Authorization": f"Bearer {resp.json()['data']['token']}"}

    return _login


@pytest.fixture()
def customer(make_user):
    return make_user()


@pytest.fixture()
def admin(make_user):
    return make_user(email="admin@example.com", role="admin", name="Admin User")


@pytest.fixture()
def customer_headers(customer, login):
    return login(customer.email)


@pytest.fixture()
def admin_headers(admin, login):
    return login(admin.email)


@pytest.fixture()
def stock_of(db):
    def _stock(product_id):
        db.expire_all()
        return db.get(ProductModel, product_id).stock

    return _stock
