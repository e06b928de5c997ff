import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test_app.db")

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.orm import sessionmaker

from storefront_payments.main import app as fastapi_app
from storefront_payments.database import Base, make_engine

JWT_SECRET = "test_jwt_secret"
KEY_ID = "rzp_test_key"
KEY_SECRET = "rzp_test_secret"

SQLALCHEMY_DATABASE_URL = "sqlite:///./test_storefront.db"
engine = make_engine(SQLALCHEMY_DATABASE_URL)
TestingSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=engine)


def make_token(user_id="user-1", secret=JWT_SECRET, **claims):
    return jwt.encode({"sub": user_id, **claims}, secret, algorithm="HS256")


def auth_header(user_id="user-1"):
    return {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest.fixture(autouse=True)
def gateway_env(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", JWT_SECRET)
    monkeypatch.setenv("RAZORPAY_KEY_ID", KEY_ID)
    monkeypatch.setenv("RAZORPAY_KEY_SECRET", KEY_SECRET)
    monkeypatch.delenv("JWT_AUDIENCE", raising=False)
    monkeypatch.delenv("STOREFRONT_CURRENCY", raising=False)


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def client(monkeypatch):
    # Point every request at the test database
    monkeypatch.setattr("storefront_payments.routes.SessionLocal", TestingSessionLocal)
    with TestClient(fastapi_app) as c:
        yield c


@pytest.fixture
def gateway_order(mocker):
    """Mock the gateway's order endpoint; returns the patched requests.post."""
    def _mock(order_id="order_test_123", amount=49900, currency="INR"):
        response = mocker.Mock()
        response.ok = True
        response.status_code = 200
        response.json.return_value = {
            "id": order_id,
            "entity": "order",
            "amount": amount,
            "currency": currency,
            "status": "created",
        }
        return mocker.patch("requests.post", return_value=response)
    return _mock
