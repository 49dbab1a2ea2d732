import os

import pytest

os.environ["DATABASE_URL"] = "sqlite:///./test_clinicpay.db"

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from clinicpay.main import app as fastapi_app  # noqa: E402
from clinicpay.database import Base  # noqa: E402
from clinicpay.models import PaymentIntent, PaymentStatus  # noqa: E402
from clinicpay.store import PaymentStore  # noqa: E402

engine = create_engine(os.environ["DATABASE_URL"], connect_args={
                       "check_same_thread": False})
TestingSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(autouse=True)
def sepay_env(monkeypatch):
    monkeypatch.setenv("SEPAY_BANK_CODE", "TPBANK")
    monkeypatch.setenv("SEPAY_ACCOUNT_NUMBER", "0123456789")
    monkeypatch.setenv("SEPAY_ACCOUNT_NAME", "PHONG KHAM")
    monkeypatch.delenv("SEPAY_API_KEY", raising=False)
    monkeypatch.delenv("TRANSFER_CONTENT_PREFIX", raising=False)
    monkeypatch.delenv("PAYMENT_MIN_AMOUNT", raising=False)


@pytest.fixture
def db():
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture
def store(db):
    return PaymentStore(db)


@pytest.fixture
def add_payment(db):
    def _add(order_code, amount=50000, status=PaymentStatus.PENDING, **fields):
        payment = PaymentIntent(order_code=order_code, amount=amount, status=status, **fields)
        db.add(payment)
        db.commit()
        return payment
    return _add


@pytest.fixture
def fetch_payment():
    def _fetch(order_code):
        session = TestingSessionLocal()
        try:
            return session.query(PaymentIntent).filter_by(order_code=order_code).first()
        finally:
            session.close()
    return _fetch


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr("clinicpay.database.SessionLocal", TestingSessionLocal)
    with TestClient(fastapi_app) as c:
        yield c


@pytest.fixture
def session_factory():
    return TestingSessionLocal
