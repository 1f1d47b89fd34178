"""
Shared pytest fixtures.

Uses a throwaway SQLite database so no external services are required.
The environment is set before any areuok import so Settings pick it up.
"""
import os

os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite:///./test_areuok.db"
# Nothing listens on port 9: quote lookups fail fast and fall back.
os.environ["QUOTE_API_URL"] = "http://127.0.0.1:9/"
os.environ["QUOTE_API_TIMEOUT"] = "0.5"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from areuok.db.base import Base, get_db
from areuok.main import app
from areuok.models.record import StoredRecord
from areuok.schemas.device import DeviceConfig, DeviceInfo, DeviceMode
from areuok.services import email as email_service
from areuok.services import notification
from areuok.services.storage import RecordStore

SQLITE_URL = "sqlite:///./test_areuok.db"

engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def create_tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def clean_state():
    """Every test starts with no records and empty outboxes."""
    db = TestingSessionLocal()
    try:
        db.query(StoredRecord).delete()
        db.commit()
    finally:
        db.close()
    email_service.EMAIL_OUTBOX.clear()
    notification.OUTBOX.clear()
    yield


@pytest.fixture()
def db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def store(db):
    return RecordStore(db)


@pytest.fixture()
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _make_config(device_id: str, name: str, mode: DeviceMode = DeviceMode.signin) -> DeviceConfig:
    return DeviceConfig(
        device=DeviceInfo(
            device_id=device_id,
            device_name=name,
            mode=mode,
            created_at="2024-01-01T00:00:00+00:00",
        ),
    )


@pytest.fixture()
def make_config():
    """Factory for in-memory DeviceConfig objects (no storage involved)."""
    return _make_config
