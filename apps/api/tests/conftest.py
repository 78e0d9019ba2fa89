"""Pytest configuration and fixtures."""

import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from veripass_api import models  # noqa: F401
from veripass_api.auth.tokens import create_access_token
from veripass_api.db.base import Base
from veripass_api.db.session import get_db
from veripass_api.main import app
from veripass_api.models import ServiceRecord
from veripass_api.schemas.asset import AssetCreate
from veripass_api.services.assets import AssetService
from veripass_api.settings import DEV_ORACLE_API_KEY

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")

ALICE = "0x" + "a1" * 20
BOB = "0x" + "b2" * 20
ORACLE = "0x" + "0c" * 20


@pytest.fixture(scope="function")
def db():
    """Create a test database session."""
    if TEST_DATABASE_URL.startswith("sqlite"):
        engine = create_engine(
            TEST_DATABASE_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(TEST_DATABASE_URL)

    Base.metadata.create_all(engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)


@pytest.fixture
def client(db: Session):
    """API client bound to the test session."""

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_db, None)


def bearer(address: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token(address)}"}


@pytest.fixture
def alice_headers() -> dict:
    return bearer(ALICE)


@pytest.fixture
def bob_headers() -> dict:
    return bearer(BOB)


@pytest.fixture
def oracle_headers() -> dict:
    return {"X-Oracle-Key": DEV_ORACLE_API_KEY, "X-Oracle-Address": ORACLE}


def build_asset_payload(asset_id: int = 1, **overrides) -> dict:
    payload = {
        "assetId": asset_id,
        "manufacturer": "Rolex",
        "model": "Submariner",
        "serialNumber": f"SN-{asset_id:04d}",
        "manufacturedDate": "2020-05-01",
        "description": "Steel diver's watch",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def asset_payload():
    """Factory for camelCase asset creation bodies."""
    return build_asset_payload


@pytest.fixture
def alice() -> str:
    return ALICE


@pytest.fixture
def bob() -> str:
    return BOB


@pytest.fixture
def oracle_address() -> str:
    return ORACLE


@pytest.fixture
def make_asset(db: Session):
    """Create a PENDING asset owned by ``creator``."""

    def _make(asset_id: int = 1, creator: str = ALICE, **overrides):
        data = AssetCreate.model_validate(build_asset_payload(asset_id, **overrides))
        return AssetService(db).create_asset(data, creator)

    return _make


@pytest.fixture
def make_service_record(db: Session):
    def _make(asset_id: int = 1, record_id: str = "SR-001", verified: bool = True, **overrides):
        fields = {
            "record_id": record_id,
            "asset_id": asset_id,
            "provider_id": "PROV-ROLEX-001",
            "service_type": "ROUTINE_MAINTENANCE",
            "service_date": "2024-01-15",
            "technician": "J. Keller",
            "work_performed": ["Movement cleaning"],
            "verified": verified,
        }
        fields.update(overrides)
        record = ServiceRecord(**fields)
        db.add(record)
        db.commit()
        db.refresh(record)
        return record

    return _make
