"""Fixtures: a real record store on SQLite, reached through the oracle's gateway."""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from veripass_api import models  # noqa: F401
from veripass_api.db.base import Base
from veripass_api.db.session import get_db
from veripass_api.main import app
from veripass_api.models import ServiceRecord
from veripass_api.schemas.asset import AssetCreate
from veripass_api.schemas.verification import VerificationRequestCreate
from veripass_api.services.assets import AssetService
from veripass_api.services.verification import VerificationService
from veripass_api.settings import DEV_ORACLE_API_KEY
from veripass_oracle.gateway import BackendGateway
from veripass_oracle.ledger import LedgerSubmission

OWNER = "0x" + "a1" * 20
ORACLE_ADDRESS = "0x" + "0C" * 20
MINED_TX_HASH = "0xabc" + "0" * 61


class FakeLedger:
    """Stands in for LedgerClient: records submissions, returns a fixed receipt."""

    def __init__(self, tx_hash=MINED_TX_HASH, event_id=7, trusted=True, balance=Decimal("1")):
        self.address = ORACLE_ADDRESS
        self.tx_hash = tx_hash
        self.event_id = event_id
        self.trusted = trusted
        self.balance = balance
        self.submissions = []

    def is_trusted_oracle(self, address=None):
        return self.trusted

    def get_balance(self):
        return self.balance

    def sign_digest(self, digest):
        return "0x" + "5a" * 65

    def submit_verified_event(self, asset_id, data_hash, signature):
        self.submissions.append((asset_id, data_hash, signature))
        return LedgerSubmission(tx_hash=self.tx_hash, event_id=self.event_id)


@pytest.fixture(scope="function")
def db():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)


@pytest.fixture
def gateway(db: Session):
    """BackendGateway talking to the API in-process."""

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield BackendGateway(
            "http://testserver",
            DEV_ORACLE_API_KEY,
            ORACLE_ADDRESS,
            session=TestClient(app),
        )
    finally:
        app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def ledger():
    return FakeLedger()


@pytest.fixture
def asset(db: Session):
    data = AssetCreate.model_validate(
        {
            "assetId": 1,
            "manufacturer": "Rolex",
            "model": "Submariner",
            "serialNumber": "SN-0001",
            "manufacturedDate": "2020-05-01",
        }
    )
    return AssetService(db).create_asset(data, OWNER)


@pytest.fixture
def add_service_record(db: Session):
    def _add(asset_id=1, record_id="SR-001", verified=True):
        record = ServiceRecord(
            record_id=record_id,
            asset_id=asset_id,
            provider_id="PROV-ROLEX-001",
            service_type="ROUTINE_MAINTENANCE",
            service_date="2024-01-15",
            work_performed=["Movement cleaning"],
            verified=verified,
        )
        db.add(record)
        db.commit()
        return record

    return _add


@pytest.fixture
def create_request(db: Session):
    def _create(asset_id=1, request_type="SERVICE_VERIFICATION", provider_id=None, requester=OWNER):
        request, _ = VerificationService(db).create_request(
            VerificationRequestCreate(asset_id=asset_id, request_type=request_type, provider_id=provider_id),
            requester,
        )
        return request

    return _create
