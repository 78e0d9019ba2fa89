"""Seed data for development and testing.

Service providers and their records stand in for the private systems the
oracle reads from.
"""

import logging

from sqlalchemy.orm import Session

from veripass_api.enums import ProviderType, ServiceType
from veripass_api.models import Asset, ServiceProvider, ServiceRecord

logger = logging.getLogger(__name__)

PROVIDERS = [
    {"provider_id": "PROV-ROLEX-001", "provider_name": "Rolex Service Center Geneva", "provider_type": ProviderType.SERVICE_CENTER},
    {"provider_id": "PROV-AUDI-001", "provider_name": "Audi Authorized Service", "provider_type": ProviderType.SERVICE_CENTER},
    {"provider_id": "PROV-INSPECT-001", "provider_name": "Independent Inspection Co.", "provider_type": ProviderType.INSPECTOR},
]

# Records keyed by on-chain asset id; only seeded once the asset exists.
RECORDS = [
    {
        "record_id": "SR-001",
        "asset_id": 1,
        "provider_id": "PROV-ROLEX-001",
        "service_type": ServiceType.ROUTINE_MAINTENANCE,
        "service_date": "2024-01-15",
        "technician": "J. Keller",
        "work_performed": ["Movement cleaning", "Gasket replacement", "Water resistance test"],
        "notes": "Full service, within tolerance",
    },
    {
        "record_id": "SR-002",
        "asset_id": 1,
        "provider_id": "PROV-INSPECT-001",
        "service_type": ServiceType.INSPECTION,
        "service_date": "2024-06-02",
        "technician": "A. Moreau",
        "work_performed": ["Authenticity inspection"],
        "notes": None,
    },
    {
        "record_id": "SR-003",
        "asset_id": 2,
        "provider_id": "PROV-AUDI-001",
        "service_type": ServiceType.REPAIR,
        "service_date": "2024-03-20",
        "technician": "M. Braun",
        "work_performed": ["Brake pad replacement"],
        "notes": "Awaiting provider sign-off",
        "verified": False,
    },
]


def seed_providers(db: Session) -> int:
    """Seed service providers. Returns the number inserted."""
    inserted = 0
    for provider in PROVIDERS:
        exists = db.query(ServiceProvider).filter(ServiceProvider.provider_id == provider["provider_id"]).first()
        if exists:
            continue
        db.add(ServiceProvider(**{**provider, "provider_type": provider["provider_type"].value}))
        inserted += 1
    db.flush()
    return inserted


def seed_service_records(db: Session) -> int:
    """Seed service records for assets that already exist. Returns the number inserted."""
    inserted = 0
    for record in RECORDS:
        if not db.query(Asset.id).filter(Asset.asset_id == record["asset_id"]).first():
            logger.info(f"Skipping {record['record_id']}: asset {record['asset_id']} not registered")
            continue
        if db.query(ServiceRecord.id).filter(ServiceRecord.record_id == record["record_id"]).first():
            continue
        db.add(
            ServiceRecord(
                **{
                    **record,
                    "service_type": record["service_type"].value,
                    "verified": record.get("verified", True),
                }
            )
        )
        inserted += 1
    db.flush()
    return inserted


def seed_all(db: Session) -> dict:
    """Seed all development data."""
    counts = {
        "providers": seed_providers(db),
        "service_records": seed_service_records(db),
    }
    db.commit()
    return counts
