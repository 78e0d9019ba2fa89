"""Database models - import all models here for Alembic discovery."""

from veripass_api.models.asset import Asset
from veripass_api.models.evidence import Evidence
from veripass_api.models.service_record import ServiceProvider, ServiceRecord
from veripass_api.models.verification import VerificationRequest

__all__ = [
    "Asset",
    "Evidence",
    "ServiceProvider",
    "ServiceRecord",
    "VerificationRequest",
]
