"""Verification request model (the oracle's work queue)."""

from datetime import datetime

from sqlalchemy import BigInteger, Column, DateTime, Enum, ForeignKey, Integer, String, Text

from veripass_api.db.base import Base
from veripass_api.enums import VerificationStatus


class VerificationRequest(Base):
    """A request for the oracle to validate and anchor evidence for an asset."""

    __tablename__ = "verification_requests"

    id = Column(Integer, primary_key=True, index=True)
    request_id = Column(String(50), nullable=False, unique=True, index=True)  # VR-<ms>-<random>

    asset_id = Column(BigInteger, ForeignKey("assets.asset_id", ondelete="RESTRICT"), nullable=False, index=True)
    request_type = Column(String(50), nullable=False)
    provider_id = Column(String(255), nullable=True)
    requested_by = Column(String(42), nullable=False)

    status = Column(
        Enum(VerificationStatus, name="verification_status", native_enum=False, length=20),
        default=VerificationStatus.PENDING,
        nullable=False,
        index=True,
    )

    # Result
    blockchain_event_id = Column(BigInteger, nullable=True)
    tx_hash = Column(String(66), nullable=True)
    data_hash = Column(String(66), nullable=True)
    evidence_id = Column(Integer, nullable=True, index=True)  # checked by the service, not a storage FK
    error_message = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    claimed_at = Column(DateTime, nullable=True)
    processed_at = Column(DateTime, nullable=True)
