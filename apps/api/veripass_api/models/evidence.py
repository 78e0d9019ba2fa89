"""Evidence model."""

from datetime import datetime

from sqlalchemy import BigInteger, Boolean, Column, DateTime, Enum, ForeignKey, Integer, JSON, String, Text

from veripass_api.db.base import Base
from veripass_api.enums import EvidenceStatus


class Evidence(Base):
    """Off-chain lifecycle claim whose hash is anchored on the EventRegistry."""

    __tablename__ = "evidence"

    id = Column(Integer, primary_key=True, index=True)
    asset_id = Column(BigInteger, ForeignKey("assets.asset_id", ondelete="CASCADE"), nullable=False, index=True)
    data_hash = Column(String(66), nullable=False, unique=True, index=True)

    event_type = Column(String(20), nullable=False)  # MAINTENANCE, VERIFICATION, ...
    event_date = Column(String(10), nullable=True)  # YYYY-MM-DD
    provider_id = Column(String(255), nullable=True)
    provider_name = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    files = Column(JSON, nullable=True)  # [{"url", "type", "name"}], not hashed
    metadata_json = Column(JSON, nullable=True)

    status = Column(
        Enum(EvidenceStatus, name="evidence_status", native_enum=False, length=20),
        default=EvidenceStatus.PENDING,
        nullable=False,
        index=True,
    )

    # Oracle verification
    is_verified = Column(Boolean, default=False, nullable=False)
    verified_by = Column(String(42), nullable=True)
    blockchain_event_id = Column(BigInteger, nullable=True)
    tx_hash = Column(String(66), nullable=True)

    created_by = Column(String(42), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    confirmed_at = Column(DateTime, nullable=True)
    verified_at = Column(DateTime, nullable=True)
