"""Service provider and service record models (the oracle's private data source)."""

from datetime import datetime

from sqlalchemy import BigInteger, Boolean, Column, DateTime, ForeignKey, Integer, JSON, String, Text

from veripass_api.db.base import Base


class ServiceProvider(Base):
    """Organisation that performs maintenance, inspection or certification."""

    __tablename__ = "service_providers"

    id = Column(Integer, primary_key=True, index=True)
    provider_id = Column(String(255), nullable=False, unique=True)
    provider_name = Column(String(255), nullable=False)
    provider_type = Column(String(50), nullable=False)  # manufacturer, service_center, inspector
    is_trusted = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class ServiceRecord(Base):
    """A single service event held by a provider."""

    __tablename__ = "service_records"

    id = Column(Integer, primary_key=True, index=True)
    record_id = Column(String(255), nullable=False, unique=True)  # e.g. SR-001

    asset_id = Column(BigInteger, ForeignKey("assets.asset_id", ondelete="CASCADE"), nullable=False, index=True)
    provider_id = Column(String(255), nullable=False)

    service_type = Column(String(50), nullable=False)
    service_date = Column(String(10), nullable=False)  # YYYY-MM-DD
    technician = Column(String(255), nullable=True)
    work_performed = Column(JSON, nullable=True)
    notes = Column(Text, nullable=True)

    verified = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
