"""Asset model."""

from datetime import datetime

from sqlalchemy import BigInteger, Column, DateTime, Enum, Integer, JSON, String, Text

from veripass_api.db.base import Base
from veripass_api.enums import MintStatus


class Asset(Base):
    """A physical item's canonical identity, mirrored from the AssetPassport token."""

    __tablename__ = "assets"

    id = Column(Integer, primary_key=True, index=True)
    asset_id = Column(BigInteger, nullable=False, unique=True, index=True)  # equals the on-chain token id
    data_hash = Column(String(66), nullable=False, unique=True, index=True)

    # Hashed metadata
    manufacturer = Column(String(255), nullable=False)
    model = Column(String(255), nullable=False)
    serial_number = Column(String(255), nullable=False)
    manufactured_date = Column(String(10), nullable=True)  # YYYY-MM-DD
    description = Column(Text, nullable=True)

    # Not hashed
    images = Column(JSON, nullable=True)
    metadata_json = Column(JSON, nullable=True)

    mint_status = Column(
        Enum(MintStatus, name="mint_status", native_enum=False, length=20),
        default=MintStatus.PENDING,
        nullable=False,
        index=True,
    )
    tx_hash = Column(String(66), nullable=True)

    created_by = Column(String(42), nullable=False, index=True)  # lowercase wallet address
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    minted_at = Column(DateTime, nullable=True)
