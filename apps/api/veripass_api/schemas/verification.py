"""Verification request schemas."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from veripass_api.enums import RequestType, VerificationStatus
from veripass_api.schemas.base import HASH_PATTERN, CamelModel


class VerificationRequestCreate(CamelModel):
    """Ask the oracle to attest something about an asset."""

    asset_id: int = Field(gt=0)
    request_type: RequestType
    provider_id: Optional[str] = Field(default=None, max_length=255)


class VerificationRequestUpdate(CamelModel):
    """Status transition plus optional result fields. Only set fields are applied."""

    status: VerificationStatus
    blockchain_event_id: Optional[int] = Field(default=None, ge=0)
    tx_hash: Optional[str] = Field(default=None, pattern=HASH_PATTERN)
    data_hash: Optional[str] = Field(default=None, pattern=HASH_PATTERN)
    evidence_id: Optional[int] = None
    error_message: Optional[str] = None


class StaleRequestSweep(CamelModel):
    older_than_seconds: int = Field(gt=0)


class VerificationRequestResponse(CamelModel):
    """Verification request representation."""

    id: int
    request_id: str
    asset_id: int
    request_type: str
    provider_id: Optional[str] = None
    requested_by: str
    status: VerificationStatus
    blockchain_event_id: Optional[int] = None
    tx_hash: Optional[str] = None
    data_hash: Optional[str] = None
    evidence_id: Optional[int] = None
    error_message: Optional[str] = None
    created_at: datetime
    claimed_at: Optional[datetime] = None
    processed_at: Optional[datetime] = None
