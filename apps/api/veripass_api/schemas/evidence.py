"""Evidence schemas."""

from datetime import datetime
from typing import Any, Optional

from pydantic import AliasChoices, Field, field_validator

from veripass_api.enums import EventType, EvidenceStatus
from veripass_api.schemas.base import DATE_PATTERN, HASH_PATTERN, CamelModel, none_as_empty_list


class EvidenceFile(CamelModel):
    url: str
    type: str
    name: str


class EvidenceCreate(CamelModel):
    """Evidence creation request (step 1, before the ledger transaction)."""

    asset_id: int = Field(gt=0)
    event_type: EventType
    event_date: str = Field(pattern=DATE_PATTERN)
    provider_id: Optional[str] = Field(default=None, max_length=255)
    provider_name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    files: Optional[list[EvidenceFile]] = None
    metadata: Optional[dict[str, Any]] = None

    def hashed_fields(self) -> dict:
        """Fields committed to by the evidence hash. Attached files are presentation only."""
        return self.model_dump(by_alias=True, mode="json", exclude={"files"}, exclude_none=True)


class EvidenceConfirm(CamelModel):
    """Ledger confirmation (step 2, after the transaction is mined)."""

    tx_hash: Optional[str] = Field(default=None, pattern=HASH_PATTERN)
    blockchain_event_id: Optional[int] = Field(default=None, ge=0)


class EvidenceResponse(CamelModel):
    """Evidence representation."""

    id: int
    asset_id: int
    data_hash: str
    event_type: str
    event_date: Optional[str] = None
    provider_id: Optional[str] = None
    provider_name: Optional[str] = None
    description: Optional[str] = None
    files: list[EvidenceFile] = Field(default_factory=list)
    metadata: Optional[dict[str, Any]] = Field(
        default=None, validation_alias=AliasChoices("metadata_json", "metadata")
    )
    status: EvidenceStatus
    is_verified: bool
    verified_by: Optional[str] = None
    blockchain_event_id: Optional[int] = None
    tx_hash: Optional[str] = None
    created_by: str
    created_at: datetime
    confirmed_at: Optional[datetime] = None
    verified_at: Optional[datetime] = None

    @field_validator("files", mode="before")
    @classmethod
    def default_files(cls, value):
        return none_as_empty_list(value)
