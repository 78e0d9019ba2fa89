"""Asset schemas."""

from datetime import datetime
from typing import Any, Optional

from pydantic import AliasChoices, Field, field_validator

from veripass_api.enums import MintStatus
from veripass_api.schemas.base import DATE_PATTERN, HASH_PATTERN, CamelModel, none_as_empty_list


class AssetCreate(CamelModel):
    """Asset registration request."""

    asset_id: int = Field(gt=0)
    manufacturer: str = Field(min_length=1, max_length=255)
    model: str = Field(min_length=1, max_length=255)
    serial_number: str = Field(min_length=1, max_length=255)
    manufactured_date: str = Field(pattern=DATE_PATTERN)
    description: Optional[str] = None
    images: Optional[list[str]] = None
    metadata: Optional[dict[str, Any]] = None

    def hashed_fields(self) -> dict:
        """Fields committed to by the asset's data hash, salted with the asset id."""
        return self.model_dump(
            by_alias=True,
            mode="json",
            include={"asset_id", "manufacturer", "model", "serial_number", "manufactured_date", "description"},
            exclude_none=True,
        )


class MintStatusUpdate(CamelModel):
    """Mint outcome reported by the asset creator after the wallet transaction."""

    status: MintStatus
    tx_hash: Optional[str] = Field(default=None, pattern=HASH_PATTERN)


class AssetResponse(CamelModel):
    """Asset representation."""

    id: int
    asset_id: int
    data_hash: str
    manufacturer: str
    model: str
    serial_number: str
    manufactured_date: Optional[str] = None
    description: Optional[str] = None
    images: list[str] = Field(default_factory=list)
    metadata: Optional[dict[str, Any]] = Field(
        default=None, validation_alias=AliasChoices("metadata_json", "metadata")
    )
    mint_status: MintStatus
    tx_hash: Optional[str] = None
    created_by: str
    created_at: datetime
    minted_at: Optional[datetime] = None

    @field_validator("images", mode="before")
    @classmethod
    def default_images(cls, value):
        return none_as_empty_list(value)
