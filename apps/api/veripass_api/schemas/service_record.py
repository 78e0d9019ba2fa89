"""Service record schemas."""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from veripass_api.schemas.base import CamelModel, none_as_empty_list


class ServiceRecordResponse(CamelModel):
    """A provider's service record as handed to the oracle."""

    id: int
    record_id: str
    asset_id: int
    provider_id: str
    service_type: str
    service_date: str
    technician: Optional[str] = None
    work_performed: list[str] = Field(default_factory=list)
    notes: Optional[str] = None
    verified: bool
    created_at: datetime

    @field_validator("work_performed", mode="before")
    @classmethod
    def default_work_performed(cls, value):
        return none_as_empty_list(value)
