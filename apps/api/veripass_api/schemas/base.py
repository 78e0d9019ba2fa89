"""Response envelopes and the camelCase base model."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from veripass_api.hashing import has_unpaired_surrogate

HASH_PATTERN = r"^0x[a-fA-F0-9]{64}$"
DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


def _contains_unpaired_surrogate(value: Any) -> bool:
    if isinstance(value, str):
        return has_unpaired_surrogate(value)
    if isinstance(value, dict):
        return any(_contains_unpaired_surrogate(k) or _contains_unpaired_surrogate(v) for k, v in value.items())
    if isinstance(value, (list, tuple)):
        return any(_contains_unpaired_surrogate(item) for item in value)
    return False


class CamelModel(BaseModel):
    """Base model: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    @field_validator("*")
    @classmethod
    def reject_unpaired_surrogates(cls, value: Any) -> Any:
        # Such text cannot be stored or returned as UTF-8.
        if _contains_unpaired_surrogate(value):
            raise ValueError("Text contains an unpaired UTF-16 surrogate")
        return value

    def to_wire(self, **kwargs) -> dict:
        """Dump as JSON-compatible camelCase dict."""
        return self.model_dump(by_alias=True, mode="json", **kwargs)


class ErrorResponse(BaseModel):
    """Error envelope."""

    success: bool = False
    error: str
    details: Optional[Any] = None


def success_response(data: Any, message: str = "Success") -> dict:
    """Build a success envelope around ``data``."""
    if isinstance(data, CamelModel):
        data = data.to_wire()
    elif isinstance(data, list):
        data = [item.to_wire() if isinstance(item, CamelModel) else item for item in data]
    return {"success": True, "message": message, "data": data}


def none_as_empty_list(value: Any) -> Any:
    """JSON list columns are nullable; expose them as empty lists."""
    return [] if value is None else value
