"""Oracle worker settings."""

import re
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PRIVATE_KEY_RE = re.compile(r"^0x[0-9a-fA-F]{64}$")
ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


class Settings(BaseSettings):
    """Worker settings - consistent with API settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Ledger
    rpc_url: str = "http://127.0.0.1:8545"
    oracle_private_key: str
    event_registry_address: str
    asset_passport_address: Optional[str] = None
    min_balance_eth: float = 0.01
    tx_receipt_timeout_seconds: int = Field(default=120, gt=0)

    # Record store gateway
    backend_url: str = "http://localhost:3000"
    oracle_api_key: str = Field(min_length=32)
    request_timeout_seconds: float = Field(default=10.0, gt=0)

    # Polling
    poll_interval_ms: int = Field(default=30000, gt=0)
    stale_processing_seconds: int = Field(default=0, ge=0)  # 0 disables the sweep

    # Observability
    metrics_port: int = Field(default=0, ge=0)  # 0 disables the exporter
    log_level: str = "INFO"

    @field_validator("oracle_private_key")
    @classmethod
    def check_private_key(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith("0x"):
            value = "0x" + value
        if not PRIVATE_KEY_RE.match(value):
            raise ValueError("ORACLE_PRIVATE_KEY must be 32 bytes of hex")
        return value

    @field_validator("event_registry_address", "asset_passport_address")
    @classmethod
    def check_address(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not ADDRESS_RE.match(value):
            raise ValueError("contract address must be 0x followed by 40 hex characters")
        return value

    @property
    def poll_interval_seconds(self) -> float:
        return self.poll_interval_ms / 1000.0


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
