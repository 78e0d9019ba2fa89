"""HTTP client for the record store, authenticated as the oracle."""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests

from veripass_api.exceptions import TransientInfrastructureError, error_for_status

logger = logging.getLogger(__name__)

ORACLE_KEY_HEADER = "X-Oracle-Key"
ORACLE_ADDRESS_HEADER = "X-Oracle-Address"


@dataclass(frozen=True)
class CreatedEvidence:
    """Identity of an evidence row as the record store stored it."""

    id: int
    data_hash: str


class BackendGateway:
    """Client for the VeriPass API, as used by the oracle.

    Every call unwraps the ``{success, message, data}`` envelope and turns
    error responses back into the shared error taxonomy.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        oracle_address: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        """Initialize gateway."""
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                ORACLE_KEY_HEADER: api_key,
                ORACLE_ADDRESS_HEADER: oracle_address,
                "Content-Type": "application/json",
            }
        )

    def _request(self, method: str, path: str, payload: Optional[dict] = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, json=payload, timeout=self.timeout)
        except (requests.ConnectionError, requests.Timeout) as e:
            raise TransientInfrastructureError(f"Record store unreachable: {e}") from e
        except requests.RequestException as e:
            raise TransientInfrastructureError(f"Record store request failed: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if response.status_code >= 400:
            message = body.get("error") or f"{method} {path} failed with HTTP {response.status_code}"
            raise error_for_status(response.status_code, message, body.get("details"))

        return body.get("data")

    def fetch_pending_requests(self) -> list[dict]:
        """Verification requests waiting for the oracle, oldest first."""
        return self._request("GET", "/api/verification-requests/pending") or []

    def fetch_supporting_records(self, asset_id: int) -> list[dict]:
        """Service records held for ``asset_id``."""
        return self._request("GET", f"/api/service-records/{asset_id}") or []

    def update_request(self, request_id: str, **fields) -> dict:
        """Move a request to a new status.

        Keyword arguments use the wire names (``status``, ``txHash``,
        ``blockchainEventId``, ...); ``None`` values are not sent.
        """
        payload = {key: value for key, value in fields.items() if value is not None}
        return self._request("PATCH", f"/api/verification-requests/{request_id}", payload)

    def create_evidence(self, payload: dict) -> CreatedEvidence:
        data = self._request("POST", "/api/evidence", payload)
        return CreatedEvidence(id=int(data["id"]), data_hash=data["dataHash"])

    def confirm_evidence(self, evidence_id: int, tx_hash: str, event_id: Optional[int] = None) -> dict:
        payload = {"txHash": tx_hash}
        if event_id is not None:
            payload["blockchainEventId"] = event_id
        return self._request("POST", f"/api/evidence/{evidence_id}/confirm", payload)

    def expire_stale_requests(self, older_than_seconds: int) -> list[dict]:
        """Fail requests stuck in PROCESSING for longer than ``older_than_seconds``."""
        return (
            self._request(
                "POST",
                "/api/verification-requests/expire-stale",
                {"olderThanSeconds": older_than_seconds},
            )
            or []
        )

    def close(self) -> None:
        self.session.close()
