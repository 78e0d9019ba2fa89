"""Per-request verification pipeline."""

import logging
import time
from datetime import date, datetime
from typing import Callable, Optional

from veripass_api.enums import EventType, VerificationStatus
from veripass_api.exceptions import (
    ConflictError,
    NotFoundError,
    TransientInfrastructureError,
    ValidationError,
    VeripassError,
)
from veripass_api.hashing import calculate_hash
from veripass_oracle.gateway import BackendGateway
from veripass_oracle.ledger import LedgerClient
from veripass_oracle.metrics import requests_processed

logger = logging.getLogger(__name__)

NO_RECORDS_MESSAGE = "No service records found"
INVALID_RECORDS_MESSAGE = "Service records validation failed"


def _utc_today() -> date:
    return datetime.utcnow().date()


class Verifier:
    """Claims one request, validates its service records and anchors evidence.

    Failures after the claim never propagate: they end the request in FAILED
    with the error message, so a bad request cannot stop the worker. Once the
    event is on-chain the COMPLETED write is retried, and a FAILED row still
    carries the transaction hash and event id.
    """

    def __init__(
        self,
        gateway: BackendGateway,
        ledger: LedgerClient,
        today: Callable[[], date] = _utc_today,
        complete_attempts: int = 3,
        retry_delay: float = 1.0,
    ):
        self.gateway = gateway
        self.ledger = ledger
        self.today = today
        self.complete_attempts = complete_attempts
        self.retry_delay = retry_delay

    def process(self, request: dict) -> Optional[VerificationStatus]:
        """Run the pipeline for ``request``. Returns its final status, or None if skipped."""
        request_id = request["requestId"]
        log_extra = {"request_id": request_id, "asset_id": request.get("assetId")}
        logger.info(f"Processing request {request_id}", extra=log_extra)

        try:
            self.gateway.update_request(request_id, status=VerificationStatus.PROCESSING.value)
        except (ConflictError, NotFoundError) as e:
            logger.warning(f"Skipping {request_id}, already claimed or gone: {e.message}", extra=log_extra)
            return None
        except VeripassError as e:
            # Still PENDING, so the next poll picks it up again.
            logger.error(f"Could not claim {request_id}: {e.message}", extra=log_extra)
            return None

        try:
            anchored = self._verify_and_anchor(request, log_extra)
        except Exception as e:
            return self._fail(request_id, e, log_extra)

        # The event is on-chain now: every later write carries its reference.
        try:
            self._complete(request_id, anchored, log_extra)
        except Exception as e:
            return self._fail(request_id, e, log_extra, **anchored)

        requests_processed.labels(status=VerificationStatus.COMPLETED.value).inc()
        logger.info(f"Verification completed: {request_id}", extra=log_extra)
        return VerificationStatus.COMPLETED

    def _verify_and_anchor(self, request: dict, log_extra: dict) -> dict:
        """Validate, create evidence and submit it. Returns the ledger reference fields."""
        request_id = request["requestId"]
        asset_id = request["assetId"]

        records = self.gateway.fetch_supporting_records(asset_id)
        self.validate_records(records)
        logger.info(f"Found {len(records)} verified service record(s)", extra=log_extra)

        payload = self.build_evidence_payload(request, records)
        evidence = self.gateway.create_evidence(payload)
        logger.info(f"Evidence created: {evidence.id}", extra={**log_extra, "evidence_id": evidence.id})

        digest = calculate_hash(payload)
        if digest != evidence.data_hash.lower():
            raise ValidationError(
                f"Evidence hash mismatch: computed {digest}, record store has {evidence.data_hash}"
            )
        signature = self.ledger.sign_digest(digest)

        submission = self.ledger.submit_verified_event(asset_id, digest, signature)
        logger.info(
            f"Event {submission.event_id} recorded for {request_id} in {submission.tx_hash}",
            extra={**log_extra, "tx_hash": submission.tx_hash},
        )

        try:
            self.gateway.confirm_evidence(evidence.id, submission.tx_hash, submission.event_id)
        except VeripassError as e:
            logger.warning(f"Could not confirm evidence {evidence.id}: {e.message}", extra=log_extra)

        return {
            "blockchainEventId": submission.event_id,
            "txHash": submission.tx_hash,
            "dataHash": evidence.data_hash,
            "evidenceId": evidence.id,
        }

    def _complete(self, request_id: str, anchored: dict, log_extra: dict) -> None:
        for attempt in range(1, self.complete_attempts + 1):
            try:
                self.gateway.update_request(request_id, status=VerificationStatus.COMPLETED.value, **anchored)
                return
            except TransientInfrastructureError as e:
                if attempt == self.complete_attempts:
                    raise
                logger.warning(
                    f"Could not mark {request_id} as COMPLETED (attempt {attempt}): {e.message}",
                    extra=log_extra,
                )
                time.sleep(self.retry_delay * attempt)

    @staticmethod
    def validate_records(records: list[dict]) -> None:
        """The oracle only attests to records their provider already verified."""
        if not records:
            raise ValidationError(NO_RECORDS_MESSAGE)
        if not all(record.get("verified") is True for record in records):
            raise ValidationError(INVALID_RECORDS_MESSAGE)

    def build_evidence_payload(self, request: dict, records: list[dict]) -> dict:
        """Evidence body sent to the record store; its hash is what goes on-chain."""
        payload = {
            "assetId": request["assetId"],
            "eventType": EventType.VERIFICATION.value,
            "eventDate": self.today().isoformat(),
            "providerName": records[0]["providerId"],
            "description": "Oracle verified service records",
            "metadata": {
                "requestId": request["requestId"],
                "serviceRecords": [
                    {
                        "recordId": record["recordId"],
                        "serviceType": record["serviceType"],
                        "serviceDate": record["serviceDate"],
                    }
                    for record in records
                ],
                "verifiedBy": self.ledger.address,
            },
        }
        if request.get("providerId"):
            payload["providerId"] = request["providerId"]
        return payload

    def _fail(self, request_id: str, error: Exception, log_extra: dict, **anchored) -> VerificationStatus:
        message = error.message if isinstance(error, VeripassError) else str(error)
        message = message or type(error).__name__
        logger.error(f"Verification failed for {request_id}: {message}", extra=log_extra)
        self._mark_failed(request_id, message, log_extra, **anchored)
        requests_processed.labels(status=VerificationStatus.FAILED.value).inc()
        return VerificationStatus.FAILED

    def _mark_failed(self, request_id: str, message: str, log_extra: dict, **anchored) -> None:
        try:
            self.gateway.update_request(
                request_id,
                status=VerificationStatus.FAILED.value,
                errorMessage=message,
                **anchored,
            )
        except Exception as e:
            logger.error(f"Could not mark {request_id} as FAILED: {e}", extra={**log_extra, **anchored})
