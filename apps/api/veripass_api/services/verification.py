"""Verification request queue and its forward-only state machine."""

import logging
import secrets
import string
import time
from datetime import datetime, timedelta

from veripass_api.enums import VerificationStatus
from veripass_api.exceptions import ConflictError, NotFoundError
from veripass_api.models import Asset, Evidence, VerificationRequest
from veripass_api.schemas.verification import VerificationRequestCreate, VerificationRequestUpdate
from veripass_api.services.base import BaseService, normalize_address
from veripass_api.utils.metrics import verification_transitions

logger = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_lowercase
STALE_ERROR_MESSAGE = "Processing timed out"


def generate_request_id() -> str:
    """Opaque request id: ``VR-<epoch ms>-<9 random base36 chars>``."""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"VR-{int(time.time() * 1000)}-{suffix}"


class VerificationService(BaseService):
    """Create, list and transition verification requests."""

    def get_request(self, request_id: str) -> VerificationRequest:
        request = (
            self.db.query(VerificationRequest)
            .filter(VerificationRequest.request_id == request_id)
            .first()
        )
        if not request:
            raise NotFoundError("Verification request not found")
        return request

    def list_pending(self) -> list[VerificationRequest]:
        """PENDING requests in creation order."""
        return (
            self.db.query(VerificationRequest)
            .filter(VerificationRequest.status == VerificationStatus.PENDING)
            .order_by(VerificationRequest.created_at.asc(), VerificationRequest.id.asc())
            .all()
        )

    def create_request(self, data: VerificationRequestCreate, requester: str) -> tuple[VerificationRequest, bool]:
        """Create a PENDING request, or return the matching PENDING one.

        Matching is on (assetId, requestType, providerId or null, requestedBy).
        Returns ``(request, created)``.
        """
        asset_exists = self.db.query(Asset.id).filter(Asset.asset_id == data.asset_id).first()
        if not asset_exists:
            raise NotFoundError("Asset not found")

        requester = normalize_address(requester)
        request_type = data.request_type.value

        query = self.db.query(VerificationRequest).filter(
            VerificationRequest.asset_id == data.asset_id,
            VerificationRequest.request_type == request_type,
            VerificationRequest.requested_by == requester,
            VerificationRequest.status == VerificationStatus.PENDING,
        )
        if data.provider_id:
            query = query.filter(VerificationRequest.provider_id == data.provider_id)
        else:
            query = query.filter(VerificationRequest.provider_id.is_(None))

        existing = query.first()
        if existing is not None:
            logger.info(
                f"Verification request {existing.request_id} already pending",
                extra={"request_id": existing.request_id, "asset_id": data.asset_id},
            )
            return existing, False

        request = VerificationRequest(
            request_id=generate_request_id(),
            asset_id=data.asset_id,
            request_type=request_type,
            provider_id=data.provider_id or None,
            requested_by=requester,
            status=VerificationStatus.PENDING,
        )
        self.db.add(request)
        self._save(request)

        verification_transitions.labels(status=VerificationStatus.PENDING.value).inc()
        logger.info(
            f"Verification request {request.request_id} created",
            extra={"request_id": request.request_id, "asset_id": data.asset_id, "request_type": request_type},
        )
        return request, True

    def update_request(self, request_id: str, data: VerificationRequestUpdate) -> VerificationRequest:
        """Apply a status transition and any supplied result fields."""
        fields = data.model_dump(exclude_unset=True, exclude={"status"})

        if fields.get("evidence_id") is not None:
            evidence_exists = self.db.query(Evidence.id).filter(Evidence.id == fields["evidence_id"]).first()
            if not evidence_exists:
                raise NotFoundError("Evidence not found")

        request = (
            self.db.query(VerificationRequest)
            .filter(VerificationRequest.request_id == request_id)
            .with_for_update()
            .first()
        )
        if not request:
            raise NotFoundError("Verification request not found")

        current = VerificationStatus(request.status)
        if not current.can_transition_to(data.status):
            raise ConflictError(
                f"Cannot move verification request from {current.value} to {data.status.value}"
            )

        now = datetime.utcnow()
        request.status = data.status
        if data.status == VerificationStatus.PROCESSING:
            request.claimed_at = now
        elif data.status in (VerificationStatus.COMPLETED, VerificationStatus.FAILED):
            request.processed_at = now

        for name in ("blockchain_event_id", "tx_hash", "data_hash", "evidence_id", "error_message"):
            if name in fields:
                value = fields[name]
                if name in ("tx_hash", "data_hash") and value:
                    value = value.lower()
                setattr(request, name, value)

        self._save(request)
        verification_transitions.labels(status=data.status.value).inc()
        logger.info(
            f"Verification request {request_id}: {current.value} -> {data.status.value}",
            extra={"request_id": request_id, "tx_hash": request.tx_hash, "error": request.error_message},
        )
        return request

    def expire_stale(self, older_than_seconds: int) -> list[VerificationRequest]:
        """Fail PROCESSING requests claimed more than ``older_than_seconds`` ago.

        They are not re-queued: the ledger transaction may already be mined.
        """
        cutoff = datetime.utcnow() - timedelta(seconds=older_than_seconds)
        stale = (
            self.db.query(VerificationRequest)
            .filter(
                VerificationRequest.status == VerificationStatus.PROCESSING,
                VerificationRequest.claimed_at < cutoff,
            )
            .with_for_update()
            .all()
        )
        if not stale:
            return []

        now = datetime.utcnow()
        for request in stale:
            request.status = VerificationStatus.FAILED
            request.processed_at = now
            request.error_message = STALE_ERROR_MESSAGE
            verification_transitions.labels(status=VerificationStatus.FAILED.value).inc()
        self.db.commit()

        logger.warning(
            f"Expired {len(stale)} stale verification request(s)",
            extra={"request_ids": [r.request_id for r in stale]},
        )
        return stale
