"""Evidence creation and confirmation."""

import logging
from datetime import datetime

from veripass_api.enums import EvidenceStatus
from veripass_api.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from veripass_api.hashing import calculate_hash
from veripass_api.models import Asset, Evidence
from veripass_api.schemas.evidence import EvidenceConfirm, EvidenceCreate
from veripass_api.services.base import BaseService, normalize_address
from veripass_api.utils.metrics import evidence_confirmed, evidence_created

logger = logging.getLogger(__name__)


class EvidenceService(BaseService):
    """Evidence goes PENDING on creation and CONFIRMED once its hash is on-chain."""

    def get_by_id(self, evidence_id: int) -> Evidence:
        evidence = self.db.query(Evidence).filter(Evidence.id == evidence_id).first()
        if not evidence:
            raise NotFoundError("Evidence not found")
        return evidence

    def get_by_hash(self, data_hash: str) -> Evidence:
        evidence = self.db.query(Evidence).filter(Evidence.data_hash == data_hash.lower()).first()
        if not evidence:
            raise NotFoundError("Evidence not found")
        return evidence

    def list_for_asset(self, asset_id: int) -> list[Evidence]:
        return (
            self.db.query(Evidence)
            .filter(Evidence.asset_id == asset_id)
            .order_by(Evidence.created_at.asc(), Evidence.id.asc())
            .all()
        )

    def create_evidence(self, data: EvidenceCreate, creator: str) -> tuple[Evidence, bool]:
        """Create PENDING evidence.

        Returns ``(evidence, created)``. An identical PENDING row is returned
        unchanged with ``created=False`` so clients can retry safely.
        """
        asset_exists = self.db.query(Asset.id).filter(Asset.asset_id == data.asset_id).first()
        if not asset_exists:
            raise NotFoundError("Asset not found")

        data_hash = calculate_hash(data.hashed_fields())

        existing = self.db.query(Evidence).filter(Evidence.data_hash == data_hash).first()
        if existing is not None:
            if existing.status == EvidenceStatus.PENDING:
                logger.info(
                    f"Evidence {existing.id} already pending, returning it",
                    extra={"evidence_id": existing.id, "data_hash": data_hash},
                )
                return existing, False
            raise ConflictError("Evidence already confirmed")

        evidence = Evidence(
            asset_id=data.asset_id,
            data_hash=data_hash,
            event_type=data.event_type.value,
            event_date=data.event_date,
            provider_id=data.provider_id,
            provider_name=data.provider_name,
            description=data.description,
            files=[f.model_dump() for f in data.files or []],
            metadata_json=data.metadata,
            status=EvidenceStatus.PENDING,
            is_verified=False,
            created_by=normalize_address(creator),
        )
        self.db.add(evidence)
        self._save(evidence)

        evidence_created.labels(event_type=evidence.event_type).inc()
        logger.info(
            f"Evidence {evidence.id} created for asset {data.asset_id}",
            extra={"evidence_id": evidence.id, "asset_id": data.asset_id, "data_hash": data_hash},
        )
        return evidence, True

    def confirm_evidence(
        self,
        evidence_id: int,
        data: EvidenceConfirm,
        caller: str,
        is_oracle: bool = False,
    ) -> Evidence:
        """Move PENDING evidence to CONFIRMED once its transaction is mined.

        The oracle may confirm any evidence and marks it verified; users may
        only confirm evidence they created.
        """
        evidence = (
            self.db.query(Evidence)
            .filter(Evidence.id == evidence_id, Evidence.status == EvidenceStatus.PENDING)
            .with_for_update()
            .first()
        )
        if not evidence:
            raise NotFoundError("Pending evidence not found")
        if not data.tx_hash:
            raise ValidationError("txHash is required to confirm evidence")

        caller = normalize_address(caller)
        if not is_oracle and evidence.created_by != caller:
            raise ForbiddenError("Only the evidence creator can confirm it")

        now = datetime.utcnow()
        evidence.status = EvidenceStatus.CONFIRMED
        evidence.tx_hash = data.tx_hash.lower()
        evidence.confirmed_at = now
        if data.blockchain_event_id is not None:
            evidence.blockchain_event_id = data.blockchain_event_id
        if is_oracle:
            evidence.is_verified = True
            evidence.verified_by = caller
            evidence.verified_at = now

        self._save(evidence)
        evidence_confirmed.labels(verified=str(evidence.is_verified).lower()).inc()
        logger.info(
            f"Evidence {evidence_id} confirmed",
            extra={"evidence_id": evidence_id, "tx_hash": evidence.tx_hash},
        )
        return evidence
