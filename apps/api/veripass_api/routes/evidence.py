"""Evidence routes."""

from fastapi import APIRouter, Depends, Path, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from veripass_api.auth.dependencies import AuthUser, get_flexible_user
from veripass_api.db.session import get_db
from veripass_api.schemas.base import HASH_PATTERN, success_response
from veripass_api.schemas.evidence import EvidenceConfirm, EvidenceCreate, EvidenceResponse
from veripass_api.services.evidence import EvidenceService

router = APIRouter(prefix="/api/evidence", tags=["evidence"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_evidence(
    evidence_data: EvidenceCreate,
    user: AuthUser = Depends(get_flexible_user),
    db: Session = Depends(get_db),
):
    """Create evidence (step 1, before the ledger transaction).

    Re-submitting identical pending evidence returns the existing row with 200.
    """
    evidence, created = EvidenceService(db).create_evidence(evidence_data, user.address)
    body = success_response(
        EvidenceResponse.model_validate(evidence),
        "Evidence created successfully" if created else "Evidence already pending",
    )
    if created:
        return body
    return JSONResponse(status_code=status.HTTP_200_OK, content=body)


@router.post("/{evidence_id}/confirm")
async def confirm_evidence(
    confirmation: EvidenceConfirm,
    evidence_id: int = Path(gt=0),
    user: AuthUser = Depends(get_flexible_user),
    db: Session = Depends(get_db),
):
    """Confirm evidence (step 2, after the ledger transaction is mined)."""
    evidence = EvidenceService(db).confirm_evidence(
        evidence_id, confirmation, user.address, is_oracle=user.is_oracle
    )
    return success_response(EvidenceResponse.model_validate(evidence), "Evidence confirmed successfully")


@router.get("/by-hash/{data_hash}")
async def get_evidence_by_hash(
    data_hash: str = Path(pattern=HASH_PATTERN),
    db: Session = Depends(get_db),
):
    evidence = EvidenceService(db).get_by_hash(data_hash)
    return success_response(EvidenceResponse.model_validate(evidence), "Evidence retrieved successfully")


@router.get("/asset/{asset_id}")
async def list_evidence_for_asset(
    asset_id: int = Path(gt=0),
    db: Session = Depends(get_db),
):
    rows = EvidenceService(db).list_for_asset(asset_id)
    return success_response(
        [EvidenceResponse.model_validate(row) for row in rows],
        "Evidence list retrieved successfully",
    )
