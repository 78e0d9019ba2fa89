"""Verification request routes.

Users create requests and poll their status; only the oracle lists the
queue and moves requests through their lifecycle.
"""

from fastapi import APIRouter, Depends, Path, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from veripass_api.auth.dependencies import AuthUser, get_current_user, require_oracle
from veripass_api.db.session import get_db
from veripass_api.schemas.base import success_response
from veripass_api.schemas.verification import (
    StaleRequestSweep,
    VerificationRequestCreate,
    VerificationRequestResponse,
    VerificationRequestUpdate,
)
from veripass_api.services.verification import VerificationService

router = APIRouter(prefix="/api/verification-requests", tags=["verification"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_verification_request(
    request_data: VerificationRequestCreate,
    user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    request, created = VerificationService(db).create_request(request_data, user.address)
    body = success_response(
        VerificationRequestResponse.model_validate(request),
        "Verification request created successfully" if created else "Verification request already exists",
    )
    if created:
        return body
    return JSONResponse(status_code=status.HTTP_200_OK, content=body)


@router.get("/pending")
async def list_pending_requests(
    oracle: AuthUser = Depends(require_oracle),
    db: Session = Depends(get_db),
):
    rows = VerificationService(db).list_pending()
    return success_response(
        [VerificationRequestResponse.model_validate(row) for row in rows],
        "Pending requests retrieved successfully",
    )


@router.post("/expire-stale")
async def expire_stale_requests(
    sweep: StaleRequestSweep,
    oracle: AuthUser = Depends(require_oracle),
    db: Session = Depends(get_db),
):
    expired = VerificationService(db).expire_stale(sweep.older_than_seconds)
    return success_response(
        [VerificationRequestResponse.model_validate(row) for row in expired],
        f"Expired {len(expired)} stale request(s)",
    )


@router.get("/{request_id}")
async def get_verification_request(
    request_id: str = Path(min_length=1),
    db: Session = Depends(get_db),
):
    request = VerificationService(db).get_request(request_id)
    return success_response(
        VerificationRequestResponse.model_validate(request),
        "Verification request retrieved successfully",
    )


@router.patch("/{request_id}")
async def update_verification_request(
    update: VerificationRequestUpdate,
    request_id: str = Path(min_length=1),
    oracle: AuthUser = Depends(require_oracle),
    db: Session = Depends(get_db),
):
    request = VerificationService(db).update_request(request_id, update)
    return success_response(
        VerificationRequestResponse.model_validate(request),
        "Verification request updated successfully",
    )
