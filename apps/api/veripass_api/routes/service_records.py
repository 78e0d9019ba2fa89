"""Service record routes."""

from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from veripass_api.auth.dependencies import AuthUser, get_flexible_user
from veripass_api.db.session import get_db
from veripass_api.schemas.base import success_response
from veripass_api.schemas.service_record import ServiceRecordResponse
from veripass_api.services.service_records import ServiceRecordService

router = APIRouter(prefix="/api/service-records", tags=["service-records"])


@router.get("/{asset_id}")
async def list_service_records(
    asset_id: int = Path(gt=0),
    user: AuthUser = Depends(get_flexible_user),
    db: Session = Depends(get_db),
):
    rows = ServiceRecordService(db).list_for_asset(asset_id)
    return success_response(
        [ServiceRecordResponse.model_validate(row) for row in rows],
        "Service records retrieved successfully",
    )
