"""Asset routes."""

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from veripass_api.auth.dependencies import AuthUser, get_current_user
from veripass_api.db.session import get_db
from veripass_api.schemas.asset import AssetCreate, AssetResponse, MintStatusUpdate
from veripass_api.schemas.base import HASH_PATTERN, success_response
from veripass_api.services.assets import AssetService

router = APIRouter(prefix="/api/assets", tags=["assets"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_asset(
    asset_data: AssetCreate,
    user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Register an asset before its passport token is minted."""
    asset = AssetService(db).create_asset(asset_data, user.address)
    return success_response(AssetResponse.model_validate(asset), "Asset created successfully")


@router.get("/by-hash/{data_hash}")
async def get_asset_by_hash(
    data_hash: str = Path(pattern=HASH_PATTERN),
    db: Session = Depends(get_db),
):
    asset = AssetService(db).get_by_hash(data_hash)
    return success_response(AssetResponse.model_validate(asset), "Asset retrieved successfully")


@router.get("/{asset_id}")
async def get_asset(
    asset_id: int = Path(gt=0),
    db: Session = Depends(get_db),
):
    asset = AssetService(db).get_by_asset_id(asset_id)
    return success_response(AssetResponse.model_validate(asset), "Asset retrieved successfully")


@router.patch("/{asset_id}/mint-status")
async def update_mint_status(
    update: MintStatusUpdate,
    asset_id: int = Path(gt=0),
    user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Report the outcome of the creator's mint transaction."""
    asset = AssetService(db).update_mint_status(asset_id, update, user.address)
    return success_response(AssetResponse.model_validate(asset), "Mint status updated successfully")
