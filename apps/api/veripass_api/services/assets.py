"""Asset registration and mint-status state machine."""

import logging
from datetime import datetime

from veripass_api.enums import MintStatus
from veripass_api.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from veripass_api.hashing import calculate_hash
from veripass_api.models import Asset
from veripass_api.schemas.asset import AssetCreate, MintStatusUpdate
from veripass_api.services.base import BaseService, normalize_address
from veripass_api.utils.metrics import assets_created, mint_status_updates

logger = logging.getLogger(__name__)


class AssetService(BaseService):
    """Create assets ahead of the wallet mint and record the mint outcome."""

    def get_by_asset_id(self, asset_id: int) -> Asset:
        asset = self.db.query(Asset).filter(Asset.asset_id == asset_id).first()
        if not asset:
            raise NotFoundError("Asset not found")
        return asset

    def get_by_hash(self, data_hash: str) -> Asset:
        asset = self.db.query(Asset).filter(Asset.data_hash == data_hash.lower()).first()
        if not asset:
            raise NotFoundError("Asset not found")
        return asset

    def create_asset(self, data: AssetCreate, creator: str) -> Asset:
        """Create a PENDING asset, or reset the creator's own unfinished attempt.

        - no row: insert PENDING
        - MINTED: Conflict
        - PENDING owned by someone else: Forbidden (their mint is in flight)
        - PENDING owned by the creator, or FAILED: overwrite as a fresh attempt
        """
        creator = normalize_address(creator)
        data_hash = calculate_hash(data.hashed_fields())

        asset = self.db.query(Asset).filter(Asset.asset_id == data.asset_id).with_for_update().first()
        if asset is not None:
            if asset.mint_status == MintStatus.MINTED:
                raise ConflictError("Asset already exists")
            if asset.mint_status == MintStatus.PENDING and asset.created_by != creator:
                raise ForbiddenError("Asset mint is already in progress by another address")

        retry = asset is not None
        if asset is None:
            asset = Asset(asset_id=data.asset_id)
            self.db.add(asset)

        asset.data_hash = data_hash
        asset.manufacturer = data.manufacturer
        asset.model = data.model
        asset.serial_number = data.serial_number
        asset.manufactured_date = data.manufactured_date
        asset.description = data.description
        asset.images = data.images or []
        asset.metadata_json = data.metadata
        asset.mint_status = MintStatus.PENDING
        asset.tx_hash = None
        asset.minted_at = None
        asset.created_by = creator

        self._save(asset)
        assets_created.labels(retry=str(retry).lower()).inc()
        logger.info(
            f"Asset {asset.asset_id} {'reset for retry' if retry else 'created'}",
            extra={"asset_id": asset.asset_id, "data_hash": data_hash, "created_by": creator},
        )
        return asset

    def update_mint_status(self, asset_id: int, data: MintStatusUpdate, caller: str) -> Asset:
        """Record the mint outcome. Creator only, and only from PENDING."""
        asset = self.db.query(Asset).filter(Asset.asset_id == asset_id).with_for_update().first()
        if not asset:
            raise NotFoundError("Asset not found")
        if asset.created_by != normalize_address(caller):
            raise ForbiddenError("Only the asset creator can update its mint status")
        if not asset.mint_status.can_transition_to(data.status):
            raise ConflictError(
                f"Cannot change mint status from {asset.mint_status.value} to {data.status.value}"
            )

        if data.status == MintStatus.MINTED:
            if not data.tx_hash:
                raise ValidationError("txHash is required to mark an asset as minted")
            asset.tx_hash = data.tx_hash.lower()
            asset.minted_at = datetime.utcnow()
        else:
            asset.tx_hash = None
            asset.minted_at = None
        asset.mint_status = data.status

        self._save(asset)
        mint_status_updates.labels(status=data.status.value).inc()
        logger.info(
            f"Asset {asset_id} mint status -> {data.status.value}",
            extra={"asset_id": asset_id, "tx_hash": asset.tx_hash},
        )
        return asset
