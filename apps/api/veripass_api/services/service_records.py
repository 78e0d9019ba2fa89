"""Read access to the service providers' records."""

from veripass_api.exceptions import NotFoundError
from veripass_api.models import Asset, ServiceRecord
from veripass_api.services.base import BaseService


class ServiceRecordService(BaseService):
    def list_for_asset(self, asset_id: int) -> list[ServiceRecord]:
        """Records for an existing asset, oldest service first."""
        asset_exists = self.db.query(Asset.id).filter(Asset.asset_id == asset_id).first()
        if not asset_exists:
            raise NotFoundError("Asset not found")

        return (
            self.db.query(ServiceRecord)
            .filter(ServiceRecord.asset_id == asset_id)
            .order_by(ServiceRecord.service_date.asc(), ServiceRecord.id.asc())
            .all()
        )
