"""Base service class for the record store."""

from typing import Optional

from sqlalchemy.orm import Session


def normalize_address(address: Optional[str]) -> Optional[str]:
    """Wallet addresses are stored and compared lowercase."""
    return address.lower() if address else address


class BaseService:
    """Base service bound to one database session.

    Services flush and commit their own writes; the caller owns the session
    lifetime.
    """

    def __init__(self, db: Session):
        """Initialize service with a session."""
        self.db = db

    def _save(self, instance):
        """Commit pending changes and reload ``instance``."""
        self.db.commit()
        self.db.refresh(instance)
        return instance
