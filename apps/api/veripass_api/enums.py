"""Closed enumerations and their status transition tables."""

from enum import Enum


class _Status(str, Enum):
    """String-valued status with an explicit transition table."""

    @classmethod
    def _transitions(cls) -> dict:
        raise NotImplementedError

    @property
    def is_terminal(self) -> bool:
        return not self._transitions()[self]

    def can_transition_to(self, target: "_Status") -> bool:
        """Check whether moving from this status to ``target`` is allowed."""
        return target in self._transitions()[self]


class MintStatus(_Status):
    """Asset mint lifecycle."""

    PENDING = "PENDING"
    MINTED = "MINTED"
    FAILED = "FAILED"

    @classmethod
    def _transitions(cls) -> dict:
        return {
            cls.PENDING: frozenset({cls.MINTED, cls.FAILED}),
            cls.MINTED: frozenset(),
            cls.FAILED: frozenset(),
        }


class EvidenceStatus(_Status):
    """Evidence lifecycle: created off-chain, then confirmed on-chain."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"

    @classmethod
    def _transitions(cls) -> dict:
        return {
            cls.PENDING: frozenset({cls.CONFIRMED}),
            cls.CONFIRMED: frozenset(),
        }


class VerificationStatus(_Status):
    """Verification request lifecycle. Strictly forward."""

    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

    @classmethod
    def _transitions(cls) -> dict:
        return {
            cls.PENDING: frozenset({cls.PROCESSING, cls.FAILED}),
            cls.PROCESSING: frozenset({cls.COMPLETED, cls.FAILED}),
            cls.COMPLETED: frozenset(),
            cls.FAILED: frozenset(),
        }


class EventType(str, Enum):
    """Lifecycle event types (mirrors the EventRegistry contract enum)."""

    MAINTENANCE = "MAINTENANCE"
    VERIFICATION = "VERIFICATION"
    WARRANTY = "WARRANTY"
    CERTIFICATION = "CERTIFICATION"
    CUSTOM = "CUSTOM"


class RequestType(str, Enum):
    """Kinds of work a verification request can ask for."""

    SERVICE_VERIFICATION = "SERVICE_VERIFICATION"
    AUTHENTICITY_CHECK = "AUTHENTICITY_CHECK"


class ProviderType(str, Enum):
    MANUFACTURER = "manufacturer"
    SERVICE_CENTER = "service_center"
    INSPECTOR = "inspector"


class ServiceType(str, Enum):
    ROUTINE_MAINTENANCE = "ROUTINE_MAINTENANCE"
    REPAIR = "REPAIR"
    INSPECTION = "INSPECTION"
    REPLACEMENT = "REPLACEMENT"
