"""VeriPass oracle worker: validates service records and anchors evidence on the ledger."""

__version__ = "0.1.0"
