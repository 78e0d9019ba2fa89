"""VeriPass record store and HTTP API."""

__version__ = "0.1.0"
