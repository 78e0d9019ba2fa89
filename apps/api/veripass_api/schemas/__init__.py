"""Request/response schemas shared by the API and the oracle."""
