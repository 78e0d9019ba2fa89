"""Record store services."""
