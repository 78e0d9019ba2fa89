"""Database engine, session and seed helpers."""
