"""Persistencia SQLAlchemy Core (async)."""
