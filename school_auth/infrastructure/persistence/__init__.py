"""Persistence adapters (SQLAlchemy async and in-memory)."""
