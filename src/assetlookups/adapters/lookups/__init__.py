"""Lookup store adapters (in-memory and SQLAlchemy)."""

from .memory import InMemoryLookupStore
from .sqlalchemy_store import SqlAlchemyLookupStore

__all__ = ["InMemoryLookupStore", "SqlAlchemyLookupStore"]
