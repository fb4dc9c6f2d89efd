"""Adapters module - gateway implementations for different storage backends.

- memory: process-local store, used by tests
- sqlite: local SQLite database file, shareable between processes
"""

from .memory import InMemoryGateway
from .sqlite import SqliteGateway

__all__ = [
    "InMemoryGateway",
    "SqliteGateway",
]
