"""Repository layer - persistence interfaces (ports)."""

from shadfocus_cli.repositories.gateway import (
    PersistenceGateway,
    TimerDocument,
    Unsubscribe,
    read_once,
)

__all__ = [
    "PersistenceGateway",
    "TimerDocument",
    "Unsubscribe",
    "read_once",
]
