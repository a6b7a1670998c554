"""
Service Layer Package

Services that own progression state and its storage, sitting between the
app surfaces (screens, CLI) and the pure gamification rules.

- ProgressionStore: aggregate root and mutation API
- PersistenceGateway: snapshot storage (JSON file, in-memory)
- ServiceContainer: lazy wiring of the above
"""

from progression.services.container import ServiceContainer
from progression.services.persistence import InMemoryGateway, JsonFileGateway, PersistenceGateway
from progression.services.progression_store import ProgressionStore

__all__ = [
    "ServiceContainer",
    "ProgressionStore",
    "PersistenceGateway",
    "JsonFileGateway",
    "InMemoryGateway",
]
