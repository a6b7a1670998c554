"""
Progression and rewards engine

Level/XP curve, daily streaks, achievements, daily challenges, a points
ledger and a rewards shop, held in a local, client-side progression
snapshot.
"""

from progression.services.container import ServiceContainer
from progression.services.persistence import InMemoryGateway, JsonFileGateway, PersistenceGateway
from progression.services.progression_store import ProgressionStore

__version__ = "0.1.0"

__all__ = [
    "ServiceContainer",
    "ProgressionStore",
    "PersistenceGateway",
    "JsonFileGateway",
    "InMemoryGateway",
]
