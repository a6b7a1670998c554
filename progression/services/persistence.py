"""
Progression persistence

The whole progression state is stored as one JSON blob under a namespaced
key ('@gamification_data'). Every save overwrites the blob completely.

Failures never reach the caller: loading falls back to defaults and a
failed save is logged and dropped. The in-memory state is the source of
truth until the next successful save.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

from progression import config
from progression.exceptions import wrap_storage_exception
from progression.gamification.achievement_system import merge_with_catalog
from progression.models.progression import UserProgression

logger = logging.getLogger(__name__)


def serialize_progression(state: UserProgression) -> str:
    """Serialize state to the stored blob (camelCase keys)"""
    return state.model_dump_json(by_alias=True)


def deserialize_progression(blob: str) -> UserProgression:
    """
    Parse a stored blob

    Missing fields take their defaults; stored achievements are overlaid
    onto the current catalog.
    """
    data = json.loads(blob)
    if not isinstance(data, dict):
        raise ValueError("Progression snapshot must be a JSON object")

    state = UserProgression.model_validate(data)
    if "achievements" in data:
        state.achievements = merge_with_catalog(state.achievements)
    return state


class PersistenceGateway(ABC):
    """Loads and saves the single progression snapshot"""

    @abstractmethod
    async def read_blob(self) -> Optional[str]:
        """Raw stored blob, or None when nothing has been stored yet"""

    @abstractmethod
    async def write_blob(self, blob: str) -> None:
        """Replace the stored blob"""

    @property
    def location(self) -> str:
        return self.__class__.__name__

    async def load(self) -> Optional[UserProgression]:
        """
        Load the stored snapshot

        Returns:
            The stored state, or None when nothing is stored or the
            snapshot cannot be read (the caller then uses defaults)
        """
        try:
            blob = await self.read_blob()
            if blob is None:
                logger.info(f"No stored progression at {self.location}, starting fresh")
                return None
            state = deserialize_progression(blob)
        except Exception as e:
            error = wrap_storage_exception(e, operation="load_progression", location=self.location)
            logger.warning(
                f"Progression at {self.location} unreadable, starting from defaults",
                extra={"error": error.to_dict()}
            )
            return None

        logger.info(f"Loaded progression from {self.location}: level {state.level}, {state.total_points} points")
        return state

    async def save(self, state: UserProgression) -> bool:
        """
        Overwrite the stored snapshot

        Returns:
            True when the snapshot was written, False when the write failed
        """
        try:
            await self.write_blob(serialize_progression(state))
        except Exception as e:
            error = wrap_storage_exception(e, operation="save_progression", location=self.location)
            logger.warning(
                f"Progression not saved to {self.location} (request {error.request_id})",
                extra={"error": error.to_dict()}
            )
            return False

        logger.debug(f"Saved progression to {self.location}")
        return True


class JsonFileGateway(PersistenceGateway):
    """Stores the snapshot as a JSON file under DATA_PATH"""

    def __init__(self, data_path: Path = config.DATA_PATH, key: str = config.STORAGE_KEY):
        self.data_path = Path(data_path)
        self.key = key

    @property
    def path(self) -> Path:
        return self.data_path / config.storage_filename(self.key)

    @property
    def location(self) -> str:
        return str(self.path)

    async def read_blob(self) -> Optional[str]:
        if not self.path.exists():
            return None
        return self.path.read_text(encoding="utf-8")

    async def write_blob(self, blob: str) -> None:
        self.data_path.mkdir(parents=True, exist_ok=True)
        # Write next to the target and swap, so a crash never leaves half a file
        tmp_path = self.path.with_suffix(".tmp")
        tmp_path.write_text(blob, encoding="utf-8")
        tmp_path.replace(self.path)


class InMemoryGateway(PersistenceGateway):
    """Keeps serialized snapshots in a dict (tests, dry runs)"""

    def __init__(self, key: str = config.STORAGE_KEY, storage: Optional[Dict[str, str]] = None):
        self.key = key
        self.storage = storage if storage is not None else {}
        self.save_count = 0

    @property
    def location(self) -> str:
        return f"memory:{self.key}"

    async def read_blob(self) -> Optional[str]:
        return self.storage.get(self.key)

    async def write_blob(self, blob: str) -> None:
        self.storage[self.key] = blob
        self.save_count += 1


__all__ = [
    "PersistenceGateway",
    "JsonFileGateway",
    "InMemoryGateway",
    "serialize_progression",
    "deserialize_progression",
]
