"""
Service Container - Dependency Injection Container

Simple DI container for the progression services. The store is created
lazily on first access; there is no module-level instance, so every
caller (app entry point, tests) builds and owns its container.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Optional
import logging
import random

from progression import config

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """
    Dependency injection container for progression services.

    Infrastructure (gateway, clock, random source) is injected;
    services are lazy-loaded via properties.
    """

    # Infrastructure dependencies (injected)
    gateway: Optional[object] = None  # PersistenceGateway; JsonFileGateway under DATA_PATH if omitted
    today: Callable[[], date] = date.today
    rng: Optional[random.Random] = None

    # Services (lazy-loaded via properties)
    _progression_store: Optional[object] = field(default=None, init=False, repr=False)

    @property
    def persistence_gateway(self):
        """Get the PersistenceGateway (JSON file under DATA_PATH by default)"""
        if self.gateway is None:
            from progression.services.persistence import JsonFileGateway
            self.gateway = JsonFileGateway(config.DATA_PATH, config.STORAGE_KEY)
            logger.debug(f"JsonFileGateway instantiated at {self.gateway.location}")
        return self.gateway

    @property
    def progression_store(self):
        """Get ProgressionStore instance (lazy-loaded)"""
        if self._progression_store is None:
            from progression.services.progression_store import ProgressionStore
            self._progression_store = ProgressionStore(
                self.persistence_gateway,
                today=self.today,
                rng=self.rng,
            )
            logger.debug("ProgressionStore instantiated")
        return self._progression_store

    async def start(self):
        """Load persisted progression; call once at app start"""
        store = self.progression_store
        await store.load()
        logger.info("Service container started")
        return store

    async def shutdown(self) -> None:
        """Wait for outstanding saves"""
        if self._progression_store is not None:
            await self._progression_store.flush()
        logger.info("Service container stopped")
