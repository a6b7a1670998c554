"""Global test fixtures and utilities for progression tests"""
import random
from datetime import date, datetime, timedelta, timezone

import pytest
import pytest_asyncio

from progression.models.progression import UserProgression
from progression.services.persistence import InMemoryGateway
from progression.services.progression_store import ProgressionStore


# ============================================================================
# Clock Fixtures
# ============================================================================

class FakeClock:
    """Controllable clock for calendar-day dependent rules"""

    def __init__(self, day: date):
        self.day = day

    def today(self) -> date:
        return self.day

    def now(self) -> datetime:
        return datetime(self.day.year, self.day.month, self.day.day, 9, 30, tzinfo=timezone.utc)

    def advance(self, days: int = 1) -> date:
        self.day += timedelta(days=days)
        return self.day


@pytest.fixture
def today():
    """Fixed 'today' (a Wednesday)"""
    return date(2024, 5, 15)


@pytest.fixture
def clock(today):
    return FakeClock(today)


@pytest.fixture
def rng():
    """Seeded random source for deterministic challenge draws"""
    return random.Random(1234)


# ============================================================================
# State & Store Fixtures
# ============================================================================

@pytest.fixture
def fresh_state():
    """Default progression for a first run"""
    return UserProgression()


@pytest.fixture
def gateway():
    return InMemoryGateway()


@pytest_asyncio.fixture
async def store(gateway, clock, rng):
    """Isolated store backed by an in-memory gateway (not yet loaded)"""
    store = ProgressionStore(gateway, today=clock.today, now=clock.now, rng=rng)
    yield store
    await store.flush()
