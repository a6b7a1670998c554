"""Unit tests for progression persistence (progression/services/persistence.py)"""
import json
import logging
from datetime import date, datetime, timezone
from unittest.mock import patch

import pytest

from progression.gamification.achievement_system import ACHIEVEMENT_CATALOG
from progression.models.progression import UserProgression
from progression.services.persistence import (
    InMemoryGateway,
    JsonFileGateway,
    deserialize_progression,
    serialize_progression,
)


def _played_state():
    state = UserProgression(
        level=4,
        xp=120,
        total_points=640,
        current_streak=3,
        longest_streak=11,
        last_activity_date=date(2024, 5, 14),
        total_activities=23,
        purchased_reward_ids={"theme_dark", "boost_xp"},
        challenges_assigned_on=date(2024, 5, 14),
    )
    state.points_breakdown.activities = 540
    state.points_breakdown.achievements = 100
    state.achievements[0] = state.achievements[0].model_copy(update={
        "progress": 5.0,
        "unlocked": True,
        "unlocked_at": datetime(2024, 5, 1, 7, 0, tzinfo=timezone.utc),
    })
    return state


# ============================================================================
# Serialization Tests
# ============================================================================

def test_serialized_blob_uses_stored_keys():
    data = json.loads(serialize_progression(_played_state()))

    for key in (
        "userLevel", "userXP", "totalPoints", "currentStreak", "longestStreak",
        "lastActivityDate", "achievements", "pointsBreakdown", "purchasedRewards",
    ):
        assert key in data
    assert data["purchasedRewards"] == ["boost_xp", "theme_dark"]
    assert data["lastActivityDate"] == "2024-05-14"
    assert "unlockedAt" in data["achievements"][0]


def test_round_trip_equality():
    state = _played_state()
    assert deserialize_progression(serialize_progression(state)) == state


def test_round_trip_fresh_state():
    state = UserProgression()
    assert deserialize_progression(serialize_progression(state)) == state


def test_missing_fields_take_defaults():
    state = deserialize_progression(json.dumps({"userLevel": 7, "totalPoints": 90}))

    assert state.level == 7
    assert state.total_points == 90
    assert state.xp == 0
    assert state.current_streak == 0
    assert state.last_activity_date is None
    assert state.purchased_reward_ids == set()
    assert state.points_breakdown.total_earned == 0
    assert len(state.achievements) == len(ACHIEVEMENT_CATALOG)


def test_legacy_date_string_accepted():
    state = deserialize_progression(json.dumps({"lastActivityDate": "Tue May 14 2024"}))
    assert state.last_activity_date == date(2024, 5, 14)


def test_stored_achievements_merged_with_catalog():
    blob = json.dumps({
        "achievements": [
            {
                "id": "first_5k", "name": "First 5K", "category": "distance", "rarity": "common",
                "points": 50, "xp": 100, "requirement": 5, "progress": 5, "unlocked": True,
                "unlockedAt": "2024-05-01T07:00:00+00:00",
            }
        ]
    })
    state = deserialize_progression(blob)

    assert len(state.achievements) == len(ACHIEVEMENT_CATALOG)
    assert state.get_achievement("first_5k").unlocked is True
    assert state.get_achievement("marathon") is None


def test_deserialize_rejects_non_object():
    with pytest.raises(ValueError):
        deserialize_progression("[1, 2, 3]")


# ============================================================================
# Gateway Tests
# ============================================================================

@pytest.mark.asyncio
async def test_in_memory_gateway_round_trip():
    gateway = InMemoryGateway()
    state = _played_state()

    assert await gateway.load() is None
    assert await gateway.save(state) is True
    assert await gateway.load() == state
    assert gateway.save_count == 1


@pytest.mark.asyncio
async def test_json_file_gateway_round_trip(tmp_path):
    gateway = JsonFileGateway(tmp_path / "data")
    state = _played_state()

    assert await gateway.save(state) is True
    assert gateway.path == tmp_path / "data" / "gamification_data.json"
    assert gateway.path.exists()
    assert not gateway.path.with_suffix(".tmp").exists()
    assert await gateway.load() == state


@pytest.mark.asyncio
async def test_json_file_gateway_missing_file(tmp_path):
    assert await JsonFileGateway(tmp_path).load() is None


@pytest.mark.asyncio
async def test_load_corrupt_blob_falls_back(tmp_path):
    gateway = JsonFileGateway(tmp_path)
    gateway.path.write_text("{not json", encoding="utf-8")

    assert await gateway.load() is None


@pytest.mark.asyncio
async def test_load_invalid_values_falls_back():
    gateway = InMemoryGateway(storage={"@gamification_data": json.dumps({"userLevel": 0})})
    assert await gateway.load() is None


@pytest.mark.asyncio
async def test_save_failure_is_swallowed():
    gateway = InMemoryGateway()

    with patch.object(InMemoryGateway, "write_blob", side_effect=OSError("disk full")):
        assert await gateway.save(UserProgression()) is False

    assert gateway.storage == {}


@pytest.mark.asyncio
async def test_load_failure_logs_wrapped_error(tmp_path, caplog):
    gateway = JsonFileGateway(tmp_path)
    gateway.path.write_text("{not json", encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger="progression.services.persistence"):
        assert await gateway.load() is None

    record = next(r for r in caplog.records if "starting from defaults" in r.getMessage())
    assert record.levelno == logging.WARNING
    assert record.error["error"] == "PersistenceError"
    assert "load_progression failed" in record.error["message"]


@pytest.mark.asyncio
async def test_save_failure_logs_wrapped_error(caplog):
    gateway = InMemoryGateway()

    with patch.object(InMemoryGateway, "write_blob", side_effect=OSError("disk full")):
        with caplog.at_level(logging.WARNING, logger="progression.services.persistence"):
            assert await gateway.save(UserProgression()) is False

    record = next(r for r in caplog.records if "not saved" in r.getMessage())
    assert record.error["error"] == "PersistenceError"
    assert record.error["request_id"] in record.getMessage()
