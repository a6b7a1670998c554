"""Tests for the command line entry point (progression/main.py)"""
import json
from datetime import date

import pytest

from progression import config
from progression.main import build_parser, main, run
from progression.services.container import ServiceContainer
from progression.services.persistence import InMemoryGateway


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_status_on_first_run(tmp_path, capsys):
    assert main(["--data-path", str(tmp_path), "status"]) == 0

    out = capsys.readouterr().out
    assert "Level 1 - Beginner" in out
    assert "Points: 0" in out
    # Day-start challenge draw is persisted
    assert (tmp_path / "gamification_data.json").exists()


def test_activity_then_status(tmp_path, capsys):
    assert main(["--data-path", str(tmp_path), "activity", "running", "5", "1800"]) == 0
    out = capsys.readouterr().out
    assert "+50 points, +100 XP" in out
    assert "Streak started! Day 1" in out
    assert "First 5K" in out

    stored = json.loads((tmp_path / "gamification_data.json").read_text(encoding="utf-8"))
    assert stored["totalActivities"] == 1
    assert stored["totalPoints"] == 100  # activity 50 + first_5k 50

    assert main(["--data-path", str(tmp_path), "status"]) == 0
    status = capsys.readouterr().out
    assert "Points: 100" in status
    assert "This week: activities 1/5 (+100 pts), km 5/20 (+150 pts), challenges 0/2 (+80 pts)" in status


def test_buy_without_points(tmp_path, capsys):
    assert main(["--data-path", str(tmp_path), "buy", "theme_dark"]) == 0
    assert "Insufficient points" in capsys.readouterr().out


def test_invalid_configuration_exits_2(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(config, "DAILY_CHALLENGE_COUNT", 0)

    assert main(["--data-path", str(tmp_path), "status"]) == 2
    assert "Invalid configuration: DAILY_CHALLENGE_COUNT must be at least 1" in capsys.readouterr().out
    assert not (tmp_path / "gamification_data.json").exists()


def test_negative_distance_reports_user_message(tmp_path, capsys):
    assert main(["--data-path", str(tmp_path), "activity", "running", "-3", "600"]) == 1
    assert "Invalid distance" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_run_with_injected_container():
    gateway = InMemoryGateway()
    container = ServiceContainer(gateway=gateway, today=lambda: date(2024, 5, 15))

    output = await run(build_parser().parse_args(["challenges"]), container)

    assert output.count("\n") >= config.DAILY_CHALLENGE_COUNT - 1
    assert gateway.save_count == 1


@pytest.mark.asyncio
async def test_levels_command():
    container = ServiceContainer(gateway=InMemoryGateway(), today=lambda: date(2024, 5, 15))

    output = await run(build_parser().parse_args(["levels", "--limit", "3"]), container)
    lines = output.splitlines()

    assert len(lines) == 3
    assert lines[0].split()[:2] == ["1", "Beginner"]


@pytest.mark.asyncio
async def test_leaderboard_marks_current_user():
    container = ServiceContainer(gateway=InMemoryGateway(), today=lambda: date(2024, 5, 15))

    output = await run(build_parser().parse_args(["leaderboard"]), container)

    assert "← you" in output
