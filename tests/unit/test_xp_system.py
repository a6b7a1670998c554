"""Unit tests for XP and Leveling System (progression/gamification/xp_system.py)"""
import math

import pytest

from progression.exceptions import ValidationError
from progression.gamification.xp_system import (
    MAX_LEVEL,
    apply_xp,
    get_level_definition,
    get_level_table,
    level_progress,
    title_for_level,
    xp_required,
)


# ============================================================================
# Level Curve Tests
# ============================================================================

def test_xp_required_first_levels():
    """Test the documented requirements of the first levels"""
    assert xp_required(1) == 100
    assert xp_required(2) == 150
    assert xp_required(3) == 225
    assert xp_required(4) == 337
    assert xp_required(5) == 506


@pytest.mark.parametrize("level", [1, 7, 13, 25, 30])
def test_xp_required_matches_formula(level):
    """Test the curve is floor(100 * 1.5^(level-1))"""
    assert xp_required(level) == math.floor(100 * 1.5 ** (level - 1))


def test_xp_required_rejects_level_zero():
    with pytest.raises(ValidationError):
        xp_required(0)


def test_xp_required_is_increasing():
    requirements = [xp_required(level) for level in range(1, MAX_LEVEL + 1)]
    assert requirements == sorted(requirements)
    assert len(set(requirements)) == len(requirements)


@pytest.mark.parametrize(
    "level,title",
    [
        (1, "Beginner"),
        (9, "Beginner"),
        (10, "Novice"),
        (19, "Novice"),
        (20, "Apprentice"),
        (30, "Intermediate"),
        (40, "Skilled"),
        (50, "Advanced"),
        (60, "Pro"),
        (70, "Expert"),
        (80, "Master"),
        (89, "Master"),
        (90, "Legend"),
        (100, "Legend"),
    ],
)
def test_title_for_level_bands(level, title):
    assert title_for_level(level) == title


def test_level_table_has_100_levels():
    table = get_level_table()

    assert len(table) == 100
    assert table[0].level == 1
    assert table[0].xp_required == 100
    assert table[0].title == "Beginner"
    assert table[-1].level == 100
    assert table[-1].title == "Legend"


def test_level_table_computed_once():
    """Test the table is cached rather than rebuilt per access"""
    assert get_level_table() is get_level_table()


def test_level_definition_beyond_table():
    definition = get_level_definition(101)
    assert definition.level == 101
    assert definition.xp_required == xp_required(101)
    assert definition.title == "Legend"


# ============================================================================
# XP Application Tests
# ============================================================================

def test_apply_xp_without_level_up():
    result = apply_xp(level=1, xp=10, amount=50)

    assert result.level == 1
    assert result.xp == 60
    assert result.leveled_up is False
    assert result.new_level is None


def test_apply_xp_level_up_carries_excess():
    """Test level=1, xp=90, +20 -> level 2 with 10 XP"""
    result = apply_xp(level=1, xp=90, amount=20)

    assert result.leveled_up is True
    assert result.new_level == 2
    assert result.level == 2
    assert result.xp == 10


def test_apply_xp_exact_requirement_levels_up():
    result = apply_xp(level=1, xp=0, amount=100)

    assert result.level == 2
    assert result.xp == 0


def test_apply_xp_single_level_up_per_call():
    """Test that a huge award only gains one level"""
    result = apply_xp(level=1, xp=0, amount=10_000)

    assert result.level == 2
    assert result.xp == 9_900
    assert result.leveled_up is True


def test_apply_xp_next_call_resolves_leftover():
    first = apply_xp(level=1, xp=0, amount=400)  # level 2 with 300 XP >= 150
    second = apply_xp(first.level, first.xp, 0)

    assert first.level == 2
    assert second.level == 3
    assert second.xp == 150


def test_apply_xp_rejects_negative_amount():
    with pytest.raises(ValidationError):
        apply_xp(level=3, xp=10, amount=-20)


def test_apply_xp_zero_amount():
    result = apply_xp(level=2, xp=40, amount=0)
    assert result.level == 2
    assert result.xp == 40
    assert result.leveled_up is False


# ============================================================================
# Level Progress Tests
# ============================================================================

def test_level_progress_percentage():
    progress = level_progress(level=2, xp=75)

    assert progress.progress == pytest.approx(50.0)
    assert progress.current_xp == 75
    assert progress.required_xp == 150
    assert progress.title == "Beginner"


def test_level_progress_clamped_to_100():
    progress = level_progress(level=1, xp=250)
    assert progress.progress == 100.0
