"""
XP and Leveling System

Manages the level curve, level titles, and XP application.

Leveling Curve:
- Level N requires floor(100 * 1.5^(N-1)) XP to complete
- Level 1: 100 XP, Level 2: 150 XP, Level 3: 225 XP, ...
- The table covers levels 1-100; beyond that the formula still applies

XP is tracked per level: `xp` is the progress inside the current level and
resets to the excess when the level is completed.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple
import logging

from pydantic import BaseModel

from progression.exceptions import ValidationError

logger = logging.getLogger(__name__)

MAX_LEVEL = 100

# (minimum level, title), highest first
LEVEL_TITLES = (
    (90, "Legend"),
    (80, "Master"),
    (70, "Expert"),
    (60, "Pro"),
    (50, "Advanced"),
    (40, "Skilled"),
    (30, "Intermediate"),
    (20, "Apprentice"),
    (10, "Novice"),
)
DEFAULT_TITLE = "Beginner"


class LevelDefinition(BaseModel):
    """One row of the level table"""
    model_config = {"frozen": True}

    level: int
    xp_required: int
    title: str


class LevelProgress(BaseModel):
    """Progress bar data for the current level"""

    progress: float  # 0-100
    current_xp: int
    required_xp: int
    title: str


@dataclass(frozen=True)
class XPResult:
    """Outcome of applying XP to a (level, xp) pair"""
    level: int
    xp: int
    leveled_up: bool
    new_level: Optional[int] = None


def xp_required(level: int) -> int:
    """
    XP needed to complete `level`: floor(100 * 1.5^(level-1))

    Uses integer arithmetic (100 * 3^n // 2^n) so the floor is exact
    for every level.
    """
    if level < 1:
        raise ValidationError("Level must be at least 1", field="level", value=level)
    n = level - 1
    return (100 * 3 ** n) // (2 ** n)


def title_for_level(level: int) -> str:
    """Display title for a level"""
    for minimum, title in LEVEL_TITLES:
        if level >= minimum:
            return title
    return DEFAULT_TITLE


@lru_cache(maxsize=1)
def get_level_table() -> Tuple[LevelDefinition, ...]:
    """Level definitions for levels 1-100, computed once"""
    logger.debug(f"Building level table for {MAX_LEVEL} levels")
    return tuple(
        LevelDefinition(level=level, xp_required=xp_required(level), title=title_for_level(level))
        for level in range(1, MAX_LEVEL + 1)
    )


def get_level_definition(level: int) -> LevelDefinition:
    """Definition of a level, from the table when it is in range"""
    if 1 <= level <= MAX_LEVEL:
        return get_level_table()[level - 1]
    return LevelDefinition(level=level, xp_required=xp_required(level), title=title_for_level(level))


def apply_xp(level: int, xp: int, amount: int) -> XPResult:
    """
    Add XP to the current level and check for level up

    At most one level is gained per call: when the new XP reaches the
    requirement of the current level, the level goes up by one and XP
    becomes the excess, even if the excess would also complete the next
    level. The leftover is resolved by the next award.

    Args:
        level: Current level
        xp: XP inside the current level
        amount: XP to add (must not be negative)

    Returns:
        XPResult with the new level/xp and whether a level up happened
    """
    if amount < 0:
        raise ValidationError("XP amount must not be negative", field="amount", value=amount)

    new_xp = xp + amount
    required = get_level_definition(level).xp_required

    if new_xp >= required:
        new_level = level + 1
        logger.info(f"Level up: {level} -> {new_level} ({new_xp - required} XP carried over)")
        return XPResult(level=new_level, xp=new_xp - required, leveled_up=True, new_level=new_level)

    return XPResult(level=level, xp=new_xp, leveled_up=False)


def level_progress(level: int, xp: int) -> LevelProgress:
    """
    Progress within the current level

    Returns:
        LevelProgress with progress as a percentage clamped to 0-100
    """
    definition = get_level_definition(level)
    progress = (xp / definition.xp_required) * 100

    return LevelProgress(
        progress=min(max(progress, 0.0), 100.0),
        current_xp=xp,
        required_xp=definition.xp_required,
        title=definition.title,
    )
