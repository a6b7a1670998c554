"""
Gamification rules for the progression engine

This package implements the rules behind the rewards layer:
- Level curve and XP application
- Daily activity streaks
- Achievement unlocking
- Daily challenges and weekly goals
- Rewards shop and static leaderboard

State changes are expressed as pure reducers (see reducers.py); the
ProgressionStore service owns the state and its persistence.
"""

from progression.gamification.xp_system import (
    xp_required,
    title_for_level,
    get_level_table,
    apply_xp,
    level_progress,
)
from progression.gamification.streak_system import update_streak
from progression.gamification.achievement_system import evaluate_achievements, record_progress
from progression.gamification.challenges import assign_daily_challenges
from progression.gamification.rewards_shop import validate_purchase
from progression.gamification.reducers import reduce

__all__ = [
    "xp_required",
    "title_for_level",
    "get_level_table",
    "apply_xp",
    "level_progress",
    "update_streak",
    "evaluate_achievements",
    "record_progress",
    "assign_daily_challenges",
    "validate_purchase",
    "reduce",
]
