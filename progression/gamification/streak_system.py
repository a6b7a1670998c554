"""
Daily Activity Streak Tracking

A streak is the number of consecutive calendar days with at least one
completed activity.

Logic:
- Activity on the same day as the last one: no change
- Activity on the day after the last one: streak continues (+1)
- First activity ever, or a gap of 2+ days: streak restarts at 1

Every 7th consecutive day pays a fixed milestone bonus
(50 points to the achievements bucket and 100 XP).
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional
import logging

logger = logging.getLogger(__name__)

MILESTONE_INTERVAL = 7
MILESTONE_BONUS_POINTS = 50
MILESTONE_BONUS_XP = 100


@dataclass(frozen=True)
class StreakUpdate:
    """Result of registering an activity day"""
    current_streak: int
    longest_streak: int
    last_activity_date: Optional[date]
    milestone_reached: bool = False
    bonus_points: int = 0
    bonus_xp: int = 0
    message: str = ""


def update_streak(
    today: date,
    last_activity_date: Optional[date],
    current_streak: int,
    longest_streak: int,
) -> StreakUpdate:
    """
    Register activity on `today` against the stored streak

    Args:
        today: Calendar day of the activity
        last_activity_date: Day of the previous activity (None if never)
        current_streak: Stored current streak
        longest_streak: Stored longest streak

    Returns:
        StreakUpdate with the new streak values. `longest_streak` is only
        raised on the continuation branch.
    """
    # Already counted for today
    if last_activity_date == today:
        return StreakUpdate(
            current_streak=current_streak,
            longest_streak=longest_streak,
            last_activity_date=last_activity_date,
            message=f"Streak continues! Day {current_streak} 🔥",
        )

    if last_activity_date == today - timedelta(days=1):
        new_streak = current_streak + 1
        milestone_reached = new_streak % MILESTONE_INTERVAL == 0
        message = f"Streak continues! Day {new_streak} 🔥"
        if milestone_reached:
            message += f"\n🏆 {new_streak}-day milestone reached! +{MILESTONE_BONUS_XP} XP"
            logger.info(f"Streak milestone reached: {new_streak} days")

        return StreakUpdate(
            current_streak=new_streak,
            longest_streak=max(longest_streak, new_streak),
            last_activity_date=today,
            milestone_reached=milestone_reached,
            bonus_points=MILESTONE_BONUS_POINTS if milestone_reached else 0,
            bonus_xp=MILESTONE_BONUS_XP if milestone_reached else 0,
            message=message,
        )

    if last_activity_date is None:
        message = "Streak started! Day 1 🎉"
    else:
        gap_days = (today - last_activity_date).days
        message = f"Streak reset. Previous: {current_streak} days. Starting fresh! Day 1 💪"
        logger.info(f"Streak broken: was {current_streak}, gap was {gap_days} days")

    return StreakUpdate(
        current_streak=1,
        longest_streak=longest_streak,
        last_activity_date=today,
        message=message,
    )


def format_streak_display(current_streak: int, longest_streak: int) -> str:
    """Format the streak for console display"""
    if current_streak == 0:
        return "No active streak yet. Complete an activity to start one! 💪"

    line = f"🔥 Streak: {current_streak} days"
    if longest_streak > current_streak:
        line += f" (best: {longest_streak})"
    return line
