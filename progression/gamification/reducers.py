"""
Progression reducers

Every mutation of the progression state is a pure function
`reduce(state, action, today=..., now=...) -> Transition`. The input state
is never modified; handlers work on a deep copy and return it together
with the action's result. Serializing the calls to `reduce` is then all a
caller has to do to avoid lost updates (see ProgressionStore).
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from math import floor
from typing import Any, List, Optional
import logging
import random

from progression import config
from progression.exceptions import UnknownPointsCategoryError, ValidationError
from progression.gamification.achievement_system import evaluate_achievements, record_progress
from progression.gamification.challenges import assign_daily_challenges, needs_new_challenges
from progression.gamification.rewards_shop import validate_purchase
from progression.gamification.streak_system import StreakUpdate, update_streak
from progression.gamification.xp_system import XPResult, apply_xp
from progression.models.achievement import Achievement
from progression.models.progression import POINTS_CATEGORIES, UserProgression, WeeklyGoals
from progression.models.reward import PurchaseResult

logger = logging.getLogger(__name__)


# ============================================
# Actions
# ============================================

@dataclass(frozen=True)
class AddXP:
    amount: int


@dataclass(frozen=True)
class AddPoints:
    amount: int
    category: str


@dataclass(frozen=True)
class UpdateStreak:
    pass


@dataclass(frozen=True)
class CompleteActivity:
    activity_type: str
    distance: float  # km
    duration: float  # seconds


@dataclass(frozen=True)
class CompleteDailyChallenge:
    challenge_id: str


@dataclass(frozen=True)
class PurchaseReward:
    reward_id: str


@dataclass(frozen=True)
class RecordAchievementProgress:
    achievement_id: str
    amount: float = 1


@dataclass(frozen=True)
class StartDay:
    """Day-start housekeeping: today's challenges and the weekly goal window"""
    force_new_challenges: bool = False


# ============================================
# Results
# ============================================

@dataclass(frozen=True)
class ActivityResult:
    """Outcome of a completed activity"""
    points: int
    xp: int
    streak: int
    leveled_up: bool
    new_level: Optional[int] = None
    streak_milestone: bool = False
    streak_message: str = ""
    achievements_unlocked: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Transition:
    state: UserProgression
    result: Any = None

    def changed_from(self, previous: UserProgression) -> bool:
        return self.state != previous


# ============================================
# Building blocks (operate on a draft copy)
# ============================================

def _add_xp(draft: UserProgression, amount: int) -> XPResult:
    result = apply_xp(draft.level, draft.xp, amount)
    draft.level = result.level
    draft.xp = result.xp
    return result


def _add_points(draft: UserProgression, amount: int, category: str) -> None:
    if category not in POINTS_CATEGORIES:
        raise UnknownPointsCategoryError(category, operation="add_points")
    if amount < 0:
        raise ValidationError("Points amount must not be negative", field="amount", value=amount)

    draft.total_points += amount
    breakdown = draft.points_breakdown
    setattr(breakdown, category, getattr(breakdown, category) + amount)


def _update_streak(draft: UserProgression, today: date) -> StreakUpdate:
    update = update_streak(today, draft.last_activity_date, draft.current_streak, draft.longest_streak)
    draft.current_streak = update.current_streak
    draft.longest_streak = update.longest_streak
    draft.last_activity_date = update.last_activity_date

    if update.milestone_reached:
        _add_points(draft, update.bonus_points, "achievements")
        _add_xp(draft, update.bonus_xp)
    return update


def _roll_week(draft: UserProgression, today: date) -> None:
    if not draft.weekly_goals.is_current(today):
        if draft.weekly_goals.week_start is not None:
            logger.info(f"New week starting {today}: weekly goals reset")
        draft.weekly_goals = WeeklyGoals.for_week_of(today)


def _advance_goal(draft: UserProgression, name: str, amount: float) -> None:
    goal = getattr(draft.weekly_goals, name)
    goal.current += amount


def _award_achievements(draft: UserProgression, unlocked: List[Achievement]) -> None:
    for achievement in unlocked:
        _add_points(draft, achievement.points, "achievements")
        _add_xp(draft, achievement.xp)


def activity_base_reward(distance: float, duration: float) -> tuple:
    """
    Points and XP for an activity before the streak multiplier

    - 10 points and 20 XP per km (floored)
    - plus 10 points and 20 XP per hour (floored) when longer than an hour
    """
    points = floor(distance * 10)
    xp = floor(distance * 20)

    hours = duration / 3600
    if hours > 1:
        points += floor(hours * 10)
        xp += floor(hours * 20)
    return points, xp


# ============================================
# Handlers
# ============================================

def _handle_add_xp(draft, action: AddXP, today, now, rng):
    return _add_xp(draft, action.amount)


def _handle_add_points(draft, action: AddPoints, today, now, rng):
    _add_points(draft, action.amount, action.category)


def _handle_update_streak(draft, action: UpdateStreak, today, now, rng):
    return _update_streak(draft, today).current_streak


def _handle_complete_activity(draft, action: CompleteActivity, today, now, rng) -> ActivityResult:
    if action.distance < 0:
        raise ValidationError("Distance must not be negative", field="distance", value=action.distance)
    if action.duration < 0:
        raise ValidationError("Duration must not be negative", field="duration", value=action.duration)

    starting_level = draft.level
    points, xp = activity_base_reward(action.distance, action.duration)

    streak = _update_streak(draft, today)

    if streak.current_streak >= config.STREAK_BONUS_THRESHOLD:
        points = floor(points * config.STREAK_BONUS_MULTIPLIER)
        xp = floor(xp * config.STREAK_BONUS_MULTIPLIER)

    _add_points(draft, points, "activities")
    _add_xp(draft, xp)

    draft.total_activities += 1
    _roll_week(draft, today)
    _advance_goal(draft, "activities", 1)
    _advance_goal(draft, "distance", action.distance)

    evaluation = evaluate_achievements(
        draft.achievements,
        action.activity_type,
        action.distance,
        activity_count=draft.total_activities,
        current_streak=draft.current_streak,
        now=now,
    )
    draft.achievements = evaluation.achievements
    _award_achievements(draft, evaluation.newly_unlocked)

    leveled_up = draft.level > starting_level
    logger.info(
        f"Completed {action.activity_type} activity ({action.distance} km): "
        f"+{points} points, +{xp} XP, streak {streak.current_streak}"
    )

    return ActivityResult(
        points=points,
        xp=xp,
        streak=streak.current_streak,
        leveled_up=leveled_up,
        new_level=draft.level if leveled_up else None,
        streak_milestone=streak.milestone_reached,
        streak_message=streak.message,
        achievements_unlocked=[achievement.id for achievement in evaluation.newly_unlocked],
    )


def _handle_complete_daily_challenge(draft, action: CompleteDailyChallenge, today, now, rng) -> bool:
    challenge = draft.get_daily_challenge(action.challenge_id)

    if challenge is None:
        logger.warning(f"Challenge {action.challenge_id} is not assigned today")
        return False
    if challenge.completed:
        return False

    challenge.completed = True
    _add_points(draft, challenge.points, "challenges")
    _add_xp(draft, challenge.xp)

    _roll_week(draft, today)
    _advance_goal(draft, "challenges", 1)

    logger.info(f"Completed daily challenge {challenge.id}: +{challenge.points} points, +{challenge.xp} XP")
    return True


def _handle_purchase_reward(draft, action: PurchaseReward, today, now, rng) -> PurchaseResult:
    result = validate_purchase(action.reward_id, draft.total_points, draft.purchased_reward_ids)

    if not result.success:
        logger.info(f"Purchase of {action.reward_id} refused: {result.message}")
        return result

    draft.total_points -= result.reward.cost
    draft.purchased_reward_ids.add(result.reward.id)
    logger.info(f"Purchased {result.reward.id} for {result.reward.cost} points")
    return result


def _handle_record_achievement_progress(draft, action: RecordAchievementProgress, today, now, rng) -> List[str]:
    evaluation = record_progress(draft.achievements, action.achievement_id, action.amount, now)
    draft.achievements = evaluation.achievements
    _award_achievements(draft, evaluation.newly_unlocked)
    return [achievement.id for achievement in evaluation.newly_unlocked]


def _handle_start_day(draft, action: StartDay, today, now, rng):
    _roll_week(draft, today)

    if action.force_new_challenges or needs_new_challenges(
        draft.challenges_assigned_on, today, draft.daily_challenges
    ):
        draft.daily_challenges = assign_daily_challenges(rng)
        draft.challenges_assigned_on = today
    return draft.daily_challenges


_HANDLERS = {
    AddXP: _handle_add_xp,
    AddPoints: _handle_add_points,
    UpdateStreak: _handle_update_streak,
    CompleteActivity: _handle_complete_activity,
    CompleteDailyChallenge: _handle_complete_daily_challenge,
    PurchaseReward: _handle_purchase_reward,
    RecordAchievementProgress: _handle_record_achievement_progress,
    StartDay: _handle_start_day,
}


def reduce(
    state: UserProgression,
    action,
    *,
    today: date,
    now: datetime,
    rng: Optional[random.Random] = None,
) -> Transition:
    """
    Apply an action to a progression state

    Args:
        state: Current state (left untouched)
        action: One of the action dataclasses above
        today: Calendar day used for streaks, challenges and weekly goals
        now: Timestamp used for achievement unlocks
        rng: Random source for challenge assignment

    Returns:
        Transition with the new state and the action's result

    Raises:
        ValidationError: On invalid amounts or unknown points categories;
            the state is then left as it was
    """
    handler = _HANDLERS.get(type(action))
    if handler is None:
        raise TypeError(f"Unsupported action: {action!r}")

    draft = state.model_copy(deep=True)
    result = handler(draft, action, today, now, rng)
    return Transition(state=draft, result=result)
