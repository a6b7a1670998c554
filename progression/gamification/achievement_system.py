"""
Achievement System

Tracks and unlocks achievements across five categories:
- distance: single running activity of at least N km
- count: N completed activities in total
- streak: a daily streak of N days
- social: challenges joined, friends connected, challenges won
- special: early/late activities, places visited

Distance, count and streak progress is derived from activity completion.
Social and special progress comes from other surfaces of the app through
`record_progress`.

Rules:
- Progress never decreases
- Unlocking is terminal; an unlocked achievement is never evaluated again
- Points and XP of an achievement are paid exactly once, on unlock
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List
import logging

from progression.exceptions import AchievementNotFoundError, ValidationError
from progression.models.achievement import Achievement, AchievementCategory, AchievementRarity

logger = logging.getLogger(__name__)

# Categories whose progress is derived from activity completion
ACTIVITY_DRIVEN_CATEGORIES = (
    AchievementCategory.DISTANCE,
    AchievementCategory.COUNT,
    AchievementCategory.STREAK,
)

DISTANCE_ACTIVITY_TYPE = "running"


def _achievement(id, name, description, icon, category, rarity, points, xp, requirement):
    return Achievement(
        id=id,
        name=name,
        description=description,
        icon=icon,
        category=category,
        rarity=rarity,
        points=points,
        xp=xp,
        requirement=requirement,
    )


# ============================================
# Achievement Catalog
# ============================================

ACHIEVEMENT_CATALOG: tuple = (
    # ========== DISTANCE ==========
    _achievement("first_5k", "First 5K", "Complete your first 5km run", "🏃",
                 AchievementCategory.DISTANCE, AchievementRarity.COMMON, 50, 100, 5),
    _achievement("first_10k", "First 10K", "Complete your first 10km run", "🎯",
                 AchievementCategory.DISTANCE, AchievementRarity.UNCOMMON, 100, 200, 10),
    _achievement("half_marathon", "Half Marathon Hero", "Complete a 21km half marathon", "🏅",
                 AchievementCategory.DISTANCE, AchievementRarity.RARE, 250, 500, 21),
    _achievement("full_marathon", "Marathon Legend", "Complete a full 42km marathon", "🏆",
                 AchievementCategory.DISTANCE, AchievementRarity.LEGENDARY, 500, 1000, 42),

    # ========== ACTIVITY COUNT ==========
    _achievement("activities_10", "Getting Started", "Complete 10 activities", "⭐",
                 AchievementCategory.COUNT, AchievementRarity.COMMON, 50, 100, 10),
    _achievement("activities_50", "Regular Athlete", "Complete 50 activities", "🌟",
                 AchievementCategory.COUNT, AchievementRarity.UNCOMMON, 150, 300, 50),
    _achievement("activities_100", "Century Club", "Complete 100 activities", "💯",
                 AchievementCategory.COUNT, AchievementRarity.RARE, 300, 600, 100),

    # ========== STREAK ==========
    _achievement("streak_7", "Week Warrior", "Maintain a 7-day activity streak", "🔥",
                 AchievementCategory.STREAK, AchievementRarity.UNCOMMON, 100, 200, 7),
    _achievement("streak_30", "Monthly Master", "Maintain a 30-day activity streak", "🔥",
                 AchievementCategory.STREAK, AchievementRarity.RARE, 300, 600, 30),
    _achievement("streak_365", "Unstoppable Force", "Maintain a 365-day activity streak", "💪",
                 AchievementCategory.STREAK, AchievementRarity.LEGENDARY, 1000, 2000, 365),

    # ========== SOCIAL ==========
    _achievement("first_challenge", "Challenge Accepted", "Join your first challenge", "🎯",
                 AchievementCategory.SOCIAL, AchievementRarity.COMMON, 50, 100, 1),
    _achievement("friends_10", "Social Butterfly", "Connect with 10 friends", "👥",
                 AchievementCategory.SOCIAL, AchievementRarity.UNCOMMON, 100, 200, 10),
    _achievement("challenge_win", "Champion", "Win a community challenge", "👑",
                 AchievementCategory.SOCIAL, AchievementRarity.EPIC, 400, 800, 1),

    # ========== SPECIAL ==========
    _achievement("early_bird", "Early Bird", "Complete 10 activities before 6 AM", "🌅",
                 AchievementCategory.SPECIAL, AchievementRarity.RARE, 200, 400, 10),
    _achievement("night_owl", "Night Owl", "Complete 10 activities after 8 PM", "🌙",
                 AchievementCategory.SPECIAL, AchievementRarity.RARE, 200, 400, 10),
    _achievement("explorer", "Explorer", "Visit 20 different locations", "🗺️",
                 AchievementCategory.SPECIAL, AchievementRarity.EPIC, 350, 700, 20),
)


def default_achievements() -> List[Achievement]:
    """Fresh, all-locked copy of the catalog"""
    return [achievement.model_copy() for achievement in ACHIEVEMENT_CATALOG]


def merge_with_catalog(stored: List[Achievement]) -> List[Achievement]:
    """
    Overlay stored progress onto the current catalog

    Definitions (points, xp, requirement) always come from the catalog.
    Stored entries whose id is no longer in the catalog are dropped.
    """
    by_id = {achievement.id: achievement for achievement in stored}
    merged = []
    for definition in ACHIEVEMENT_CATALOG:
        saved = by_id.get(definition.id)
        if saved is None:
            merged.append(definition.model_copy())
            continue
        merged.append(definition.model_copy(update={
            "progress": min(saved.progress, definition.requirement) if saved.unlocked else saved.progress,
            "unlocked": saved.unlocked,
            "unlocked_at": saved.unlocked_at,
        }))

    dropped = set(by_id) - {definition.id for definition in ACHIEVEMENT_CATALOG}
    if dropped:
        logger.warning(f"Dropping stored achievements missing from catalog: {sorted(dropped)}")
    return merged


@dataclass
class AchievementEvaluation:
    """Updated achievement list plus those unlocked by this evaluation"""
    achievements: List[Achievement]
    newly_unlocked: List[Achievement] = field(default_factory=list)


def _progress_from_activity(
    achievement: Achievement,
    activity_type: str,
    distance: float,
    activity_count: int,
    current_streak: int,
) -> float:
    """Candidate progress for an activity-driven achievement"""
    if achievement.category == AchievementCategory.DISTANCE:
        if activity_type == DISTANCE_ACTIVITY_TYPE and distance >= achievement.requirement:
            return achievement.requirement
        return achievement.progress

    if achievement.category == AchievementCategory.COUNT:
        return activity_count

    if achievement.category == AchievementCategory.STREAK:
        return current_streak

    return achievement.progress


def _settle(achievement: Achievement, progress: float, now: datetime) -> Achievement:
    """Apply monotonic progress and unlock when the requirement is met"""
    progress = float(max(achievement.progress, progress))

    if progress >= achievement.requirement:
        logger.info(
            f"Unlocked achievement: {achievement.id} ({achievement.name}) "
            f"+{achievement.points} points +{achievement.xp} XP"
        )
        return achievement.model_copy(update={
            "progress": achievement.requirement,
            "unlocked": True,
            "unlocked_at": now,
        })

    if progress == achievement.progress:
        return achievement
    return achievement.model_copy(update={"progress": progress})


def evaluate_achievements(
    achievements: List[Achievement],
    activity_type: str,
    distance: float,
    *,
    activity_count: int,
    current_streak: int,
    now: datetime,
) -> AchievementEvaluation:
    """
    Evaluate locked achievements against a completed activity

    Args:
        achievements: Current achievement list (not modified)
        activity_type: Type of the completed activity (running, cycling, ...)
        distance: Distance of the activity in km
        activity_count: Total completed activities including this one
        current_streak: Streak after registering this activity
        now: Unlock timestamp

    Returns:
        AchievementEvaluation with the new list and newly unlocked entries
    """
    updated = []
    newly_unlocked = []

    for achievement in achievements:
        if achievement.unlocked or achievement.category not in ACTIVITY_DRIVEN_CATEGORIES:
            updated.append(achievement)
            continue

        candidate = _progress_from_activity(
            achievement, activity_type, distance, activity_count, current_streak
        )
        settled = _settle(achievement, candidate, now)
        if settled.unlocked:
            newly_unlocked.append(settled)
        updated.append(settled)

    return AchievementEvaluation(achievements=updated, newly_unlocked=newly_unlocked)


def record_progress(
    achievements: List[Achievement],
    achievement_id: str,
    amount: float,
    now: datetime,
) -> AchievementEvaluation:
    """
    Add externally reported progress to one achievement

    Used for triggers that live outside activity completion
    (friends connected, challenges joined, places visited, ...).
    Recording progress on an unlocked achievement is a no-op.
    """
    if amount < 0:
        raise ValidationError("Progress amount must not be negative", field="amount", value=amount)

    if not any(achievement.id == achievement_id for achievement in achievements):
        raise AchievementNotFoundError(achievement_id, operation="record_progress")

    updated = []
    newly_unlocked = []
    for achievement in achievements:
        if achievement.id != achievement_id or achievement.unlocked:
            updated.append(achievement)
            continue

        settled = _settle(achievement, achievement.progress + amount, now)
        if settled.unlocked:
            newly_unlocked.append(settled)
        updated.append(settled)

    return AchievementEvaluation(achievements=updated, newly_unlocked=newly_unlocked)


def summarize_achievements(achievements: List[Achievement]) -> dict:
    """
    Counts for display

    Returns:
        {
            'total_unlocked': int,
            'total_achievements': int,
            'points_from_achievements': int,
            'xp_from_achievements': int
        }
    """
    unlocked = [achievement for achievement in achievements if achievement.unlocked]
    return {
        "total_unlocked": len(unlocked),
        "total_achievements": len(achievements),
        "points_from_achievements": sum(achievement.points for achievement in unlocked),
        "xp_from_achievements": sum(achievement.xp for achievement in unlocked),
    }
