"""Pydantic models for a user's progression snapshot"""
from datetime import date, datetime, timedelta
from typing import List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from progression.models.achievement import Achievement
from progression.models.challenge import DailyChallenge

# Buckets of the points ledger
POINTS_CATEGORIES = ("activities", "challenges", "social", "achievements")

# Format written by older clients (e.g. "Mon Oct 19 2026")
LEGACY_DATE_FORMAT = "%a %b %d %Y"


class PointsBreakdown(BaseModel):
    """Categorized ledger of earned points"""

    activities: int = Field(default=0, ge=0)
    challenges: int = Field(default=0, ge=0)
    social: int = Field(default=0, ge=0)
    achievements: int = Field(default=0, ge=0)

    @property
    def total_earned(self) -> int:
        return self.activities + self.challenges + self.social + self.achievements


class WeeklyGoal(BaseModel):
    """One weekly target; `points` is the advertised reward, shown but never credited"""

    current: float = Field(default=0.0, ge=0)
    target: float = Field(gt=0)
    points: int = Field(ge=0)


def _week_start(day: date) -> date:
    return day - timedelta(days=day.weekday())


class WeeklyGoals(BaseModel):
    """Weekly goals anchored to the Monday of the ISO week"""
    model_config = ConfigDict(populate_by_name=True)

    week_start: Optional[date] = Field(default=None, alias="weekStart")
    activities: WeeklyGoal = Field(default_factory=lambda: WeeklyGoal(target=5, points=100))
    distance: WeeklyGoal = Field(default_factory=lambda: WeeklyGoal(target=20, points=150))
    challenges: WeeklyGoal = Field(default_factory=lambda: WeeklyGoal(target=2, points=80))

    @classmethod
    def for_week_of(cls, day: date) -> "WeeklyGoals":
        return cls(week_start=_week_start(day))

    def is_current(self, day: date) -> bool:
        return self.week_start == _week_start(day)


def _default_achievements() -> List[Achievement]:
    # Imported lazily: the catalog module depends on the models package
    from progression.gamification.achievement_system import default_achievements
    return default_achievements()


class UserProgression(BaseModel):
    """
    Complete progression state of the local user

    Field aliases are the keys of the persisted snapshot, so
    `model_dump(by_alias=True)` produces the stored blob directly.
    """
    model_config = ConfigDict(populate_by_name=True)

    level: int = Field(default=1, ge=1, alias="userLevel")
    xp: int = Field(default=0, ge=0, alias="userXP")
    total_points: int = Field(default=0, ge=0, alias="totalPoints")
    current_streak: int = Field(default=0, ge=0, alias="currentStreak")
    longest_streak: int = Field(default=0, ge=0, alias="longestStreak")
    last_activity_date: Optional[date] = Field(default=None, alias="lastActivityDate")
    total_activities: int = Field(default=0, ge=0, alias="totalActivities")
    achievements: List[Achievement] = Field(default_factory=_default_achievements)
    points_breakdown: PointsBreakdown = Field(default_factory=PointsBreakdown, alias="pointsBreakdown")
    purchased_reward_ids: Set[str] = Field(default_factory=set, alias="purchasedRewards")
    daily_challenges: List[DailyChallenge] = Field(default_factory=list, alias="dailyChallenges")
    challenges_assigned_on: Optional[date] = Field(default=None, alias="challengesAssignedOn")
    weekly_goals: WeeklyGoals = Field(default_factory=WeeklyGoals, alias="weeklyGoals")

    @field_validator("last_activity_date", "challenges_assigned_on", mode="before")
    @classmethod
    def _parse_legacy_date(cls, value):
        """Accept ISO dates as well as the legacy 'Mon Oct 19 2026' strings"""
        if isinstance(value, str) and value and not value[0].isdigit():
            return datetime.strptime(value, LEGACY_DATE_FORMAT).date()
        return value

    @field_serializer("purchased_reward_ids")
    def _serialize_purchased(self, value: Set[str]) -> List[str]:
        return sorted(value)

    def get_achievement(self, achievement_id: str) -> Optional[Achievement]:
        for achievement in self.achievements:
            if achievement.id == achievement_id:
                return achievement
        return None

    def get_daily_challenge(self, challenge_id: str) -> Optional[DailyChallenge]:
        for challenge in self.daily_challenges:
            if challenge.id == challenge_id:
                return challenge
        return None
