"""Achievement models for gamification"""
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class AchievementCategory(str, Enum):
    """Achievement categories"""
    DISTANCE = "distance"
    COUNT = "count"
    STREAK = "streak"
    SOCIAL = "social"
    SPECIAL = "special"


class AchievementRarity(str, Enum):
    """Achievement rarity levels"""
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


class Achievement(BaseModel):
    """Achievement definition together with the user's progress on it"""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    description: str = ""
    icon: str = ""
    category: AchievementCategory
    rarity: AchievementRarity
    points: int = Field(ge=0)
    xp: int = Field(ge=0)
    requirement: float = Field(gt=0)
    progress: float = Field(default=0.0, ge=0)
    unlocked: bool = False
    unlocked_at: Optional[datetime] = Field(default=None, alias="unlockedAt")
