"""Rewards shop models"""
from enum import Enum
from pydantic import BaseModel, Field
from typing import Optional


class RewardCategory(str, Enum):
    """Kinds of shop items"""
    COSMETIC = "cosmetic"
    THEME = "theme"
    TITLE = "title"
    BOOST = "boost"
    FEATURE = "feature"


class RewardItem(BaseModel):
    """Static catalog entry of the rewards shop"""

    id: str
    name: str
    description: str
    icon: str
    cost: int = Field(gt=0)
    category: RewardCategory


class PurchaseFailure(str, Enum):
    """Recoverable reasons a purchase is refused"""
    NOT_FOUND = "not_found"
    INSUFFICIENT_POINTS = "insufficient_points"
    ALREADY_OWNED = "already_owned"


class PurchaseResult(BaseModel):
    """Outcome of a purchase attempt"""

    success: bool
    message: str
    failure: Optional[PurchaseFailure] = None
    reward: Optional[RewardItem] = None
