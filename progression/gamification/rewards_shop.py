"""
Rewards Shop

Static catalog of items that can be bought with points. A purchase is a
one-way transition: the cost is deducted once and the item joins the
owned set. There are no refunds and an item cannot be bought twice.

Refusals are returned as values (not raised), since they are ordinary,
recoverable outcomes for the user.
"""

import logging
from typing import Iterable, List, Optional

from progression.models.reward import PurchaseFailure, PurchaseResult, RewardCategory, RewardItem

logger = logging.getLogger(__name__)


REWARD_CATALOG: List[RewardItem] = [
    RewardItem(
        id="badge_custom",
        name="Custom Badge",
        description="Create your own profile badge",
        icon="🎨",
        cost=500,
        category=RewardCategory.COSMETIC,
    ),
    RewardItem(
        id="theme_dark",
        name="Dark Theme",
        description="Unlock premium dark theme",
        icon="🌙",
        cost=300,
        category=RewardCategory.THEME,
    ),
    RewardItem(
        id="title_legend",
        name="Legend Title",
        description='Display "Legend" title on profile',
        icon="👑",
        cost=1000,
        category=RewardCategory.TITLE,
    ),
    RewardItem(
        id="boost_xp",
        name="XP Boost (24h)",
        description="2x XP for 24 hours",
        icon="⚡",
        cost=200,
        category=RewardCategory.BOOST,
    ),
    RewardItem(
        id="analysis_advanced",
        name="Advanced Analytics",
        description="Unlock detailed activity analytics",
        icon="📊",
        cost=750,
        category=RewardCategory.FEATURE,
    ),
    RewardItem(
        id="route_private",
        name="Private Routes",
        description="Create private routes for friends",
        icon="🔒",
        cost=400,
        category=RewardCategory.FEATURE,
    ),
]


def get_reward(reward_id: str) -> Optional[RewardItem]:
    for item in REWARD_CATALOG:
        if item.id == reward_id:
            return item
    return None


def validate_purchase(
    reward_id: str,
    total_points: int,
    purchased_ids: Iterable[str],
) -> PurchaseResult:
    """
    Check whether a reward can be bought

    Checks, in order: the reward exists, the user has enough points,
    the user does not own it yet.

    Returns:
        PurchaseResult with success=True and the reward when the purchase
        may proceed, otherwise success=False and the failure reason
    """
    reward = get_reward(reward_id)

    if reward is None:
        return PurchaseResult(
            success=False,
            message="Reward not found",
            failure=PurchaseFailure.NOT_FOUND,
        )

    if total_points < reward.cost:
        return PurchaseResult(
            success=False,
            message="Insufficient points",
            failure=PurchaseFailure.INSUFFICIENT_POINTS,
            reward=reward,
        )

    if reward_id in set(purchased_ids):
        return PurchaseResult(
            success=False,
            message="Already purchased",
            failure=PurchaseFailure.ALREADY_OWNED,
            reward=reward,
        )

    return PurchaseResult(success=True, message="Reward purchased!", reward=reward)


def format_shop_display(total_points: int, purchased_ids: Iterable[str]) -> str:
    """Format the shop catalog for console display"""
    owned = set(purchased_ids)
    lines = [f"🛍️ REWARDS SHOP ({total_points} points)\n"]
    for item in REWARD_CATALOG:
        if item.id in owned:
            status = "owned"
        elif total_points >= item.cost:
            status = "available"
        else:
            status = f"need {item.cost - total_points} more"
        lines.append(f"{item.icon} {item.name} ({item.id}): {item.cost} pts [{status}]")
    return "\n".join(lines)
