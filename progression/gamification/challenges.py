"""
Daily Challenge System

Each day the user gets a small set of challenges drawn at random from a
fixed template pool. A challenge can be completed once; its points go to
the challenges bucket.

The assigned set is anchored to the day it was drawn on: reloading the
app on the same day keeps the set (and its completion state), and a new
set is only drawn when the day changes.
"""

import logging
import random
from datetime import date
from typing import List, Optional

from progression import config
from progression.models.challenge import ChallengeTemplate, DailyChallenge

logger = logging.getLogger(__name__)


# ============================================
# Challenge Template Pool
# ============================================

CHALLENGE_POOL: List[ChallengeTemplate] = [
    ChallengeTemplate(
        id="run_5km",
        title="Run 5km",
        description="Complete a 5km run",
        points=50,
        xp=100,
        icon="🏃",
        type="running",
    ),
    ChallengeTemplate(
        id="cycle_10km",
        title="Cycle 10km",
        description="Complete a 10km cycling session",
        points=60,
        xp=120,
        icon="🚴",
        type="cycling",
    ),
    ChallengeTemplate(
        id="hike_trail",
        title="Hike a Trail",
        description="Complete any hiking trail",
        points=70,
        xp=140,
        icon="🥾",
        type="hiking",
    ),
    ChallengeTemplate(
        id="invite_friend",
        title="Invite a Friend",
        description="Invite someone to join Alonix",
        points=100,
        xp=150,
        icon="👥",
        type="social",
    ),
    ChallengeTemplate(
        id="join_challenge",
        title="Join a Challenge",
        description="Join any community challenge",
        points=40,
        xp=80,
        icon="🎯",
        type="challenge",
    ),
    ChallengeTemplate(
        id="morning_activity",
        title="Early Bird",
        description="Complete an activity before 8 AM",
        points=80,
        xp=130,
        icon="🌅",
        type="activity",
    ),
    ChallengeTemplate(
        id="streak_3",
        title="3-Day Streak",
        description="Complete activities for 3 consecutive days",
        points=150,
        xp=200,
        icon="🔥",
        type="streak",
    ),
    ChallengeTemplate(
        id="share_activity",
        title="Share Your Activity",
        description="Share your activity on social media",
        points=30,
        xp=60,
        icon="📱",
        type="social",
    ),
]


def get_challenge_template(challenge_id: str) -> Optional[ChallengeTemplate]:
    """Look up a template in the pool by ID"""
    for template in CHALLENGE_POOL:
        if template.id == challenge_id:
            return template
    return None


def assign_daily_challenges(
    rng: Optional[random.Random] = None,
    count: int = config.DAILY_CHALLENGE_COUNT,
) -> List[DailyChallenge]:
    """
    Draw `count` challenges from the pool (shuffle and slice)

    Every instance starts with completed=False. Consecutive draws may
    repeat challenges.
    """
    rng = rng or random.Random()
    shuffled = list(CHALLENGE_POOL)
    rng.shuffle(shuffled)

    selected = [template.instantiate() for template in shuffled[:count]]
    logger.info(f"Assigned daily challenges: {[challenge.id for challenge in selected]}")
    return selected


def needs_new_challenges(assigned_on: Optional[date], today: date, current: List[DailyChallenge]) -> bool:
    """A new set is due when none is stored or it was drawn on another day"""
    return not current or assigned_on != today


def format_challenges_display(challenges: List[DailyChallenge]) -> str:
    """Format today's challenges for console display"""
    if not challenges:
        return "No challenges assigned today."

    lines = ["🎯 TODAY'S CHALLENGES\n"]
    for challenge in challenges:
        status = "✅" if challenge.completed else "⬜"
        lines.append(
            f"{status} {challenge.icon} {challenge.title} ({challenge.id}) "
            f"+{challenge.points} pts, +{challenge.xp} XP"
        )
    return "\n".join(lines)
