"""
ProgressionStore - Progression Aggregate Root

Owns the user's progression state and is the only writer of it.

Responsibilities:
- Loading the snapshot once at startup (defaults when missing or unreadable)
- Serializing every mutation (one asyncio.Lock, one reducer call at a time)
- Persisting the full snapshot after each change, without blocking callers
- Read-only queries (level progress, leaderboard, catalogs)
"""

import asyncio
import logging
import random
from datetime import date, datetime, timezone
from typing import Callable, List, Optional, Set, Tuple

from progression.gamification import reducers
from progression.gamification.leaderboard import LeaderboardEntry, get_leaderboard
from progression.gamification.reducers import ActivityResult
from progression.gamification.rewards_shop import REWARD_CATALOG
from progression.gamification.xp_system import LevelDefinition, LevelProgress, XPResult, get_level_table, level_progress
from progression.models.challenge import DailyChallenge
from progression.models.progression import UserProgression
from progression.models.reward import PurchaseResult, RewardItem
from progression.services.persistence import PersistenceGateway

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ProgressionStore:
    """
    Single-writer store for progression state.

    Construct one per process (or per test) and pass it to the code that
    needs it. All mutations are coroutines that run one at a time;
    persistence runs in background tasks that `flush()` can await.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        today: Callable[[], date] = date.today,
        now: Callable[[], datetime] = _utc_now,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize ProgressionStore.

        Args:
            gateway: Where the snapshot is loaded from and saved to
            today: Clock for calendar days (streaks, challenges, weekly goals)
            now: Clock for timestamps (achievement unlocks)
            rng: Random source for daily challenge assignment
        """
        self.gateway = gateway
        self._today = today
        self._now = now
        self._rng = rng or random.Random()
        self._state = UserProgression()
        self._lock = asyncio.Lock()
        self._save_lock = asyncio.Lock()
        self._pending_saves: Set[asyncio.Task] = set()
        logger.debug("ProgressionStore initialized")

    # ==========================================
    # Lifecycle
    # ==========================================

    async def load(self) -> UserProgression:
        """Load the stored snapshot and run day-start housekeeping"""
        async with self._lock:
            stored = await self.gateway.load()
            self._state = stored if stored is not None else UserProgression()

        await self._dispatch(reducers.StartDay())
        return self._state

    async def flush(self) -> None:
        """Wait for all scheduled saves to finish"""
        while self._pending_saves:
            await asyncio.gather(*list(self._pending_saves))

    # ==========================================
    # Mutations
    # ==========================================

    async def add_xp(self, amount: int) -> XPResult:
        """Add XP; at most one level up per call"""
        return await self._dispatch(reducers.AddXP(amount))

    async def add_points(self, amount: int, category: str) -> None:
        """Credit points to one of: activities, challenges, social, achievements"""
        await self._dispatch(reducers.AddPoints(amount, category))

    async def update_streak(self) -> int:
        """Register activity today and return the current streak"""
        return await self._dispatch(reducers.UpdateStreak())

    async def complete_activity(self, activity_type: str, distance: float, duration: float) -> ActivityResult:
        """
        Award points and XP for a finished activity.

        Args:
            activity_type: running, cycling, hiking, ...
            distance: Distance in km
            duration: Duration in seconds

        Returns:
            ActivityResult with the awarded points/XP, the streak, level-up
            information and the ids of newly unlocked achievements
        """
        return await self._dispatch(reducers.CompleteActivity(activity_type, distance, duration))

    async def complete_daily_challenge(self, challenge_id: str) -> bool:
        """Complete one of today's challenges; False if unknown or already done"""
        return await self._dispatch(reducers.CompleteDailyChallenge(challenge_id))

    async def purchase_reward(self, reward_id: str) -> PurchaseResult:
        """Buy a shop item with points"""
        return await self._dispatch(reducers.PurchaseReward(reward_id))

    async def record_achievement_progress(self, achievement_id: str, amount: float = 1) -> List[str]:
        """Report progress on an externally driven achievement; returns unlocked ids"""
        return await self._dispatch(reducers.RecordAchievementProgress(achievement_id, amount))

    async def refresh_daily_challenges(self, force: bool = False) -> List[DailyChallenge]:
        """Draw a new challenge set if the day changed (or always, with force=True)"""
        return await self._dispatch(reducers.StartDay(force_new_challenges=force))

    # ==========================================
    # Queries
    # ==========================================

    @property
    def state(self) -> UserProgression:
        """Current snapshot (treat as read-only)"""
        return self._state

    @property
    def daily_challenges(self) -> List[DailyChallenge]:
        return self._state.daily_challenges

    @property
    def levels(self) -> Tuple[LevelDefinition, ...]:
        return get_level_table()

    @property
    def rewards_catalog(self) -> List[RewardItem]:
        return REWARD_CATALOG

    def get_level_progress(self) -> LevelProgress:
        return level_progress(self._state.level, self._state.xp)

    def get_leaderboard(self, kind: str = "global") -> List[LeaderboardEntry]:
        return get_leaderboard(
            self._state.total_points,
            self._state.level,
            activities=self._state.total_activities,
            kind=kind,
        )

    # ==========================================
    # Internals
    # ==========================================

    async def _dispatch(self, action):
        async with self._lock:
            previous = self._state
            transition = reducers.reduce(
                previous,
                action,
                today=self._today(),
                now=self._now(),
                rng=self._rng,
            )
            self._state = transition.state

            if transition.changed_from(previous):
                self._schedule_save(transition.state)
            return transition.result

    def _schedule_save(self, state: UserProgression) -> None:
        task = asyncio.get_running_loop().create_task(self._save(state))
        self._pending_saves.add(task)
        task.add_done_callback(self._pending_saves.discard)

    async def _save(self, state: UserProgression) -> None:
        # FIFO lock keeps snapshots landing in mutation order
        async with self._save_lock:
            saved = await self.gateway.save(state)
        if not saved:
            logger.warning("Progression snapshot not persisted; in-memory state is ahead of storage")
