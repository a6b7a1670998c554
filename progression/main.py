"""Command line entry point for the progression engine

Usage:
    progression status
    progression activity running 10 3700
    progression challenges [--refresh]
    progression complete-challenge run_5km
    progression shop
    progression buy theme_dark
    progression leaderboard [--kind global]
    progression levels [--limit 20]
"""
import argparse
import asyncio
import logging
from typing import List, Optional

from progression import config
from progression.config import validate_config, LOG_LEVEL
from progression.exceptions import ConfigurationError, ProgressionError
from progression.gamification.achievement_system import summarize_achievements
from progression.gamification.challenges import format_challenges_display
from progression.gamification.leaderboard import LEADERBOARD_KINDS
from progression.gamification.rewards_shop import format_shop_display
from progression.gamification.streak_system import format_streak_display
from progression.services.container import ServiceContainer
from progression.services.persistence import JsonFileGateway

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="progression", description="Progression and rewards engine")
    parser.add_argument("--data-path", default=None, help=f"Storage directory (default: {config.DATA_PATH})")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("status", help="Show level, points and streak")

    activity = subparsers.add_parser("activity", help="Record a completed activity")
    activity.add_argument("activity_type", help="running, cycling, hiking, ...")
    activity.add_argument("distance", type=float, help="Distance in km")
    activity.add_argument("duration", type=float, help="Duration in seconds")

    challenges = subparsers.add_parser("challenges", help="Show today's challenges")
    challenges.add_argument("--refresh", action="store_true", help="Draw a new set now")

    complete = subparsers.add_parser("complete-challenge", help="Complete one of today's challenges")
    complete.add_argument("challenge_id")

    subparsers.add_parser("shop", help="Show the rewards shop")

    buy = subparsers.add_parser("buy", help="Buy a reward with points")
    buy.add_argument("reward_id")

    leaderboard = subparsers.add_parser("leaderboard", help="Show the leaderboard")
    leaderboard.add_argument("--kind", choices=LEADERBOARD_KINDS, default="global")

    levels = subparsers.add_parser("levels", help="Show the level table")
    levels.add_argument("--limit", type=int, default=20)

    return parser


def format_weekly_goals(goals) -> str:
    parts = [
        f"{name} {goal.current:g}/{goal.target:g} (+{goal.points} pts)"
        for name, goal in (("activities", goals.activities), ("km", goals.distance), ("challenges", goals.challenges))
    ]
    return "📅 This week: " + ", ".join(parts)


def format_status(store) -> str:
    state = store.state
    progress = store.get_level_progress()
    summary = summarize_achievements(state.achievements)
    breakdown = state.points_breakdown

    return "\n".join([
        f"⭐ Level {state.level} - {progress.title}",
        f"   XP: {progress.current_xp}/{progress.required_xp} ({progress.progress:.0f}%)",
        f"💰 Points: {state.total_points} "
        f"(activities {breakdown.activities}, challenges {breakdown.challenges}, "
        f"social {breakdown.social}, achievements {breakdown.achievements})",
        format_streak_display(state.current_streak, state.longest_streak),
        f"🏆 Achievements: {summary['total_unlocked']}/{summary['total_achievements']}",
        format_weekly_goals(state.weekly_goals),
    ])


async def run(args: argparse.Namespace, container: ServiceContainer) -> str:
    """Execute one command and return the text to print"""
    store = await container.start()

    try:
        if args.command == "status":
            return format_status(store)

        if args.command == "activity":
            result = await store.complete_activity(args.activity_type, args.distance, args.duration)
            lines = [f"+{result.points} points, +{result.xp} XP", result.streak_message]
            if result.leveled_up:
                lines.append(f"🎉 Level up! You are now level {result.new_level}")
            for achievement_id in result.achievements_unlocked:
                lines.append(f"🏅 Achievement unlocked: {store.state.get_achievement(achievement_id).name}")
            return "\n".join(lines)

        if args.command == "challenges":
            if args.refresh:
                await store.refresh_daily_challenges(force=True)
            return format_challenges_display(store.daily_challenges)

        if args.command == "complete-challenge":
            if await store.complete_daily_challenge(args.challenge_id):
                return f"✅ Challenge {args.challenge_id} completed"
            return f"Challenge {args.challenge_id} is not open today"

        if args.command == "shop":
            return format_shop_display(store.state.total_points, store.state.purchased_reward_ids)

        if args.command == "buy":
            result = await store.purchase_reward(args.reward_id)
            return result.message

        if args.command == "leaderboard":
            return "\n".join(
                f"{entry.rank:>2}. {entry.name:<16} {entry.points:>6} pts  lvl {entry.level}"
                + ("  ← you" if entry.is_current_user else "")
                for entry in store.get_leaderboard(args.kind)
            )

        if args.command == "levels":
            return "\n".join(
                f"{definition.level:>3}  {definition.title:<12} {definition.xp_required:>12} XP"
                for definition in store.levels[:args.limit]
            )

        raise ValueError(f"Unknown command: {args.command}")
    finally:
        await container.shutdown()


def main(argv: Optional[List[str]] = None) -> int:
    """Console script entry point"""
    logging.basicConfig(
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        level=getattr(logging, LOG_LEVEL.upper(), logging.INFO)
    )

    args = build_parser().parse_args(argv)

    try:
        validate_config()
    except ConfigurationError as e:
        print(f"Invalid configuration: {e.message}")
        return 2

    gateway = None
    if args.data_path:
        gateway = JsonFileGateway(args.data_path)

    logger.debug(f"Running command {args.command}")

    try:
        output = asyncio.run(run(args, ServiceContainer(gateway=gateway)))
    except ProgressionError as e:
        print(e.user_message)
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
