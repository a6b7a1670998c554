"""
Leaderboard (static)

The leaderboard is not computed locally. Until a ranking service exists,
it is answered from a fixed list of users with the current user spliced in
using their live points and level.
"""

from typing import List

from pydantic import BaseModel

LEADERBOARD_KINDS = ("global", "friends", "local")


class LeaderboardEntry(BaseModel):
    id: str
    name: str
    avatar: str
    location: str
    points: int
    level: int
    activities: int
    is_current_user: bool = False
    rank: int = 0


_MOCK_USERS = (
    ("1", "Sarah Johnson", "https://i.pravatar.cc/150?img=1", "Port Louis", 15420, 45, 234),
    ("2", "Mike Chen", "https://i.pravatar.cc/150?img=2", "Flic en Flac", 14850, 43, 218),
    ("3", "Emma Davis", "https://i.pravatar.cc/150?img=3", "Grand Baie", 14320, 42, 205),
    ("5", "Alex Kumar", "https://i.pravatar.cc/150?img=5", "Quatre Bornes", 12100, 38, 145),
    ("6", "Lisa Anderson", "https://i.pravatar.cc/150?img=6", "Tamarin", 11450, 36, 132),
)


def get_leaderboard(total_points: int, level: int, activities: int = 0, kind: str = "global") -> List[LeaderboardEntry]:
    """
    Leaderboard rows sorted by points (descending), ranks starting at 1

    `kind` is accepted for the future ranking service; every kind returns
    the same static list today.
    """
    if kind not in LEADERBOARD_KINDS:
        raise ValueError(f"Unknown leaderboard kind: {kind}")

    entries = [
        LeaderboardEntry(
            id=user_id, name=name, avatar=avatar, location=location,
            points=points, level=user_level, activities=count,
        )
        for user_id, name, avatar, location, points, user_level, count in _MOCK_USERS
    ]
    entries.append(LeaderboardEntry(
        id="4",
        name="Current User",
        avatar="https://i.pravatar.cc/150?img=4",
        location="Curepipe",
        points=total_points,
        level=level,
        activities=activities,
        is_current_user=True,
    ))

    # Stable sort keeps the listed order for ties
    entries.sort(key=lambda entry: entry.points, reverse=True)
    for rank, entry in enumerate(entries, start=1):
        entry.rank = rank
    return entries
