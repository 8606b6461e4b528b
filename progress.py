# progress.py
"""History, streak, points and badge bookkeeping for one user."""
import logging
from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from enum import Enum
from typing import Dict, Iterable, List, Optional

from calculator import EmissionsResult

logger = logging.getLogger(__name__)

POINTS_PER_SUBMISSION = 10
LEADERBOARD_SIZE = 10

BADGES = [
    {"id": "travel_goal", "icon": "🚗", "title": "Travel Saver",
     "desc": "Kept travel emissions under 100 kg CO₂!"},
    {"id": "diet_goal", "icon": "🥗", "title": "Green Eater",
     "desc": "Kept diet emissions under 30 kg CO₂!"},
    {"id": "shopping_goal", "icon": "🛍️", "title": "Conscious Shopper",
     "desc": "Kept shopping emissions under 50 kg CO₂!"},
    {"id": "eco_champion", "icon": "🌎", "title": "Eco Champion",
     "desc": "Total emissions under 120 kg CO₂!"},
]
BADGE_IDS = [b["id"] for b in BADGES]

BADGE_RULES = {
    "travel_goal": lambda r: r.travel <= 100,
    "diet_goal": lambda r: r.diet <= 30,
    "shopping_goal": lambda r: r.shopping <= 50,
    "eco_champion": lambda r: r.total <= 120,
}


class SubmissionStatus(Enum):
    RECORDED = "recorded"
    DUPLICATE_NOOP = "duplicate_noop"


@dataclass(frozen=True)
class HistoryEntry:
    date: date
    form: Dict[str, float]
    total: float
    breakdown: Dict[str, float]


@dataclass
class UserProgress:
    points: int = 0
    streak: int = 0
    last_submission_date: Optional[date] = None
    history: List[HistoryEntry] = field(default_factory=list)
    badges: Dict[str, bool] = field(default_factory=dict)


@dataclass(frozen=True)
class LeaderboardRow:
    user_id: int
    name: str
    points: int
    streak: int
    rank: int


def empty_badges() -> Dict[str, bool]:
    return {badge_id: False for badge_id in BADGE_IDS}


def evaluate_badges(result: EmissionsResult, earned: Optional[Dict[str, bool]] = None) -> Dict[str, bool]:
    """Badges unlocked by ``result``, unioned with ``earned``. Never clears a flag."""
    badges = empty_badges()
    for badge_id, flag in (earned or {}).items():
        badges[badge_id] = bool(flag)
    for badge_id, rule in BADGE_RULES.items():
        if rule(result):
            badges[badge_id] = True
    return badges


def newly_unlocked(before: Dict[str, bool], after: Dict[str, bool]) -> List[str]:
    return [b for b in BADGE_IDS if after.get(b) and not before.get(b)]


def submission_status(progress: UserProgress, today: date) -> SubmissionStatus:
    if progress.history and progress.history[-1].date == today:
        return SubmissionStatus.DUPLICATE_NOOP
    return SubmissionStatus.RECORDED


def submit(today: date, result: EmissionsResult, form_snapshot: Dict[str, float],
           progress: UserProgress) -> UserProgress:
    """Record today's result.

    A second call on the same day leaves history, points and streak untouched;
    only the badge union is re-applied, which is itself idempotent.
    """
    badges = evaluate_badges(result, progress.badges)

    if submission_status(progress, today) is SubmissionStatus.DUPLICATE_NOOP:
        logger.debug("Duplicate submission for %s ignored", today)
        return replace(progress, badges=badges)

    last = progress.history[-1] if progress.history else None
    entry = HistoryEntry(
        date=today,
        form=dict(form_snapshot),
        total=result.total,
        breakdown=result.breakdown,
    )
    if last is not None and today - last.date == timedelta(days=1):
        streak = progress.streak + 1
    else:
        streak = 1

    return UserProgress(
        points=progress.points + POINTS_PER_SUBMISSION,
        streak=streak,
        last_submission_date=today,
        history=progress.history + [entry],
        badges=badges,
    )


def rank_users(users: Iterable, limit: Optional[int] = LEADERBOARD_SIZE) -> List[LeaderboardRow]:
    """Order users by points, highest first; equal points go by user id.

    ``users`` are any objects with ``id``, ``name``, ``points`` and ``streak``.
    """
    ordered = sorted(users, key=lambda u: (-(u.points or 0), u.id))
    if limit is not None:
        ordered = ordered[:limit]
    return [
        LeaderboardRow(user_id=u.id, name=u.name or "User", points=u.points or 0,
                       streak=u.streak or 0, rank=i)
        for i, u in enumerate(ordered, start=1)
    ]
