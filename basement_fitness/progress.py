from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from .config import DEFAULT_HISTORY_LIMIT
from .models import HabitGoal, Session
from .periods import DateLike, day_key, period_key

logger = logging.getLogger(__name__)


def find_habit(habits: Iterable[HabitGoal], goal_id: str) -> Optional[HabitGoal]:
    return next((h for h in habits if h.id == goal_id), None)


def current_progress(goal: HabitGoal, now: DateLike) -> float:
    return goal.progress.get(period_key(goal, now), 0)


def progress_ratio(goal: HabitGoal, now: DateLike) -> float:
    return min(1.0, current_progress(goal, now) / goal.target)


def _prune(goal: HabitGoal, keep_key: str, limit: int) -> None:
    # period keys of one format sort chronologically as strings
    stale = sorted(goal.progress)[:-limit] if limit > 0 else []
    for key in stale:
        if key != keep_key:
            del goal.progress[key]


def set_progress(
    habits: List[HabitGoal],
    goal_id: str,
    value: float,
    now: Optional[DateLike] = None,
    history_limit: int = DEFAULT_HISTORY_LIMIT,
) -> Optional[HabitGoal]:
    """Store ``value`` (clamped at zero) in the goal's current period bucket.

    Returns the updated goal, or ``None`` when ``goal_id`` does not resolve;
    an unknown id is not an error because it usually comes from stale UI state.
    """
    goal = find_habit(habits, goal_id)
    if goal is None:
        logger.info("Ignoring progress update for unknown habit %s", goal_id)
        return None
    key = period_key(goal, now or datetime.now())
    goal.progress[key] = max(0, value)
    _prune(goal, key, history_limit)
    return goal


def inc_progress(
    habits: List[HabitGoal],
    goal_id: str,
    delta: float,
    now: Optional[DateLike] = None,
    history_limit: int = DEFAULT_HISTORY_LIMIT,
) -> Optional[HabitGoal]:
    now = now or datetime.now()
    goal = find_habit(habits, goal_id)
    if goal is None:
        logger.info("Ignoring progress increment for unknown habit %s", goal_id)
        return None
    return set_progress(habits, goal_id, current_progress(goal, now) + delta, now, history_limit)


def compute_streak(sessions: Iterable[Session], now: DateLike) -> int:
    """Count consecutive days with a finished session, ending today or yesterday."""
    ended_days = {day_key(s.ended_at) for s in sessions if s.ended_at is not None}
    cursor = now
    # today's workout may still be ahead
    if day_key(cursor) not in ended_days:
        cursor -= timedelta(days=1)
    streak = 0
    while day_key(cursor) in ended_days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak
