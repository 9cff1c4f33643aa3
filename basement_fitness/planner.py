from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from .config import PLAN_WINDOW_DAYS
from .models import DayKind, Plan, PlanDay, PrimaryGoal, Profile, SecondaryGoal
from .periods import day_key
from .synthesizer import synthesize

logger = logging.getLogger(__name__)


def cadence(days_per_week: int) -> int:
    """Days between scheduled workouts for a weekly frequency."""
    days = max(1, min(7, days_per_week))
    return max(1, 7 // days)


class Planner:
    def __init__(self, window_days: int = PLAN_WINDOW_DAYS) -> None:
        self.window_days = window_days

    def build_plan(
        self,
        profile: Profile,
        primary: Optional[PrimaryGoal],
        secondary: Optional[SecondaryGoal],
        now: datetime,
    ) -> Optional[Plan]:
        # no primary goal, no cadence
        if primary is None:
            return None
        step = cadence(primary.days_per_week)
        # every workout day in one pass shares the same routine
        routine = synthesize(profile, primary, secondary)

        days: List[PlanDay] = []
        for i in range(self.window_days):
            date = day_key(now + timedelta(days=i))
            if i % step == 0:
                days.append(PlanDay(date=date, kind=DayKind.WORKOUT, routine=routine))
            else:
                days.append(PlanDay(date=date, kind=DayKind.REST))

        logger.info(
            "Built %d-day plan from %s: %s, %d/week (every %d days)",
            self.window_days, days[0].date, primary.type, primary.days_per_week, step,
        )
        return Plan(generated_at=now, days=days)
