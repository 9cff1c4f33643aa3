from __future__ import annotations

import logging
import threading
import uuid
from datetime import datetime
from typing import Any, List, Optional

from pydantic import TypeAdapter, ValidationError

from .config import DEFAULT_HISTORY_LIMIT
from .errors import GoalRequiredError
from .models import (
    DayKind,
    HabitCreate,
    HabitGoal,
    HabitProgress,
    Plan,
    PrimaryGoal,
    Profile,
    ProgressSummary,
    Routine,
    SecondaryGoal,
    Session,
)
from .periods import day_key
from .planner import Planner
from .progress import compute_streak, current_progress, inc_progress, progress_ratio, set_progress
from .state import FitnessState
from .store import KEYS, JsonStore
from .synthesizer import synthesize

logger = logging.getLogger(__name__)

_ADAPTERS = {
    "profile": TypeAdapter(Profile),
    "goal": TypeAdapter(Optional[PrimaryGoal]),
    "secondary_goal": TypeAdapter(Optional[SecondaryGoal]),
    "habits": TypeAdapter(List[HabitGoal]),
    "plan": TypeAdapter(Optional[Plan]),
    "routines": TypeAdapter(List[Routine]),
    "sessions": TypeAdapter(List[Session]),
    "active": TypeAdapter(Optional[str]),
}

_DEFAULTS = {
    "profile": Profile,
    "goal": lambda: None,
    "secondary_goal": lambda: None,
    "habits": list,
    "plan": lambda: None,
    "routines": list,
    "sessions": list,
    "active": lambda: None,
}


class FitnessService:
    """Goal, plan and habit operations over a persisted :class:`FitnessState`.

    Each mutating call loads the state, applies one change and saves the keys
    it touched, so a call is a single read-modify-persist unit.
    """

    def __init__(
        self,
        store: JsonStore,
        planner: Optional[Planner] = None,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> None:
        self.store = store
        self.planner = planner or Planner()
        self.history_limit = history_limit
        # held from load to save by every mutating operation
        self._lock = threading.RLock()

    # --- persistence ---
    def _load(self, name: str) -> Any:
        raw = self.store.load(KEYS[name], None)
        if raw is None:
            return _DEFAULTS[name]()
        try:
            return _ADAPTERS[name].validate_python(raw)
        except ValidationError as e:
            logger.warning("Discarding malformed %s record: %s", KEYS[name], e.error_count())
            return _DEFAULTS[name]()

    def _save(self, name: str, value: Any) -> None:
        self.store.save(KEYS[name], _ADAPTERS[name].dump_python(value, mode="json"))

    def load_state(self) -> FitnessState:
        return FitnessState(
            profile=self._load("profile"),
            primary_goal=self._load("goal"),
            secondary_goal=self._load("secondary_goal"),
            habits=self._load("habits"),
            plan=self._load("plan"),
            routines={r.id: r for r in self._load("routines")},
            sessions=self._load("sessions"),
            active_session_id=self._load("active"),
        )

    def _save_workout_log(self, state: FitnessState) -> None:
        self._save("routines", list(state.routines.values()))
        self._save("sessions", state.sessions)
        self._save("active", state.active_session_id)

    # --- profile & goals ---
    def update_profile(self, profile: Profile) -> Profile:
        with self._lock:
            self._save("profile", profile)
        return profile

    def set_primary_goal(self, goal: PrimaryGoal) -> None:
        # a new goal makes the old plan meaningless
        with self._lock:
            self._save("goal", goal)
            self._save("plan", None)
        logger.info("Primary goal set to %s; plan cleared", goal.type)

    def clear_primary_goal(self) -> None:
        with self._lock:
            self._save("goal", None)
            self._save("plan", None)

    def set_secondary_goal(self, goal: Optional[SecondaryGoal]) -> None:
        with self._lock:
            self._save("secondary_goal", goal)

    # --- plan ---
    def current_plan(self) -> Optional[Plan]:
        return self._load("plan")

    def regenerate_plan(self, now: Optional[datetime] = None) -> Plan:
        with self._lock:
            state = self.load_state()
            plan = self.planner.build_plan(
                state.profile, state.primary_goal, state.secondary_goal, now or datetime.now()
            )
            if plan is None:
                raise GoalRequiredError("build a plan")
            self._save("plan", plan)
        return plan

    def start_planned_workout(self, date_key: str, now: Optional[datetime] = None) -> Optional[Session]:
        with self._lock:
            state = self.load_state()
            if state.primary_goal is None:
                raise GoalRequiredError("start a planned workout")
            day = state.plan.find_day(date_key) if state.plan is not None else None
            if day is None or day.kind != DayKind.WORKOUT or day.routine is None:
                logger.info("Nothing planned for %s", date_key)
                return None
            return self._start(state, day.routine, now or datetime.now())

    def generate_today(self, now: Optional[datetime] = None) -> Session:
        """Start today's planned workout, or a one-off routine on rest days."""
        now = now or datetime.now()
        with self._lock:
            state = self.load_state()
            day = state.plan.find_day(day_key(now)) if state.plan is not None else None
            if day is not None and day.kind == DayKind.WORKOUT and day.routine is not None:
                routine = day.routine
            else:
                routine = synthesize(state.profile, state.primary_goal, state.secondary_goal)
            return self._start(state, routine, now)

    def _start(self, state: FitnessState, routine: Routine, now: datetime) -> Session:
        with self._lock:
            state.upsert_routine(routine)
            session = state.start_session(routine.id, now)
            self._save_workout_log(state)
        return session

    def end_workout(self, now: Optional[datetime] = None) -> Optional[Session]:
        with self._lock:
            state = self.load_state()
            session = state.end_session(now or datetime.now())
            self._save_workout_log(state)
        return session

    def routines(self) -> List[Routine]:
        return self._load("routines")

    def sessions(self) -> List[Session]:
        return self._load("sessions")

    # --- habits ---
    def habits(self) -> List[HabitGoal]:
        return self._load("habits")

    def add_habit(self, body: HabitCreate) -> HabitGoal:
        habit = HabitGoal(id=uuid.uuid4().hex, title=body.title, period=body.period, target=body.target)
        with self._lock:
            habits = self.habits()
            habits.append(habit)
            self._save("habits", habits)
        return habit

    def delete_habit(self, goal_id: str) -> bool:
        with self._lock:
            habits = self.habits()
            kept = [h for h in habits if h.id != goal_id]
            if len(kept) == len(habits):
                return False
            self._save("habits", kept)
        return True

    def increment_habit(self, goal_id: str, delta: float, now: Optional[datetime] = None) -> Optional[HabitGoal]:
        with self._lock:
            habits = self.habits()
            goal = inc_progress(habits, goal_id, delta, now, self.history_limit)
            if goal is not None:
                self._save("habits", habits)
        return goal

    def set_habit_progress(self, goal_id: str, value: float, now: Optional[datetime] = None) -> Optional[HabitGoal]:
        with self._lock:
            habits = self.habits()
            goal = set_progress(habits, goal_id, value, now, self.history_limit)
            if goal is not None:
                self._save("habits", habits)
        return goal

    # --- read accessors ---
    def habit_progress(self, now: Optional[datetime] = None) -> List[HabitProgress]:
        now = now or datetime.now()
        return [
            HabitProgress(
                id=h.id,
                title=h.title,
                period=h.period,
                target=h.target,
                current=current_progress(h, now),
                ratio=progress_ratio(h, now),
            )
            for h in self.habits()
        ]

    def streak(self, now: Optional[datetime] = None) -> int:
        return compute_streak(self.sessions(), now or datetime.now())

    def progress_summary(self, now: Optional[datetime] = None) -> ProgressSummary:
        now = now or datetime.now()
        return ProgressSummary(habits=self.habit_progress(now), streak=self.streak(now))
