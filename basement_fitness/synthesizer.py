from __future__ import annotations

import math
import uuid
from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, List, Optional

from .models import (
    BarHangGoal,
    Equipment,
    Exercise,
    GoalType,
    PrimaryGoal,
    Profile,
    PushupsGoal,
    Routine,
    RunFiveKGoal,
    SecondaryGoal,
    SecondaryGoalType,
)

DEFAULT_DURATION_MIN = 30
DEFAULT_HANG_SEC = 30
DEFAULT_PUSHUPS = 10

GOAL_LABELS = {
    GoalType.RUN_5K: "Couch to 5K",
    GoalType.BAR_HANG: "Bar Hang",
    GoalType.LOSE_WEIGHT: "Fat Loss Circuit",
    GoalType.PUSHUPS: "Push-up Builder",
    GoalType.BUILD_MUSCLE: "Muscle Builder",
    GoalType.GENERAL: "General Fitness",
}

# preferred order when several machines are available
CARDIO_MACHINES = [
    (Equipment.TREADMILL, "Treadmill"),
    (Equipment.BIKE, "Bike"),
    (Equipment.ROWER, "Rower"),
]


@dataclass(frozen=True)
class Capabilities:
    has_pullup_bar: bool
    has_dumbbells: bool
    has_barbell: bool
    wants_cardio_machine: bool
    cardio_machine: Optional[str] = None

    @staticmethod
    def from_equipment(equipment: FrozenSet[Equipment]) -> "Capabilities":
        machine = next((label for tag, label in CARDIO_MACHINES if tag in equipment), None)
        return Capabilities(
            has_pullup_bar=Equipment.PULLUP_BAR in equipment,
            has_dumbbells=Equipment.DUMBBELLS in equipment,
            has_barbell=Equipment.BARBELL in equipment,
            wants_cardio_machine=machine is not None,
            cardio_machine=machine,
        )


@dataclass(frozen=True)
class Move:
    """Exercise prescription before it is given an id."""
    name: str
    sets: Optional[int] = None
    reps: Optional[int] = None
    hold_sec: Optional[int] = None
    notes: Optional[str] = None

    def to_exercise(self) -> Exercise:
        return Exercise(
            id=uuid.uuid4().hex,
            name=self.name,
            sets=self.sets,
            reps=self.reps,
            hold_sec=self.hold_sec,
            notes=self.notes,
        )


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def exercise_cap(duration_min: int) -> int:
    if duration_min <= 20:
        return 3
    if duration_min <= 30:
        return 4
    return 6


def hang_prescription(goal: Optional[BarHangGoal]) -> tuple[int, int]:
    """Return (sets, hold seconds) scaled from the recorded hang baseline."""
    baseline = (goal and (goal.best_hang_sec or goal.max_hang_sec)) or DEFAULT_HANG_SEC
    hold = max(10, _round_half_up(0.6 * baseline))
    sets = 6 if baseline >= 60 else 5
    return sets, hold


def pushup_reps(goal: Optional[PushupsGoal]) -> int:
    baseline = (goal and (goal.best_pushups or goal.max_pushups)) or DEFAULT_PUSHUPS
    return max(3, math.floor(0.6 * baseline))


# --- templates ---
def _run_5k(goal: Optional[RunFiveKGoal], caps: Capabilities) -> List[Move]:
    prefix = "Treadmill " if caps.cardio_machine == "Treadmill" else ""
    if goal is not None and goal.can_run_10_min:
        main = Move(f"{prefix}Easy Continuous Run", notes="20 min at conversational pace")
    else:
        main = Move(f"{prefix}Run/Walk Intervals", sets=8, notes="1 min run + 90 s walk")
    return [
        Move("Brisk Walk Warm-up", notes="5 min"),
        main,
        Move("Bodyweight Squats", sets=3, reps=12),
        Move("Calf Raises", sets=3, reps=15),
        Move("Glute Bridges", sets=3, reps=12),
        Move("Plank", sets=3, hold_sec=30),
        Move("Cool-down Walk + Calf Stretch", notes="5 min"),
    ]


def _bar_hang(goal: Optional[BarHangGoal], caps: Capabilities) -> List[Move]:
    sets, hold = hang_prescription(goal)
    if caps.has_pullup_bar:
        moves = [
            Move("Dead Hang", sets=sets, hold_sec=hold),
            Move("Scapular Pulls", sets=3, reps=8),
            Move("Active Hang", sets=3, hold_sec=max(10, hold // 2)),
        ]
    elif caps.has_dumbbells:
        moves = [
            Move("Dumbbell Farmer Hold", sets=sets, hold_sec=hold),
            Move("Dumbbell Shrug Hold", sets=3, hold_sec=20),
        ]
    else:
        moves = [
            Move("Towel Grip Isometric Hold", sets=sets, hold_sec=hold, notes="squeeze a towel as hard as you can"),
            Move("Fingertip Plank", sets=3, hold_sec=20),
        ]
    moves += [
        Move("Hollow Body Hold", sets=3, hold_sec=20),
        Move("Prone Y-T Raises", sets=2, reps=10),
        Move("Wrist & Forearm Stretch", notes="2 min"),
    ]
    return moves


def _lose_weight(goal, caps: Capabilities) -> List[Move]:
    if caps.wants_cardio_machine:
        moves = [Move(f"{caps.cardio_machine} Intervals", sets=6, notes="30 s hard / 60 s easy")]
    else:
        moves = [Move("Jumping Jacks", sets=3, hold_sec=45)]
    if caps.has_dumbbells:
        moves += [
            Move("Dumbbell Thrusters", sets=3, reps=12),
            Move("Dumbbell Renegade Rows", sets=3, reps=8),
        ]
    else:
        moves += [
            Move("Bodyweight Squats", sets=3, reps=15),
            Move("Reverse Lunges", sets=3, reps=10),
        ]
    moves += [
        Move("Mountain Climbers", sets=3, hold_sec=30),
        Move("Burpees", sets=3, reps=8),
        Move("Plank", sets=3, hold_sec=30),
    ]
    return moves


def _pushups(goal: Optional[PushupsGoal], caps: Capabilities) -> List[Move]:
    reps = pushup_reps(goal)
    accessory = (
        Move("Dumbbell Floor Press", sets=3, reps=10)
        if caps.has_dumbbells
        else Move("Tricep Dips (Chair)", sets=3, reps=8)
    )
    return [
        Move("Push-ups", sets=4, reps=reps),
        Move("Incline Push-ups", sets=3, reps=reps + 2),
        accessory,
        Move("Plank", sets=3, hold_sec=30),
        Move("Negative Push-ups", sets=2, reps=5, notes="3 s lowering"),
        Move("Pike Push-ups", sets=2, reps=6),
    ]


def _build_muscle(goal, caps: Capabilities) -> List[Move]:
    pull = Move("Pull-ups", sets=4, notes="as many clean reps as possible")
    if caps.has_barbell:
        moves = [
            Move("Back Squat", sets=4, reps=6),
            Move("Bench Press", sets=4, reps=6),
            Move("Barbell Row", sets=4, reps=8),
            Move("Romanian Deadlift", sets=3, reps=8),
            Move("Overhead Press", sets=3, reps=8),
        ]
    elif caps.has_dumbbells:
        moves = [
            Move("Goblet Squat", sets=4, reps=10),
            Move("Dumbbell Bench Press", sets=4, reps=10),
            Move("One-Arm Dumbbell Row", sets=4, reps=10),
            Move("Dumbbell Romanian Deadlift", sets=3, reps=10),
            Move("Dumbbell Shoulder Press", sets=3, reps=10),
            Move("Dumbbell Curls", sets=3, reps=12),
        ]
    else:
        moves = [
            Move("Push-ups", sets=4, notes="stop 2 reps short of failure"),
            Move("Bulgarian Split Squats", sets=3, reps=10),
            Move("Inverted Rows (Table)", sets=3, reps=8),
            Move("Pike Push-ups", sets=3, reps=8),
            Move("Glute Bridges", sets=3, reps=15),
            Move("Plank", sets=3, hold_sec=45),
        ]
    if caps.has_pullup_bar:
        moves = [m for m in moves if m.name != "Inverted Rows (Table)"]
        moves.insert(2, pull)
    return moves


def _general(goal, caps: Capabilities) -> List[Move]:
    if caps.has_pullup_bar:
        pull = Move("Pull-ups", sets=3, reps=5)
    elif caps.has_dumbbells:
        pull = Move("One-Arm Dumbbell Row", sets=3, reps=10)
    else:
        pull = Move("Superman Hold", sets=3, hold_sec=20)
    push = (
        Move("Dumbbell Bench Press", sets=3, reps=10)
        if caps.has_dumbbells
        else Move("Push-ups", sets=3, reps=10)
    )
    cardio = (
        Move(f"{caps.cardio_machine} Easy Pace", notes="10 min")
        if caps.wants_cardio_machine
        else Move("Jumping Jacks", sets=2, hold_sec=60)
    )
    return [
        Move("Bodyweight Squats", sets=3, reps=12),
        push,
        pull,
        Move("Reverse Lunges", sets=3, reps=10),
        Move("Plank", sets=3, hold_sec=30),
        cardio,
    ]


TEMPLATES: Dict[GoalType, Callable[..., List[Move]]] = {
    GoalType.RUN_5K: _run_5k,
    GoalType.BAR_HANG: _bar_hang,
    GoalType.LOSE_WEIGHT: _lose_weight,
    GoalType.PUSHUPS: _pushups,
    GoalType.BUILD_MUSCLE: _build_muscle,
    GoalType.GENERAL: _general,
}


def finisher(secondary: SecondaryGoal, caps: Capabilities) -> Optional[Move]:
    if secondary.type == SecondaryGoalType.STEPS:
        return Move("Finisher: Brisk Walk", notes="10 min, easy pace")
    if secondary.type == SecondaryGoalType.ZONE2:
        if not caps.wants_cardio_machine:
            return None
        return Move(f"Finisher: Zone 2 {caps.cardio_machine}", notes="15 min, conversational effort")
    if secondary.type == SecondaryGoalType.MOBILITY:
        return Move("Finisher: Mobility Flow", notes="8 min: hips, t-spine, shoulders")
    if secondary.type == SecondaryGoalType.PROTEIN:
        return Move("Reminder: Protein With Next Meal", notes="aim for 30 g or more")
    return None


def routine_id(goal: GoalType, duration_min: int, equipment: FrozenSet[Equipment]) -> str:
    tags = "+".join(sorted(e.value for e in equipment))
    return f"gen:{goal.value}:{duration_min}:{tags}"


def synthesize(
    profile: Optional[Profile],
    primary: Optional[PrimaryGoal] = None,
    secondary: Optional[SecondaryGoal] = None,
) -> Routine:
    """Build a routine for the effective goal, duration and equipment.

    The routine id depends only on (goal, duration, equipment) so re-synthesizing
    with the same inputs replaces a stored routine instead of duplicating it.
    Exercise ids are fresh on every call.
    """
    profile = profile or Profile()
    goal_type = GoalType(primary.type) if primary is not None else profile.goal
    duration = primary.duration_min if primary is not None else profile.duration_min
    duration = duration or DEFAULT_DURATION_MIN
    equipment = frozenset(profile.equipment or {Equipment.BODYWEIGHT})

    caps = Capabilities.from_equipment(equipment)
    cap = exercise_cap(duration)
    moves = TEMPLATES[goal_type](primary, caps)[:cap]

    if secondary is not None and len(moves) < cap:
        extra = finisher(secondary, caps)
        if extra is not None:
            moves.append(extra)

    label = GOAL_LABELS[goal_type]
    kit = ", ".join(sorted(e.value.replace("_", " ") for e in equipment))
    return Routine(
        id=routine_id(goal_type, duration, equipment),
        name=f"{label} ({duration} min)",
        description=f"Generated for {label.lower()} with {kit}.",
        exercises=[m.to_exercise() for m in moves],
    )
