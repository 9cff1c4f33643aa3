from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Set, Union

from pydantic import BaseModel, Field, PositiveInt, field_validator


class GoalType(str, Enum):
    RUN_5K = "run_5k"
    BAR_HANG = "bar_hang"
    LOSE_WEIGHT = "lose_weight"
    PUSHUPS = "pushups"
    BUILD_MUSCLE = "build_muscle"
    GENERAL = "general"


class Equipment(str, Enum):
    BODYWEIGHT = "bodyweight"
    PULLUP_BAR = "pullup_bar"
    DUMBBELLS = "dumbbells"
    BARBELL = "barbell"
    BENCH = "bench"
    KETTLEBELL = "kettlebell"
    BANDS = "bands"
    TREADMILL = "treadmill"
    BIKE = "bike"
    ROWER = "rower"


class Profile(BaseModel):
    goal: GoalType = GoalType.GENERAL
    duration_min: PositiveInt = 30
    equipment: Set[Equipment] = Field(default_factory=lambda: {Equipment.BODYWEIGHT})

    @field_validator("equipment")
    @classmethod
    def _never_empty(cls, v: Set[Equipment]) -> Set[Equipment]:
        return v or {Equipment.BODYWEIGHT}


# --- primary goal variants ---
class _GoalBase(BaseModel):
    duration_min: PositiveInt = 30
    days_per_week: int = 3
    created_at: datetime = Field(default_factory=datetime.now)

    @field_validator("days_per_week")
    @classmethod
    def _clamp_days(cls, v: int) -> int:
        return max(1, min(7, v))


class RunFiveKGoal(_GoalBase):
    type: Literal["run_5k"] = "run_5k"
    can_run_10_min: bool = False
    best_5k_min: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)


class BarHangGoal(_GoalBase):
    type: Literal["bar_hang"] = "bar_hang"
    max_hang_sec: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)
    best_hang_sec: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)


class LoseWeightGoal(_GoalBase):
    type: Literal["lose_weight"] = "lose_weight"
    start_weight_lbs: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)
    current_weight_lbs: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)


class PushupsGoal(_GoalBase):
    type: Literal["pushups"] = "pushups"
    max_pushups: Optional[int] = Field(default=None, ge=0)
    best_pushups: Optional[int] = Field(default=None, ge=0)


class BuildMuscleGoal(_GoalBase):
    type: Literal["build_muscle"] = "build_muscle"


class GeneralGoal(_GoalBase):
    type: Literal["general"] = "general"


PrimaryGoal = Annotated[
    Union[RunFiveKGoal, BarHangGoal, LoseWeightGoal, PushupsGoal, BuildMuscleGoal, GeneralGoal],
    Field(discriminator="type"),
]


class PrimaryGoalUpdate(BaseModel):
    goal: PrimaryGoal


class SecondaryGoalType(str, Enum):
    STEPS = "steps"
    ZONE2 = "zone2"
    MOBILITY = "mobility"
    PROTEIN = "protein"


class SecondaryGoal(BaseModel):
    type: SecondaryGoalType
    created_at: datetime = Field(default_factory=datetime.now)


class SecondaryGoalUpdate(BaseModel):
    goal: Optional[SecondaryGoal] = None


# --- habits ---
class HabitPeriod(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class HabitGoal(BaseModel):
    id: str
    title: str = Field(min_length=1)
    period: HabitPeriod
    target: float = Field(gt=0, allow_inf_nan=False)
    progress: Dict[str, float] = Field(default_factory=dict)


class HabitCreate(BaseModel):
    title: str = Field(min_length=1, description="e.g. Drink water, Stretch")
    period: HabitPeriod
    target: float = Field(gt=0, allow_inf_nan=False)

    @field_validator("title")
    @classmethod
    def _strip(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title must not be blank")
        return v


class ProgressDelta(BaseModel):
    delta: float = Field(default=1, allow_inf_nan=False)


class ProgressValue(BaseModel):
    value: float = Field(allow_inf_nan=False)


class HabitProgress(BaseModel):
    id: str
    title: str
    period: HabitPeriod
    target: float
    current: float
    ratio: float


class ProgressSummary(BaseModel):
    habits: List[HabitProgress]
    streak: int


# --- routines, plan, sessions ---
class Exercise(BaseModel):
    id: str
    name: str
    sets: Optional[int] = None
    reps: Optional[int] = None
    hold_sec: Optional[int] = None
    notes: Optional[str] = None


class Routine(BaseModel):
    id: str
    name: str
    description: str = ""
    exercises: List[Exercise] = Field(default_factory=list)


class DayKind(str, Enum):
    WORKOUT = "workout"
    REST = "rest"


class PlanDay(BaseModel):
    date: str
    kind: DayKind
    routine: Optional[Routine] = None


class Plan(BaseModel):
    generated_at: datetime
    days: List[PlanDay]

    def find_day(self, date_key: str) -> Optional[PlanDay]:
        for day in self.days:
            if day.date == date_key:
                return day
        return None


class Session(BaseModel):
    id: str
    routine_id: str
    started_at: datetime
    ended_at: Optional[datetime] = None
    notes: str = ""
    entries: Dict[str, List[Dict[str, str]]] = Field(default_factory=dict)
