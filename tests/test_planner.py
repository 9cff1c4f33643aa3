from datetime import date, datetime, timedelta

import pytest

from basement_fitness.models import BarHangGoal, DayKind, GeneralGoal, Profile
from basement_fitness.planner import Planner, cadence

NOW = datetime(2026, 10, 17, 7, 45)


@pytest.mark.parametrize("days_per_week", range(1, 8))
def test_plan_covers_fourteen_contiguous_days(days_per_week):
    plan = Planner().build_plan(Profile(), GeneralGoal(days_per_week=days_per_week), None, NOW)
    assert len(plan.days) == 14
    dates = [date.fromisoformat(d.date) for d in plan.days]
    assert dates[0] == NOW.date()
    assert all(b - a == timedelta(days=1) for a, b in zip(dates, dates[1:]))


@pytest.mark.parametrize(
    "days_per_week,step,workouts",
    [(1, 7, 2), (2, 3, 5), (3, 2, 7), (4, 1, 14), (7, 1, 14)],
)
def test_workout_days_follow_cadence(days_per_week, step, workouts):
    assert cadence(days_per_week) == step
    plan = Planner().build_plan(Profile(), GeneralGoal(days_per_week=days_per_week), None, NOW)
    kinds = [d.kind for d in plan.days]
    assert kinds.count(DayKind.WORKOUT) == workouts
    for i, day in enumerate(plan.days):
        expected = DayKind.WORKOUT if i % step == 0 else DayKind.REST
        assert day.kind == expected


def test_cadence_clamps_out_of_range_frequency():
    assert cadence(0) == 7
    assert cadence(12) == 1
    assert GeneralGoal(days_per_week=12).days_per_week == 7
    assert GeneralGoal(days_per_week=-3).days_per_week == 1


def test_rest_days_have_no_routine_and_workouts_share_one():
    plan = Planner().build_plan(Profile(), BarHangGoal(days_per_week=3, max_hang_sec=60), None, NOW)
    workouts = [d for d in plan.days if d.kind == DayKind.WORKOUT]
    rests = [d for d in plan.days if d.kind == DayKind.REST]
    assert all(d.routine is None for d in rests)
    assert len({d.routine.id for d in workouts}) == 1
    assert len({tuple(e.name for e in d.routine.exercises) for d in workouts}) == 1


def test_no_plan_without_primary_goal():
    assert Planner().build_plan(Profile(), None, None, NOW) is None


def test_find_day_inside_and_outside_window():
    plan = Planner().build_plan(Profile(), GeneralGoal(days_per_week=3), None, NOW)
    assert plan.find_day("2026-10-17").kind == DayKind.WORKOUT
    assert plan.find_day("2026-10-18").kind == DayKind.REST
    assert plan.find_day("2026-10-30") is not None
    assert plan.find_day("2026-10-31") is None
    assert plan.find_day("2026-10-16") is None
