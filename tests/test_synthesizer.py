import pytest

from basement_fitness.models import (
    BarHangGoal,
    BuildMuscleGoal,
    Equipment,
    GoalType,
    Profile,
    PushupsGoal,
    RunFiveKGoal,
    SecondaryGoal,
    SecondaryGoalType,
)
from basement_fitness.synthesizer import Capabilities, exercise_cap, synthesize


def make_profile(*equipment, **overrides):
    base = {"duration_min": 30, "equipment": set(equipment) or {Equipment.BODYWEIGHT}}
    base.update(overrides)
    return Profile(**base)


def names(routine):
    return [e.name for e in routine.exercises]


def test_synthesize_is_deterministic_except_exercise_ids():
    profile = make_profile(Equipment.DUMBBELLS, Equipment.PULLUP_BAR)
    goal = BuildMuscleGoal(duration_min=45, days_per_week=4)
    first = synthesize(profile, goal, SecondaryGoal(type=SecondaryGoalType.MOBILITY))
    second = synthesize(profile, goal, SecondaryGoal(type=SecondaryGoalType.MOBILITY))

    assert first.id == second.id
    assert names(first) == names(second)
    assert {e.id for e in first.exercises}.isdisjoint({e.id for e in second.exercises})


def test_routine_id_uses_goal_duration_and_sorted_equipment():
    a = synthesize(make_profile(Equipment.DUMBBELLS, Equipment.BODYWEIGHT), BuildMuscleGoal(duration_min=45))
    b = synthesize(make_profile(Equipment.BODYWEIGHT, Equipment.DUMBBELLS), BuildMuscleGoal(duration_min=45))
    assert a.id == b.id == "gen:build_muscle:45:bodyweight+dumbbells"

    c = synthesize(make_profile(Equipment.BODYWEIGHT, Equipment.DUMBBELLS), BuildMuscleGoal(duration_min=30))
    assert c.id != a.id


EQUIPMENT_SETS = [
    (),
    (Equipment.DUMBBELLS, Equipment.PULLUP_BAR),
    (Equipment.BARBELL, Equipment.TREADMILL),
    (Equipment.BIKE,),
]


@pytest.mark.parametrize("duration,cap", [(15, 3), (20, 3), (30, 4), (45, 6), (90, 6)])
@pytest.mark.parametrize("goal_type", list(GoalType))
@pytest.mark.parametrize("equipment", EQUIPMENT_SETS)
def test_exercise_count_respects_duration_cap(duration, cap, goal_type, equipment):
    assert exercise_cap(duration) == cap
    profile = make_profile(*equipment, goal=goal_type, duration_min=duration)
    for secondary in (None, SecondaryGoal(type=SecondaryGoalType.STEPS)):
        routine = synthesize(profile, None, secondary)
        assert 1 <= len(routine.exercises) <= cap


def test_run_5k_is_truncated_at_cap():
    routine = synthesize(make_profile(), RunFiveKGoal(duration_min=45), SecondaryGoal(type=SecondaryGoalType.STEPS))
    assert len(routine.exercises) == 6
    assert "Cool-down Walk + Calf Stretch" not in names(routine)
    assert not any(n.startswith("Finisher") for n in names(routine))


def test_falls_back_to_profile_when_no_primary_goal():
    routine = synthesize(make_profile(goal=GoalType.PUSHUPS, duration_min=20))
    assert routine.id.startswith("gen:pushups:20:")
    assert len(routine.exercises) == 3


def test_defaults_without_profile():
    routine = synthesize(None)
    assert routine.id == "gen:general:30:bodyweight"
    assert len(routine.exercises) == 4


def test_primary_goal_duration_overrides_profile():
    routine = synthesize(make_profile(duration_min=60), BuildMuscleGoal(duration_min=15))
    assert routine.id.startswith("gen:build_muscle:15:")
    assert len(routine.exercises) == 3


def test_empty_equipment_falls_back_to_bodyweight():
    assert Profile(equipment=set()).equipment == {Equipment.BODYWEIGHT}


@pytest.mark.parametrize(
    "goal,sets,hold",
    [
        (BarHangGoal(max_hang_sec=100), 6, 60),
        (BarHangGoal(max_hang_sec=20), 5, 12),
        (BarHangGoal(max_hang_sec=10), 5, 10),
        (BarHangGoal(max_hang_sec=100, best_hang_sec=50), 5, 30),
        (BarHangGoal(), 5, 18),
    ],
)
def test_bar_hang_scales_from_baseline(goal, sets, hold):
    routine = synthesize(make_profile(Equipment.PULLUP_BAR), goal)
    hang = routine.exercises[0]
    assert hang.name == "Dead Hang"
    assert (hang.sets, hang.hold_sec) == (sets, hold)


def test_bar_hang_without_bar_keeps_scaled_hold():
    routine = synthesize(make_profile(), BarHangGoal(best_hang_sec=100))
    assert routine.exercises[0].name == "Towel Grip Isometric Hold"
    assert routine.exercises[0].hold_sec == 60


@pytest.mark.parametrize(
    "goal,reps",
    [
        (PushupsGoal(max_pushups=20), 12),
        (PushupsGoal(max_pushups=40, best_pushups=25), 15),
        (PushupsGoal(max_pushups=4), 3),
        (PushupsGoal(), 6),
    ],
)
def test_pushups_scale_from_baseline(goal, reps):
    routine = synthesize(make_profile(), goal)
    assert routine.exercises[0].name == "Push-ups"
    assert routine.exercises[0].reps == reps


def test_run_5k_branches_on_ability_and_treadmill():
    walk_run = synthesize(make_profile(), RunFiveKGoal(duration_min=45))
    assert "Run/Walk Intervals" in names(walk_run)

    treadmill = synthesize(make_profile(Equipment.TREADMILL), RunFiveKGoal(duration_min=45, can_run_10_min=True))
    assert "Treadmill Easy Continuous Run" in names(treadmill)


def test_build_muscle_prefers_barbell_and_adds_pullups():
    routine = synthesize(
        make_profile(Equipment.BARBELL, Equipment.DUMBBELLS, Equipment.PULLUP_BAR),
        BuildMuscleGoal(duration_min=60),
    )
    assert names(routine)[:3] == ["Back Squat", "Bench Press", "Pull-ups"]


def test_finisher_appended_below_cap():
    routine = synthesize(
        make_profile(),
        BarHangGoal(duration_min=45),
        SecondaryGoal(type=SecondaryGoalType.MOBILITY),
    )
    assert len(routine.exercises) == 6
    assert routine.exercises[-1].name == "Finisher: Mobility Flow"


def test_finisher_skipped_at_cap():
    routine = synthesize(
        make_profile(),
        BarHangGoal(duration_min=30),
        SecondaryGoal(type=SecondaryGoalType.STEPS),
    )
    assert len(routine.exercises) == 4
    assert not any(n.startswith("Finisher") for n in names(routine))


def test_zone2_finisher_needs_cardio_machine():
    secondary = SecondaryGoal(type=SecondaryGoalType.ZONE2)
    without = synthesize(make_profile(), BarHangGoal(duration_min=45), secondary)
    assert len(without.exercises) == 5

    with_bike = synthesize(make_profile(Equipment.BIKE), BarHangGoal(duration_min=45), secondary)
    assert with_bike.exercises[-1].name == "Finisher: Zone 2 Bike"


def test_capabilities_prefer_treadmill():
    caps = Capabilities.from_equipment(frozenset({Equipment.ROWER, Equipment.TREADMILL}))
    assert caps.wants_cardio_machine
    assert caps.cardio_machine == "Treadmill"
    assert not caps.has_pullup_bar
