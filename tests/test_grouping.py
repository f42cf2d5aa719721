from backend.exercise import Exercise, SetSpec
from backend.grouping import SUPERSET, normalize_and_group, normalize_exercise


def _ids(groups):
    return [group.exercise_ids for group in groups]


def test_empty_input():
    assert normalize_and_group([]) == []
    assert normalize_and_group(None) == []


def test_legacy_sets_are_synthesised():
    ex = normalize_exercise({"id": "1", "name": "Squat", "sets": 3, "reps": 10, "restTimeSeconds": 30})
    assert ex.workout_config.kind == "single"
    assert ex.sets == (SetSpec(rest_time_seconds=30, reps=10),) * 3


def test_missing_set_count_falls_back_to_one_default_set():
    ex = normalize_exercise({"id": "1", "name": "Plank"})
    assert len(ex.sets) == 1
    assert ex.sets[0].rest_time_seconds == 60

    ex = normalize_exercise({"id": "2", "sets": 0}, default_rest_seconds=45)
    assert ex.sets == (SetSpec(rest_time_seconds=45),)


def test_empty_config_sets_use_legacy_fields():
    ex = normalize_exercise(
        {"id": "1", "sets": 2, "reps": 5, "restTime": 20, "workoutConfig": {"type": "single", "sets": []}}
    )
    assert ex.sets == (SetSpec(rest_time_seconds=20, reps=5),) * 2


def test_config_sets_inherit_legacy_rest():
    ex = normalize_exercise(
        {"id": "1", "restTime": 75, "workoutConfig": {"sets": [{"reps": 8}, {"reps": 6, "restTime": 30}]}}
    )
    assert [s.rest_time_seconds for s in ex.sets] == [75, 30]
    assert [s.reps for s in ex.sets] == [8, 6]


def test_group_without_id_is_single():
    ex = normalize_exercise({"id": "1", "workoutConfig": {"type": "group", "sets": [{"reps": 1}]}})
    assert ex.workout_config.kind == "single"
    assert ex.group_id is None
    assert not ex.is_group_member


def test_config_kind_wins_over_legacy_flag():
    ex = normalize_exercise(
        {"id": "1", "groupType": "group", "groupId": "g", "workoutConfig": {"type": "single", "sets": [{}]}}
    )
    assert not ex.is_group_member


def test_grouping_keeps_first_appearance_order(single, member):
    exercises = [
        single("a"),
        member("x", "g1"),
        single("b"),
        member("y", "g1"),
        member("p", "g2"),
        member("z", "g1"),
        member("q", "g2"),
    ]
    groups = normalize_and_group(exercises)
    assert _ids(groups) == [["a"], ["x", "y", "z"], ["b"], ["p", "q"]]
    assert [g.kind for g in groups] == ["single", SUPERSET, "single", SUPERSET]


def test_superset_members_know_their_position(member):
    groups = normalize_and_group([member("x", "g"), member("y", "g"), member("z", "g")])
    (group,) = groups
    configs = [ex.workout_config for ex in group.exercises]
    assert [c.position_in_group for c in configs] == [0, 1, 2]
    assert [c.is_last_in_group for c in configs] == [False, False, True]
    assert all(c.group_exercises == group.exercises for c in configs)


def test_singles_have_no_group_position(single):
    (group,) = normalize_and_group([single("a")])
    config = group.exercises[0].workout_config
    assert config.position_in_group is None
    assert config.is_last_in_group is None


def test_partition_property(legacy_exercises, single, member):
    exercises = legacy_exercises + [single("5"), member("6", "lonely"), {"name": "no id"}]
    groups = normalize_and_group(exercises)
    flat = [ex_id for group in groups for ex_id in group.exercise_ids]
    assert sum(len(group) for group in groups) == len(exercises)
    assert len(flat) == len(set(flat))
    assert {"1", "2", "3", "4", "5", "6"} <= set(flat)
    # singles plus distinct group ids
    assert len(groups) == 4 + 2


def test_single_member_superset_is_kept(member):
    (group,) = normalize_and_group([member("x", "solo")])
    assert group.kind == SUPERSET
    assert group.exercises[0].is_last_in_group


def test_legacy_group_fields(legacy_exercises):
    groups = normalize_and_group(legacy_exercises)
    assert _ids(groups) == [["1"], ["2", "3"], ["4"]]
    bench = groups[1].exercises[0]
    assert bench.sets == (SetSpec(rest_time_seconds=60, reps=12),) * 2


def test_duplicate_ids_are_made_unique(single):
    groups = normalize_and_group([single("a"), single("a"), single("a")])
    assert _ids(groups) == [["a"], ["a#2"], ["a#3"]]


def test_accepts_exercise_objects():
    groups = normalize_and_group([Exercise(id="e", name="Row", sets=2, reps=8)])
    assert groups[0].exercises[0].name == "Row"
    assert groups[0].exercises[0].total_sets == 2


def test_input_is_not_mutated(member):
    raw = member("x", "g")
    before = repr(raw)
    normalize_and_group([raw])
    assert repr(raw) == before


def test_infinite_numbers_degrade_to_defaults():
    groups = normalize_and_group(
        [{"id": "a", "sets": "1e400", "reps": float("inf"), "restTime": "inf"}]
    )
    ex = groups[0].exercises[0]
    assert ex.sets == (SetSpec(rest_time_seconds=60),)


def test_descriptive_fields_survive_normalisation():
    ex = normalize_exercise({"id": "1", "sets": 1, "equipment": "Kettlebell", "difficulty": "easy"})
    assert (ex.equipment, ex.difficulty) == ("Kettlebell", "easy")
