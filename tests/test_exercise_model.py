from backend.exercise import Exercise, SetSpec, Workout


def test_exercise_from_legacy_dict():
    ex = Exercise.from_dict(
        {"id": 7, "name": "Push-up", "type": "Strength", "sets": "3", "reps": 12,
         "restTime": 45, "groupType": "group", "groupId": "ss"}
    )
    assert ex.id == "7"
    assert ex.kind == "strength"
    assert ex.sets == 3
    assert ex.reps == 12
    assert ex.rest_time_seconds == 45
    assert ex.group_type == "group"
    assert ex.group_id == "ss"
    assert ex.workout_config is None


def test_exercise_without_id_uses_position():
    ex = Exercise.from_dict({"name": "Plank"}, index=4)
    assert ex.id == "exercise-4"


def test_malformed_scalars_are_dropped():
    ex = Exercise.from_dict({"id": "1", "sets": "many", "reps": -5, "restTime": True})
    assert ex.sets is None
    assert ex.reps is None
    assert ex.rest_time_seconds is None


def test_set_spec_measurement_and_defaults():
    spec = SetSpec.from_dict({"time": 45}, default_reps=10, default_rest=30)
    assert spec.measurement == ("time", 45)
    assert spec.reps is None
    assert spec.rest_time_seconds == 30

    spec = SetSpec.from_dict({}, default_reps=10)
    assert spec.measurement == ("reps", 10)
    assert spec.rest_time_seconds == 60

    spec = SetSpec.from_dict({"distance": "400", "weight": 20, "restTimeSeconds": 15})
    assert spec.to_dict() == {"rest_time_seconds": 15, "distance": 400.0, "weight": 20.0}


def test_workout_from_dict_skips_non_mappings():
    workout = Workout.from_dict(
        {"id": 3, "name": "Legs", "exercises": [{"id": "a"}, None, "junk", {"id": "b"}]}
    )
    assert workout.id == "3"
    assert [ex.id for ex in workout.exercises] == ["a", "b"]


def test_descriptive_fields_are_carried():
    ex = Exercise.from_dict(
        {"id": "1", "description": "Slow descent", "equipment": " Barbell ", "difficulty": "Hard"}
    )
    assert ex.description == "Slow descent"
    assert ex.equipment == "Barbell"
    assert ex.difficulty == "hard"
