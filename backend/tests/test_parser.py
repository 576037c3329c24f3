import json

import pytest

from fitplan.errors import MalformedPlan
from fitplan.generation.parser import extract_json_text, parse_plan


def _all_ids(plan):
    ids = [plan.id]
    for w in plan.workouts:
        ids.append(w.id)
        ids.extend(e.id for e in w.exercises)
    return ids


def test_fenced_json_ignores_surrounding_prose(plan_text):
    plan = parse_plan(plan_text)
    assert plan.title == "Four Week Foundation"
    assert len(plan.workouts) == 2
    assert [e.name for e in plan.workouts[0].exercises] == ["Jumping Jacks", "Squats", "Push-ups", "Plank"]


def test_generic_fence(plan_dict):
    text = "```\n" + json.dumps(plan_dict()) + "\n```"
    assert parse_plan(text).title == "Four Week Foundation"


def test_unfenced_json(plan_dict):
    assert parse_plan(json.dumps(plan_dict(workouts=1))).workouts[0].title == "Day 1"


def test_json_fence_wins_over_an_earlier_generic_fence(plan_dict):
    text = "```\nnot this\n```\n```json\n" + json.dumps(plan_dict()) + "\n```"
    assert extract_json_text(text).startswith("{")
    assert parse_plan(text).workouts


def test_extract_without_fence_returns_text_stripped():
    assert extract_json_text("  {\"a\": 1}\n") == "{\"a\": 1}"


def test_every_entity_gets_a_distinct_uuid(plan_text):
    plan = parse_plan(plan_text)
    ids = _all_ids(plan)
    assert all(len(i) == 36 for i in ids)
    assert len(set(ids)) == len(ids)


def test_source_ids_and_counts_are_not_trusted(plan_dict):
    data = plan_dict(workouts=1)
    data["id"] = "plan-from-model"
    data["workouts"][0]["id"] = "w1"
    data["workouts"][0]["exerciseCount"] = 99
    data["workouts"][0]["exercises"][0]["id"] = "e1"
    plan = parse_plan(json.dumps(data))
    assert plan.id != "plan-from-model"
    assert plan.workouts[0].id != "w1"
    assert plan.workouts[0].exercises[0].id != "e1"
    assert plan.workouts[0].exercise_count == 4


def test_parsing_twice_gives_new_ids(plan_text):
    assert not set(_all_ids(parse_plan(plan_text))) & set(_all_ids(parse_plan(plan_text)))


def test_exercise_fields_are_mapped(plan_text):
    plank = parse_plan(plan_text).workouts[0].exercises[3]
    assert (plank.sets, plank.reps, plank.duration, plank.rest_time) == (2, 1, 30, 20)
    assert plank.is_timed


def test_wire_format_is_camel_case(plan_text):
    dumped = parse_plan(plan_text).model_dump(by_alias=True)
    workout = dumped["workouts"][0]
    assert workout["exerciseCount"] == 4
    assert workout["caloriesBurn"] == 250
    assert workout["exercises"][1]["restTime"] == 30


def test_missing_exercise_field_is_named(plan_dict):
    data = plan_dict()
    del data["workouts"][1]["exercises"][2]["sets"]
    with pytest.raises(MalformedPlan) as exc:
        parse_plan(json.dumps(data))
    assert exc.value.field == "workouts[1].exercises[2].sets"
    assert "sets" in str(exc.value)


@pytest.mark.parametrize("field", ["title", "description", "workouts"])
def test_missing_plan_field(plan_dict, field):
    data = plan_dict()
    del data[field]
    with pytest.raises(MalformedPlan) as exc:
        parse_plan(json.dumps(data))
    assert exc.value.field == field


@pytest.mark.parametrize("field", ["title", "description", "level", "duration", "caloriesBurn", "exercises"])
def test_missing_workout_field(plan_dict, field):
    data = plan_dict(workouts=1)
    del data["workouts"][0][field]
    with pytest.raises(MalformedPlan) as exc:
        parse_plan(json.dumps(data))
    assert exc.value.field == f"workouts[0].{field}"


def test_empty_workout_list_rejected(plan_dict):
    data = plan_dict()
    data["workouts"] = []
    with pytest.raises(MalformedPlan, match="must not be empty"):
        parse_plan(json.dumps(data))


def test_empty_exercise_list_rejected(plan_dict):
    data = plan_dict()
    data["workouts"][0]["exercises"] = []
    with pytest.raises(MalformedPlan) as exc:
        parse_plan(json.dumps(data))
    assert exc.value.field == "workouts[0].exercises"


def test_invalid_json_rejected():
    with pytest.raises(MalformedPlan, match="not valid JSON"):
        parse_plan("```json\n{\"title\": \"oops\",\n```")


def test_top_level_array_rejected():
    with pytest.raises(MalformedPlan):
        parse_plan("[1, 2, 3]")


def test_zero_sets_rejected(plan_dict):
    data = plan_dict()
    data["workouts"][0]["exercises"][1]["sets"] = 0
    with pytest.raises(MalformedPlan) as exc:
        parse_plan(json.dumps(data))
    assert exc.value.field == "workouts[0].exercises[1].sets"


def test_level_is_case_insensitive(plan_dict):
    data = plan_dict()
    data["workouts"][0]["level"] = " Advanced "
    assert parse_plan(json.dumps(data)).workouts[0].level.value == "advanced"


def test_unknown_level_rejected(plan_dict):
    data = plan_dict()
    data["workouts"][0]["level"] = "elite"
    with pytest.raises(MalformedPlan):
        parse_plan(json.dumps(data))


def test_timed_exercise_with_zero_reps_gets_one_rep(plan_dict):
    data = plan_dict()
    data["workouts"][0]["exercises"][0]["reps"] = 0
    assert parse_plan(json.dumps(data)).workouts[0].exercises[0].reps == 1


def test_rep_based_exercise_with_zero_reps_rejected(plan_dict):
    data = plan_dict()
    data["workouts"][0]["exercises"][1]["reps"] = 0
    with pytest.raises(MalformedPlan):
        parse_plan(json.dumps(data))


@pytest.mark.parametrize("field", ["restTime", "sets", "duration"])
def test_oversized_exercise_number_rejected(plan_dict, field):
    data = plan_dict()
    data["workouts"][0]["exercises"][1][field] = 2**70
    with pytest.raises(MalformedPlan) as exc:
        parse_plan(json.dumps(data))
    assert exc.value.field == f"workouts[0].exercises[1].{field}"


def test_oversized_calories_rejected(plan_dict):
    data = plan_dict()
    data["workouts"][1]["caloriesBurn"] = 2**31
    with pytest.raises(MalformedPlan) as exc:
        parse_plan(json.dumps(data))
    assert exc.value.field == "workouts[1].caloriesBurn"


def test_largest_column_value_accepted(plan_dict):
    data = plan_dict()
    data["workouts"][0]["exercises"][1]["restTime"] = 2**31 - 1
    assert parse_plan(json.dumps(data)).workouts[0].exercises[1].rest_time == 2**31 - 1


@pytest.mark.parametrize("path", ["plan", "workout", "exercise"])
def test_oversized_titles_rejected(plan_dict, path):
    data = plan_dict()
    if path == "plan":
        data["title"], field = "x" * 5000, "title"
    elif path == "workout":
        data["workouts"][0]["title"], field = "x" * 201, "workouts[0].title"
    else:
        data["workouts"][0]["exercises"][0]["name"], field = "x" * 201, "workouts[0].exercises[0].name"
    with pytest.raises(MalformedPlan, match="invalid value") as exc:
        parse_plan(json.dumps(data))
    assert exc.value.field == field
