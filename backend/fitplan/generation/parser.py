"""
Extract a workout plan from the generation service's text response.

The model is asked for bare JSON but often wraps it in a markdown fence and
sometimes adds prose around it. Everything coming back is treated as
untrusted: the shape is validated field by field, ids are replaced with fresh
UUIDs and ``exerciseCount`` is recomputed from the parsed list.
"""
from __future__ import annotations

import json
import uuid
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from fitplan.errors import MalformedPlan
from fitplan.schemas.plan import ExerciseRead, WorkoutLevel, WorkoutPlanRead, WorkoutRead

JSON_FENCE = "```json"
FENCE = "```"

# bounded by the storage columns: 32-bit INTEGER, VARCHAR(200)
MAX_INT = 2**31 - 1
MAX_TITLE = 200

NonNegInt = Annotated[int, Field(ge=0, le=MAX_INT)]
PosInt = Annotated[int, Field(ge=1, le=MAX_INT)]
Title = Annotated[str, Field(max_length=MAX_TITLE)]


class _GeneratedExercise(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Title
    description: str
    sets: PosInt
    reps: NonNegInt
    duration: NonNegInt
    restTime: NonNegInt

    @model_validator(mode="after")
    def reps_match_kind(self):
        # timed exercises carry reps=1 by convention
        if self.duration > 0:
            self.reps = max(self.reps, 1)
        elif self.reps < 1:
            raise ValueError("rep-based exercise needs at least 1 rep")
        return self


class _GeneratedWorkout(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: Title
    description: str
    level: WorkoutLevel
    duration: NonNegInt
    caloriesBurn: NonNegInt
    exercises: Annotated[list[_GeneratedExercise], Field(min_length=1)]

    @field_validator("level", mode="before")
    @classmethod
    def lower_level(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class _GeneratedPlan(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: Title
    description: str
    workouts: Annotated[list[_GeneratedWorkout], Field(min_length=1)]


def extract_json_text(raw: str) -> str:
    """Return the fenced block if there is one, else the text itself."""
    if JSON_FENCE in raw:
        raw = raw.split(JSON_FENCE, 1)[1].split(FENCE, 1)[0]
    elif FENCE in raw:
        raw = raw.split(FENCE, 2)[1]
    return raw.strip()


def _field_path(loc: tuple) -> str:
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path


def _malformed(exc: ValidationError) -> MalformedPlan:
    err = exc.errors()[0]
    field = _field_path(err["loc"])
    if err["type"] == "missing":
        return MalformedPlan(f"missing required field '{field}'", field=field)
    if err["type"] == "too_short":
        return MalformedPlan(f"'{field}' must not be empty", field=field)
    return MalformedPlan(f"invalid value for '{field}': {err['msg']}", field=field)


def _new_id() -> str:
    return str(uuid.uuid4())


def parse_plan(raw_text: str) -> WorkoutPlanRead:
    """Parse and validate ``raw_text``; raise ``MalformedPlan`` on any problem."""
    try:
        data = json.loads(extract_json_text(raw_text))
    except json.JSONDecodeError as e:
        raise MalformedPlan(f"response is not valid JSON: {e.msg}") from e
    if not isinstance(data, dict):
        raise MalformedPlan("response JSON must be an object")

    try:
        generated = _GeneratedPlan.model_validate(data)
    except ValidationError as e:
        raise _malformed(e) from e

    workouts = []
    for w in generated.workouts:
        exercises = [
            ExerciseRead(
                id=_new_id(),
                name=e.name,
                description=e.description,
                sets=e.sets,
                reps=e.reps,
                duration=e.duration,
                rest_time=e.restTime,
            )
            for e in w.exercises
        ]
        workouts.append(WorkoutRead(
            id=_new_id(),
            title=w.title,
            description=w.description,
            duration=w.duration,
            level=w.level,
            exercise_count=len(exercises),
            calories_burn=w.caloriesBurn,
            exercises=exercises,
        ))
    return WorkoutPlanRead(
        id=_new_id(),
        title=generated.title,
        description=generated.description,
        workouts=workouts,
    )
