from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

class WorkoutLevel(str, Enum):
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"

# JSON uses camelCase (restTime, exerciseCount, caloriesBurn); attributes stay snake_case
_wire = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

class ExerciseRead(BaseModel):
    model_config = _wire

    id: str
    name: str
    description: str | None = None
    sets: int = Field(ge=1)
    reps: int = Field(ge=1)
    duration: int = Field(ge=0)
    rest_time: int = Field(ge=0)

    @property
    def is_timed(self) -> bool:
        return self.duration > 0

class WorkoutRead(BaseModel):
    model_config = _wire

    id: str
    title: str
    description: str | None = None
    duration: int
    level: WorkoutLevel
    exercise_count: int
    calories_burn: int
    exercises: list[ExerciseRead] = []

class WorkoutPlanRead(BaseModel):
    model_config = _wire

    id: str
    title: str
    description: str | None = None
    workouts: list[WorkoutRead]
