from typing import Annotated
from pydantic import BaseModel, Field, StringConstraints, field_validator

from fitplan.schemas.plan import WorkoutLevel

Tag = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=80)]

class FitnessProfileData(BaseModel):
    """Questionnaire answers; every field may be left blank."""
    age: Annotated[int, Field(ge=1, le=120)] | None = None
    height: Annotated[int, Field(ge=1, le=300)] | None = None   # cm
    weight: Annotated[int, Field(ge=1, le=500)] | None = None   # kg
    gender: Annotated[str, Field(max_length=32)] | None = None
    fitness_level: WorkoutLevel | None = None
    goals: list[Tag] | None = None
    target_areas: list[Tag] | None = None
    limitations: list[Tag] | None = None
    workout_duration: Annotated[int, Field(ge=5, le=240)] | None = None   # minutes
    workout_frequency: Annotated[int, Field(ge=1, le=7)] | None = None    # sessions per week
    preferred_time: Annotated[str, Field(max_length=32)] | None = None

    model_config = {"from_attributes": True}

    @field_validator("fitness_level", mode="before")
    @classmethod
    def lower_level(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

class FitnessProfileRead(FitnessProfileData):
    id: str
    user_id: str
