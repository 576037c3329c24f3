"""
Point the app at an in-memory SQLite database before anything imports it,
create the schema once, and provide sample generation-service output.
"""
import json
import os

os.environ.setdefault("DB_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("GEMINI_API_KEY", "test-key")

import pytest

from fitplan.db import Base, engine
from fitplan import models  # noqa: F401

Base.metadata.create_all(bind=engine)


def _exercise(name, *, sets=3, reps=10, duration=0, rest=30):
    return {
        "name": name,
        "description": f"How to do {name.lower()}",
        "sets": sets,
        "reps": reps,
        "duration": duration,
        "restTime": rest,
    }


def _plan(workouts=2):
    return {
        "title": "Four Week Foundation",
        "description": "Builds general strength and conditioning.",
        "workouts": [
            {
                "title": f"Day {i + 1}",
                "description": "Full body session",
                "level": "beginner",
                "duration": 30,
                "caloriesBurn": 250,
                "exercises": [
                    _exercise("Jumping Jacks", sets=1, reps=1, duration=60, rest=0),
                    _exercise("Squats"),
                    _exercise("Push-ups", sets=2, reps=8, rest=45),
                    _exercise("Plank", sets=2, reps=1, duration=30, rest=20),
                ],
            }
            for i in range(workouts)
        ],
    }


@pytest.fixture
def plan_dict():
    """Factory for a valid plan as the model would return it."""
    return _plan


@pytest.fixture
def plan_text(plan_dict):
    """A valid plan wrapped the way the model usually answers."""
    body = json.dumps(plan_dict(), indent=2)
    return f"Here is your plan!\n```json\n{body}\n```\nStay hydrated."
