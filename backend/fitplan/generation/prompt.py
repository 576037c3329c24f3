"""Turn a fitness profile into the prompt sent to the generation service."""
from fitplan.schemas.profile import FitnessProfileData

DEFAULT_DURATION = 30
DEFAULT_FREQUENCY = 3

_OUTPUT_SCHEMA = """{
  "title": "Plan title",
  "description": "Plan description",
  "workouts": [
    {
      "title": "Workout title",
      "description": "Workout description",
      "level": "beginner/intermediate/advanced",
      "duration": 30,
      "caloriesBurn": 300,
      "exercises": [
        {
          "name": "Exercise name",
          "description": "Exercise description",
          "sets": 3,
          "reps": 10,
          "duration": 0,
          "restTime": 30
        }
      ]
    }
  ]
}"""


def _joined(values, fallback: str) -> str:
    return ", ".join(values or []) or fallback


def profile_fields(profile: FitnessProfileData) -> dict:
    """Profile values as they appear in the prompt, blanks replaced by fallbacks."""
    level = profile.fitness_level.value if profile.fitness_level else "beginner"
    return {
        "age": profile.age or "unknown",
        "height": profile.height or "unknown",
        "weight": profile.weight or "unknown",
        "fitness_level": level,
        "goals": _joined(profile.goals, "general fitness"),
        "workout_duration": profile.workout_duration or DEFAULT_DURATION,
        "workout_frequency": profile.workout_frequency or DEFAULT_FREQUENCY,
        "limitations": _joined(profile.limitations, "none"),
        "target_areas": _joined(profile.target_areas, "full body"),
    }


def build_plan_prompt(profile: FitnessProfileData) -> str:
    f = profile_fields(profile)
    return f"""Generate a detailed, personalized workout plan for a person with the following characteristics:
- Age: {f["age"]}
- Height: {f["height"]} cm
- Weight: {f["weight"]} kg
- Fitness Level: {f["fitness_level"]}
- Goals: {f["goals"]}
- Preferred Workout Duration: {f["workout_duration"]} minutes per session
- Workout Frequency: {f["workout_frequency"]} times per week
- Physical Limitations: {f["limitations"]}
- Target Areas: {f["target_areas"]}

The workout plan should include:
1. A title for the overall workout plan
2. A brief description of the plan (1-2 sentences)
3. Exactly {f["workout_frequency"]} different workouts, each with:
   - A unique title
   - A short description
   - Appropriate difficulty level (beginner, intermediate, or advanced)
   - Duration in minutes (around {f["workout_duration"]} minutes)
   - Estimated calories burned
   - 4-8 exercises per workout with:
     - Exercise name
     - Brief description of how to perform it
     - Number of sets
     - Number of reps or duration in seconds
     - Rest time between sets in seconds

Format your response as a JSON object following this structure:
{_OUTPUT_SCHEMA}

Important:
- For strength exercises, use reps (e.g., 10 reps) and set duration to 0
- For timed exercises, use duration in seconds (e.g., 30 seconds) and set reps to 1
- Make sure the exercises are appropriate for the person's fitness level and limitations
- Include proper warm-up and cool-down exercises
- Vary the exercises to target different muscle groups based on the goals
- Only include the JSON in your response, nothing else
"""
