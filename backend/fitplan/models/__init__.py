from fitplan.models.user import User
from fitplan.models.fitness_profile import FitnessProfile
from fitplan.models.workout_plan import WorkoutPlan
from fitplan.models.workout import Workout
from fitplan.models.exercise import Exercise

__all__ = ["User", "FitnessProfile", "WorkoutPlan", "Workout", "Exercise"]
