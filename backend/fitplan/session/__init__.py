from fitplan.session.clock import AsyncioClock, ManualClock
from fitplan.session.engine import SessionState, WorkoutSessionEngine

__all__ = ["AsyncioClock", "ManualClock", "SessionState", "WorkoutSessionEngine"]
