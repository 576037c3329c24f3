"""
Live workout session state machine.

One engine walks once through an ordered list of exercises::

    awaiting_set_start --start_timer--> exercise_timer_running --(elapsed)--+
           ^   |                                                          |
           |   +--complete_set (rep-based)-------------------------------+
           |                                                          set done
           +---(rest elapsed / skip_rest)--- resting <--- more sets ------+
                                                       next exercise -> awaiting_set_start
                                                       last set of last exercise -> completed

Ticks come from a ``Clock``; without one the caller advances time with
``tick()``. The exercise tick and the rest tick are never active together,
and every tick handle is cancelled on stop, elapse, skip, completion and close.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional, Sequence

from fitplan.errors import InvalidTransition
from fitplan.schemas.plan import ExerciseRead
from fitplan.session.clock import Clock, TickHandle

log = logging.getLogger(__name__)


class SessionState(str, Enum):
    awaiting_set_start = "awaiting_set_start"
    exercise_timer_running = "exercise_timer_running"
    resting = "resting"
    completed = "completed"


class WorkoutSessionEngine:
    def __init__(
        self,
        exercises: Sequence[ExerciseRead],
        *,
        on_complete: Optional[Callable[[], None]] = None,
        on_change: Optional[Callable[["WorkoutSessionEngine"], None]] = None,
        clock: Optional[Clock] = None,
        tick_seconds: float = 1.0,
    ):
        if not exercises:
            raise ValueError("a session needs at least one exercise")
        self.exercises = list(exercises)
        self.on_complete = on_complete
        self.on_change = on_change
        self.clock = clock
        self.tick_seconds = tick_seconds

        self.state = SessionState.awaiting_set_start
        self.exercise_index = 0
        self.current_set = 1
        self.rest_remaining = 0
        self.exercise_remaining = 0
        self.closed = False

        self._rest_tick: Optional[TickHandle] = None
        self._exercise_tick: Optional[TickHandle] = None
        self._rest_running = False
        self._exercise_running = False

    # --- read side -------------------------------------------------------

    @property
    def current_exercise(self) -> ExerciseRead:
        return self.exercises[self.exercise_index]

    @property
    def total_exercises(self) -> int:
        return len(self.exercises)

    @property
    def is_resting(self) -> bool:
        return self.state is SessionState.resting

    @property
    def rest_timer_running(self) -> bool:
        return self._rest_running

    @property
    def exercise_timer_running(self) -> bool:
        return self._exercise_running

    @property
    def finished(self) -> bool:
        return self.closed or self.state is SessionState.completed

    @property
    def progress(self) -> float:
        """Percent done, blending finished exercises with finished sets of the current one."""
        if self.state is SessionState.completed:
            return 100.0
        total = self.total_exercises
        return (100 * self.exercise_index / total
                + 100 * (self.current_set - 1) / self.current_exercise.sets / total)

    def snapshot(self) -> dict:
        return {
            "state": self.state.value,
            "exerciseIndex": self.exercise_index,
            "currentSet": self.current_set,
            "totalExercises": self.total_exercises,
            "exercise": self.current_exercise.model_dump(by_alias=True),
            "restRemaining": self.rest_remaining,
            "exerciseRemaining": self.exercise_remaining,
            "restTimerRunning": self._rest_running,
            "exerciseTimerRunning": self._exercise_running,
            "progress": round(self.progress, 2),
        }

    # --- mutators --------------------------------------------------------

    def start_timer(self) -> None:
        """Start the countdown for a timed exercise."""
        self._require(SessionState.awaiting_set_start, "start the exercise timer")
        ex = self.current_exercise
        if not ex.is_timed:
            raise InvalidTransition(f"'{ex.name}' is rep-based and has no timer")
        self.state = SessionState.exercise_timer_running
        self.exercise_remaining = ex.duration
        self._exercise_running = True
        self._exercise_tick = self._schedule(self._on_exercise_tick)
        self._changed()

    def complete_set(self) -> None:
        """User signals the current set of a rep-based exercise is done."""
        self._require(SessionState.awaiting_set_start, "complete a set")
        ex = self.current_exercise
        if ex.is_timed:
            raise InvalidTransition(f"'{ex.name}' is timed; its sets complete when the timer runs out")
        self._set_complete()

    def skip_rest(self) -> None:
        self._require(SessionState.resting, "skip rest")
        self._stop_rest()
        self.state = SessionState.awaiting_set_start
        self._changed()

    def tick(self) -> None:
        """Advance whichever timer is running by one tick."""
        if self._exercise_running:
            self._on_exercise_tick()
        elif self._rest_running:
            self._on_rest_tick()

    def close(self) -> None:
        """Tear the session down from any state. Nothing is recorded."""
        self._stop_exercise_timer()
        self._stop_rest()
        self.closed = True

    # --- internals -------------------------------------------------------

    def _require(self, state: SessionState, action: str) -> None:
        if self.closed:
            raise InvalidTransition("session is closed")
        if self.state is not state:
            raise InvalidTransition(f"cannot {action} while {self.state.value}")

    def _schedule(self, callback) -> Optional[TickHandle]:
        if self.clock is None:
            return None
        return self.clock.schedule_interval(callback, self.tick_seconds)

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change(self)

    def _on_exercise_tick(self) -> None:
        if self.closed or not self._exercise_running:
            return
        self.exercise_remaining -= 1
        if self.exercise_remaining > 0:
            self._changed()
            return
        self.exercise_remaining = 0
        self._stop_exercise_timer()
        self._set_complete()

    def _on_rest_tick(self) -> None:
        if self.closed or not self._rest_running:
            return
        self.rest_remaining -= 1
        if self.rest_remaining > 0:
            self._changed()
            return
        self._stop_rest()
        self.state = SessionState.awaiting_set_start
        self._changed()

    def _set_complete(self) -> None:
        ex = self.current_exercise
        if self.current_set < ex.sets:
            self.current_set += 1
            self._start_rest(ex.rest_time)
        elif self.exercise_index < self.total_exercises - 1:
            self.exercise_index += 1
            self.current_set = 1
            self.state = SessionState.awaiting_set_start
        else:
            self._complete()
            return
        self._changed()

    def _start_rest(self, seconds: int) -> None:
        if seconds <= 0:
            self.state = SessionState.awaiting_set_start
            return
        self.state = SessionState.resting
        self.rest_remaining = seconds
        self._rest_running = True
        self._rest_tick = self._schedule(self._on_rest_tick)

    def _complete(self) -> None:
        self._stop_exercise_timer()
        self._stop_rest()
        self.state = SessionState.completed
        log.debug("session completed after %d exercises", self.total_exercises)
        self._changed()
        if self.on_complete is not None:
            self.on_complete()

    def _stop_exercise_timer(self) -> None:
        self._exercise_running = False
        if self._exercise_tick is not None:
            self._exercise_tick.cancel()
            self._exercise_tick = None

    def _stop_rest(self) -> None:
        self._rest_running = False
        self.rest_remaining = 0
        if self._rest_tick is not None:
            self._rest_tick.cancel()
            self._rest_tick = None
