"""
Plan persistence: plan -> workouts -> exercises as three related tables.

Ids come from the generation pipeline, so a plan keeps the same ids after it
is saved. ``save`` writes parent rows before children. By default each row is
committed as soon as it is written, so a failure partway leaves the rows
already written in place; pass ``atomic=True`` to write the whole hierarchy
in a single transaction instead.
"""
from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from fitplan.errors import NotFound, StorageError
from fitplan.models import Exercise, Workout, WorkoutPlan
from fitplan.repositories.base import BaseRepository
from fitplan.schemas.plan import ExerciseRead, WorkoutPlanRead, WorkoutRead

log = logging.getLogger(__name__)


def _exercise_read(row: Exercise) -> ExerciseRead:
    return ExerciseRead(
        id=row.id,
        name=row.name,
        description=row.description,
        sets=row.sets,
        reps=row.reps,
        duration=row.duration,
        rest_time=row.rest_time,
    )


def _workout_read(row: Workout, exercises: list[Exercise] | None = None) -> WorkoutRead:
    return WorkoutRead(
        id=row.id,
        title=row.title,
        description=row.description,
        duration=row.duration,
        level=row.level,
        exercise_count=row.exercise_count,
        calories_burn=row.calories_burn,
        exercises=[_exercise_read(e) for e in exercises or []],
    )


class PlanRepository(BaseRepository[WorkoutPlan]):
    model = WorkoutPlan

    # WRITES
    def save(self, plan: WorkoutPlanRead, user_id: str, *, atomic: bool = False) -> None:
        rows = self._rows(plan, user_id)
        try:
            for row in rows:
                self.db.add(row)
                if atomic:
                    self.db.flush()
                else:
                    self.db.commit()
            if atomic:
                self.db.commit()
        except (SQLAlchemyError, OverflowError) as e:
            self.db.rollback()
            log.error("saving plan %s failed at %s %s: %s",
                      plan.id, type(row).__name__, row.id, e)
            raise StorageError("failed to save workout plan") from e
        log.info("saved plan %s (%d workouts) for user %s", plan.id, len(plan.workouts), user_id)

    @staticmethod
    def _rows(plan: WorkoutPlanRead, user_id: str) -> list:
        rows: list = [WorkoutPlan(id=plan.id, user_id=user_id, title=plan.title, description=plan.description)]
        for w_pos, w in enumerate(plan.workouts):
            rows.append(Workout(
                id=w.id,
                plan_id=plan.id,
                position=w_pos,
                title=w.title,
                description=w.description,
                duration=w.duration,
                level=w.level.value,
                exercise_count=len(w.exercises),
                calories_burn=w.calories_burn,
            ))
            for e_pos, e in enumerate(w.exercises):
                rows.append(Exercise(
                    id=e.id,
                    workout_id=w.id,
                    position=e_pos,
                    name=e.name,
                    description=e.description,
                    sets=e.sets,
                    reps=e.reps,
                    duration=e.duration,
                    rest_time=e.rest_time,
                ))
        return rows

    # READS
    def list_workouts(self, user_id: str) -> list[WorkoutRead]:
        """Workouts of every plan the user owns; exercises are left out of list views."""
        stmt = (
            select(Workout)
            .join(WorkoutPlan, Workout.plan_id == WorkoutPlan.id)
            .where(WorkoutPlan.user_id == user_id)
            .order_by(WorkoutPlan.created_at.asc(), WorkoutPlan.id.asc(), Workout.position.asc())
        )
        with self.storage_errors("listing workouts"):
            rows = self.db.execute(stmt).scalars().all()
        return [_workout_read(w) for w in rows]

    def get_workout_detail(self, workout_id: str) -> WorkoutRead:
        with self.storage_errors("loading workout"):
            workout = self.db.get(Workout, workout_id)
            if workout is None:
                raise NotFound("Workout not found")
            stmt = select(Exercise).where(Exercise.workout_id == workout_id).order_by(Exercise.position.asc())
            exercises = list(self.db.execute(stmt).scalars().all())
        return _workout_read(workout, exercises)

    def owner_of_workout(self, workout_id: str) -> str | None:
        stmt = (
            select(WorkoutPlan.user_id)
            .join(Workout, Workout.plan_id == WorkoutPlan.id)
            .where(Workout.id == workout_id)
        )
        with self.storage_errors("loading workout owner"):
            return self.db.execute(stmt).scalar_one_or_none()

    def count_plans(self, user_id: str) -> int:
        stmt = select(func.count()).select_from(WorkoutPlan).where(WorkoutPlan.user_id == user_id)
        with self.storage_errors("counting plans"):
            return self.db.execute(stmt).scalar_one()
