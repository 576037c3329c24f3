from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from fitplan.db import get_db
from fitplan.deps.auth import get_current_user
from fitplan.errors import NotFound, StorageError
from fitplan.models import User
from fitplan.repositories.plan_repo import PlanRepository
from fitplan.schemas.plan import WorkoutRead

router = APIRouter(prefix="/workouts", tags=["workouts"])

@router.get("", response_model=list[WorkoutRead])
def list_my_workouts(db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    try:
        return PlanRepository(db).list_workouts(current.id)
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to load your workouts.")

@router.get("/{workout_id}", response_model=WorkoutRead)
def get_workout(workout_id: str, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    repo = PlanRepository(db)
    try:
        # someone else's workout looks the same as a missing one
        if repo.owner_of_workout(workout_id) != current.id:
            raise NotFound("Workout not found")
        return repo.get_workout_detail(workout_id)
    except NotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Workout not found")
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to load workout details.")
