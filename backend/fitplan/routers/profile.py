from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from fitplan.db import get_db
from fitplan.deps.auth import get_current_user
from fitplan.errors import StorageError
from fitplan.models import User
from fitplan.repositories.profile_repo import ProfileRepository
from fitplan.schemas.profile import FitnessProfileData, FitnessProfileRead

router = APIRouter(prefix="/profile", tags=["profile"])

@router.get("", response_model=FitnessProfileRead)
def get_my_profile(db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    profile = ProfileRepository(db).get_by_user(current.id)
    if not profile:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Fitness profile not found")
    return profile

@router.put("", response_model=FitnessProfileRead)
def put_my_profile(
    payload: FitnessProfileData,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    try:
        return ProfileRepository(db).upsert(current.id, payload)
    except StorageError:
        raise HTTPException(status_code=500, detail="There was an error saving your fitness profile.")
