import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from fitplan.db import get_db
from fitplan.deps.auth import get_current_user
from fitplan.errors import GenerationInProgress, MalformedPlan, ServiceUnavailable, StorageError
from fitplan.generation import InFlightGuard, PlanGenerationClient
from fitplan.models import User
from fitplan.repositories.plan_repo import PlanRepository
from fitplan.repositories.profile_repo import ProfileRepository
from fitplan.schemas.plan import WorkoutPlanRead
from fitplan.schemas.profile import FitnessProfileData
from fitplan.settings import Settings, get_settings

log = logging.getLogger(__name__)

router = APIRouter(prefix="/plans", tags=["plans"])

# one generation per user at a time
in_flight = InFlightGuard()

def get_generation_client() -> PlanGenerationClient:
    return PlanGenerationClient(get_settings())

@router.post("/generate", response_model=WorkoutPlanRead, status_code=status.HTTP_201_CREATED)
def generate_plan(
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    client: PlanGenerationClient = Depends(get_generation_client),
    settings: Settings = Depends(get_settings),
):
    try:
        profile = ProfileRepository(db).get_by_user(current.id)
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to load your fitness profile.")
    if not profile:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Fitness profile not found")

    # nothing is written until the plan has been fully parsed
    try:
        with in_flight.claim(current.id):
            plan = client.generate(FitnessProfileData.model_validate(profile))
    except GenerationInProgress:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT,
                            detail="A workout plan is already being generated. Please wait.")
    except ServiceUnavailable as e:
        log.warning("plan generation unavailable for user %s: %s", current.id, e)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                            detail="Failed to generate workout plan. Please try again.")
    except MalformedPlan as e:
        log.warning("malformed plan for user %s: %s", current.id, e)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY,
                            detail=f"The generated workout plan was unusable: {e}")

    try:
        PlanRepository(db).save(plan, current.id, atomic=settings.PLAN_SAVE_ATOMIC)
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to save workout plan. Please try again.")
    return plan
