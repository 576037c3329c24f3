import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from fitplan.db import get_db
from fitplan.deps.auth import get_current_user
from fitplan.errors import StorageError
from fitplan.models import User
from fitplan.repositories.plan_repo import PlanRepository
from fitplan.repositories.profile_repo import ProfileRepository
from fitplan.repositories.user_repo import UserRepository
from fitplan.schemas.user import UserLogin, UserRead, UserRegister, UserStatus
from fitplan.security import create_access_token, hash_password, verify_password

log = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register(payload: UserRegister, db: Session = Depends(get_db)):
    repo = UserRepository(db)
    if repo.get_by_email(payload.email):
        raise HTTPException(status_code=400, detail="email already registered")
    # the unique index catches a sign-up racing this check
    try:
        user = repo.create(
            email=payload.email,
            name=payload.name,
            password_hash=hash_password(payload.password),
        )
    except ValueError as e:
        if str(e) == "email_already_exists":
            raise HTTPException(status_code=400, detail="email already registered")
        raise
    log.info("registered user %s", user.id)
    return user

@router.post("/login")
def login(payload: UserLogin, db: Session = Depends(get_db)):
    user = UserRepository(db).get_by_email(payload.email)
    if not user or not verify_password(payload.password, user.password_hash):
        log.info("failed login for %s", payload.email)
        raise HTTPException(status_code=401, detail="invalid credentials")
    return {"access_token": create_access_token(sub=user.id), "token_type": "bearer"}

@router.get("/me", response_model=UserStatus)
def me(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Account details, whether onboarding produced a profile, and how many plans exist."""
    try:
        has_profile = ProfileRepository(db).get_by_user(current_user.id) is not None
        plan_count = PlanRepository(db).count_plans(current_user.id)
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return UserStatus(
        id=current_user.id,
        email=current_user.email,
        name=current_user.name,
        created_at=current_user.created_at,
        has_profile=has_profile,
        plan_count=plan_count,
    )
