# fitplan/deps/auth.py
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from jose.exceptions import ExpiredSignatureError, JWTError

from fitplan.db import get_db
from fitplan.models import User
from fitplan.security import decode_token

# Exposes Bearer auth in Swagger; login endpoint issues the token
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")

def user_from_token(db: Session, token: str) -> Optional[User]:
    """Resolve a bearer token to its user; None when the token or user is invalid.

    Raises ExpiredSignatureError so HTTP callers can say why.
    """
    try:
        payload = decode_token(token)
    except ExpiredSignatureError:
        raise
    except JWTError:
        return None
    sub = payload.get("sub")
    if sub is None:
        return None
    return db.get(User, str(sub))

def get_current_user(
    db: Session = Depends(get_db),
    token: str = Depends(oauth2_scheme),
) -> User:
    unauth = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        user = user_from_token(db, token)
    except ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not user:
        raise unauth
    return user
