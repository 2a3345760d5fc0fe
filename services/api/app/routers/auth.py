"""Auth API router.

Endpoints:
- POST /api/auth/register - Create account with default task templates, set session
- POST /api/auth/login - Verify credentials, set session
- POST /api/auth/logout - Clear session
- GET /api/auth/me - Current user or null
- PATCH /api/auth/me/challenge-start - Correct the challenge start date
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.security import create_session_token
from ..db import get_db
from ..deps import get_current_user, get_optional_user, get_today
from ..models import User
from ..schemas import (
    ChallengeStartUpdate,
    LoginRequest,
    RegisterRequest,
    UserEnvelope,
    UserOut,
)
from ..services.auth_service import (
    UsernameTaken,
    authenticate_user,
    register_user,
    set_challenge_start,
)
from ..settings import settings

router = APIRouter(prefix="/auth")
logger = logging.getLogger("daily.auth")


def _set_session_cookie(response: Response, user: User) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=create_session_token(user.id),
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        max_age=settings.session_max_age_days * 24 * 60 * 60,
    )


@router.post("/register", response_model=UserEnvelope)
def register(
    payload: RegisterRequest,
    response: Response,
    db: Session = Depends(get_db),
    today=Depends(get_today),
):
    """Register a user and log them in."""
    try:
        user = register_user(
            db,
            username=payload.username,
            password=payload.password,
            name=payload.name,
            challenge_start=settings.default_challenge_start or today,
        )
    except (UsernameTaken, IntegrityError):
        db.rollback()
        logger.warning("Registration rejected, username %s already taken", payload.username)
        raise HTTPException(status_code=409, detail="Username already exists")

    _set_session_cookie(response, user)
    return {"user": user}


@router.post("/login", response_model=UserEnvelope)
def login(
    payload: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
):
    user = authenticate_user(db, payload.username, payload.password)
    if not user:
        logger.warning("Failed login for %s", payload.username)
        raise HTTPException(status_code=401, detail="Invalid credentials")
    _set_session_cookie(response, user)
    return {"user": user}


@router.post("/logout")
def logout(response: Response):
    response.delete_cookie(settings.session_cookie_name)
    return {"ok": True}


@router.get("/me", response_model=UserEnvelope)
def me(user: Optional[User] = Depends(get_optional_user)):
    """Current user, or {"user": null} when there is no valid session."""
    return {"user": user}


@router.patch("/me/challenge-start", response_model=UserOut)
def update_challenge_start(
    payload: ChallengeStartUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    set_challenge_start(db, payload.challenge_start_date, user=user)
    db.refresh(user)
    logger.info("Challenge start for %s set to %s", user.username, user.challenge_start_date)
    return user
