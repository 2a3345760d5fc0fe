"""FastAPI dependencies for the daily challenge API.

Provides:
- Database session dependency
- Current user resolution (session cookie -> user id -> User)
- "Today" in the configured timezone, so handlers never read the clock themselves
"""

import logging
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from .core.security import decode_session_token
from .db import get_db
from .models import User
from .settings import settings

logger = logging.getLogger("daily.auth")

__all__ = ["get_db", "get_current_user_id", "get_current_user", "get_optional_user", "get_today"]


def _session_user_id(request: Request) -> Optional[str]:
    token = request.cookies.get(settings.session_cookie_name)
    if not token:
        return None
    return decode_session_token(token)


def get_current_user_id(request: Request) -> str:
    """Resolve the caller's user id from the session cookie.

    Raises:
        HTTPException 401 if the cookie is missing, tampered with or expired
    """
    user_id = _session_user_id(request)
    if not user_id:
        logger.warning("Rejected request to %s without a valid session", request.url.path)
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user_id


def get_current_user(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> User:
    """Like get_current_user_id but loads the row; 401 if the account is gone."""
    user = db.get(User, user_id)
    if not user:
        logger.warning("Session refers to unknown user %s", user_id)
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user


def get_optional_user(
    request: Request,
    db: Session = Depends(get_db),
) -> Optional[User]:
    user_id = _session_user_id(request)
    if not user_id:
        return None
    return db.get(User, user_id)


def get_today() -> date:
    return datetime.now(ZoneInfo(settings.timezone)).date()
