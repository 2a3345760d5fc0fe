"""Spendings API router.

Endpoints:
- GET /api/spendings - List a day's spendings (default today), newest first
- POST /api/spendings - Add a spending to one of the user's days
- PATCH /api/spendings/{id} - Partial update
- DELETE /api/spendings/{id} - Delete
"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..db import get_db
from ..deps import get_current_user_id, get_today
from ..schemas import SpendingCreate, SpendingOut, SpendingPatch
from ..services import tracking

router = APIRouter(prefix="/spendings")
logger = logging.getLogger("daily.spendings")


def _get_owned_spending(db: Session, user_id: str, spending_id: str):
    spending = tracking.get_owned_spending(db, user_id, spending_id)
    if spending is None:
        raise HTTPException(status_code=404, detail="Spending not found")
    return spending


@router.get("", response_model=list[SpendingOut])
def list_spendings(
    date: Optional[date] = Query(None, description="Day (YYYY-MM-DD); defaults to today"),
    user_id: str = Depends(get_current_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    return tracking.list_spendings_for_day(db, user_id, date or today)


@router.post("", response_model=SpendingOut)
def create_spending(
    payload: SpendingCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        return tracking.create_spending(
            db,
            user_id,
            daily_task_id=payload.daily_task_id,
            amount=payload.amount,
            category=payload.category,
            description=payload.description,
        )
    except tracking.DailyTaskNotOwned:
        logger.warning("User %s tried to add spending to DailyTask %s", user_id, payload.daily_task_id)
        raise HTTPException(status_code=403, detail="Forbidden")


@router.patch("/{spending_id}", response_model=SpendingOut)
def update_spending(
    spending_id: str,
    payload: SpendingPatch,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    spending = _get_owned_spending(db, user_id, spending_id)
    return tracking.update_spending(db, spending, payload.model_dump(exclude_unset=True))


@router.delete("/{spending_id}")
def delete_spending(
    spending_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    spending = _get_owned_spending(db, user_id, spending_id)
    tracking.delete_spending(db, spending)
    logger.info("Spending %s deleted by user %s", spending_id, user_id)
    return {"message": "Spending deleted successfully"}
