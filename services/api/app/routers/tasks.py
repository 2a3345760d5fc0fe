"""Daily tasks API router.

Endpoints:
- GET /api/tasks/today - Get-or-create a day (default today) with completions
- POST /api/tasks - Get-or-create the given day
- GET /api/tasks/by-date - Read-only lookup, null when not provisioned
- PATCH /api/tasks/{id} - Update legacy checklist flags
- DELETE /api/tasks/{id} - Delete a day with its completions and spendings
"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..db import get_db
from ..deps import get_current_user_id, get_today
from ..models import DailyTask
from ..schemas import DailyTaskCreate, DailyTaskEnvelope, DailyTaskOut, DailyTaskPatch
from ..services.provisioner import (
    find_daily_task,
    get_or_create_daily_task,
    normalize_day,
    ordered_completions,
)

router = APIRouter(prefix="/tasks")
logger = logging.getLogger("daily.tasks")


def _daily_task_to_out(task: DailyTask) -> DailyTaskOut:
    """Serialize a day with completions in template order."""
    return DailyTaskOut(
        id=task.id,
        user_id=task.user_id,
        date=task.date,
        steps=task.steps,
        training=task.training,
        diet=task.diet,
        book=task.book,
        learning=task.learning,
        water=task.water,
        task_completions=ordered_completions(task),
        spendings=task.spendings,
    )


def _get_owned_task(db: Session, user_id: str, task_id: str) -> DailyTask:
    task = db.get(DailyTask, task_id)
    if not task or task.user_id != user_id:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


@router.get("/today", response_model=DailyTaskEnvelope)
def get_today_task(
    date: Optional[date] = Query(None, description="Day to open (YYYY-MM-DD); defaults to today"),
    user_id: str = Depends(get_current_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    task = get_or_create_daily_task(db, user_id, date or today)
    return {"task": _daily_task_to_out(task)}


@router.post("", response_model=DailyTaskEnvelope)
def create_task(
    payload: DailyTaskCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    task = get_or_create_daily_task(db, user_id, payload.date)
    return {"task": _daily_task_to_out(task)}


@router.get("/by-date", response_model=DailyTaskEnvelope)
def get_task_by_date(
    date: date = Query(..., description="Day to look up (YYYY-MM-DD)"),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    task = find_daily_task(db, user_id, normalize_day(date))
    return {"task": _daily_task_to_out(task) if task else None}


@router.patch("/{task_id}", response_model=DailyTaskEnvelope)
def update_task(
    task_id: str,
    payload: DailyTaskPatch,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Update the legacy checklist flags; omitted flags keep their value."""
    task = _get_owned_task(db, user_id, task_id)

    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(task, field, value)

    db.commit()
    task = find_daily_task(db, user_id, task.date)
    return {"task": _daily_task_to_out(task)}


@router.delete("/{task_id}")
def delete_task(
    task_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    task = _get_owned_task(db, user_id, task_id)
    db.delete(task)
    db.commit()
    logger.info("DailyTask %s deleted by user %s", task_id, user_id)
    return {"message": "Daily task deleted successfully"}
