"""Calendar and summary API router.

Endpoints:
- GET /api/calendar - Days of one month with completion status and spendings
- GET /api/calendar/summary - Aggregate stats over a date range
- GET /api/calendar/challenge - Challenge day counter
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from ..db import get_db
from ..deps import get_current_user, get_current_user_id, get_today
from ..models import DailyTask, TaskCompletion, User
from ..schemas import CalendarDayOut, ChallengeProgressOut, SummaryOut
from ..services.provisioner import ordered_completions
from ..services.reporting import challenge_progress, day_completion, month_bounds, summarize
from ..settings import settings

router = APIRouter(prefix="/calendar")


def _load_days(
    db: Session,
    user_id: str,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> list[DailyTask]:
    query = (
        select(DailyTask)
        .where(DailyTask.user_id == user_id)
        .options(
            selectinload(DailyTask.task_completions).selectinload(TaskCompletion.task_template),
            selectinload(DailyTask.spendings),
        )
        .order_by(DailyTask.date)
    )
    if start:
        query = query.where(DailyTask.date >= start)
    if end:
        query = query.where(DailyTask.date <= end)
    return list(db.scalars(query).all())


def _day_to_out(task: DailyTask) -> CalendarDayOut:
    stats = day_completion(task)
    return CalendarDayOut(
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
        completed=stats.completed,
        total=stats.total,
        percentage=round(stats.percentage, 2),
        status=stats.status,
    )


@router.get("", response_model=list[CalendarDayOut])
def get_month(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=1970, le=9999),
    user_id: str = Depends(get_current_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    """Provisioned days of a month (default: current month), ascending."""
    start, end = month_bounds(year or today.year, month or today.month)
    return [_day_to_out(t) for t in _load_days(db, user_id, start, end)]


@router.get("/summary", response_model=SummaryOut)
def get_summary(
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    template_id: Optional[str] = Query(None),
    user_id: str = Depends(get_current_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    if start and end and start > end:
        raise HTTPException(status_code=400, detail="start must not be after end")
    # Streak needs the days leading up to today, so load everything and filter in memory
    days = _load_days(db, user_id)
    return summarize(days, today, start=start, end=end, template_id=template_id)


@router.get("/challenge", response_model=ChallengeProgressOut)
def get_challenge(
    user: User = Depends(get_current_user),
    today: date = Depends(get_today),
):
    return challenge_progress(user.challenge_start_date, today, settings.challenge_length_days)
