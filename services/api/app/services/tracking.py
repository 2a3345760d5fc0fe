"""Completion and spending mutations.

Lookups return None both when a row does not exist and when it belongs to
someone else; routers turn that into the same 404.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from ..models import DailyTask, Spending, TaskCompletion

logger = logging.getLogger("daily.tracking")


class DailyTaskNotOwned(Exception):
    """Spending targets a day that is missing or owned by someone else."""


# --- Completions ---

def get_owned_completion(db: Session, user_id: str, completion_id: str) -> Optional[TaskCompletion]:
    completion = db.scalar(
        select(TaskCompletion)
        .where(TaskCompletion.id == completion_id)
        .options(joinedload(TaskCompletion.daily_task), joinedload(TaskCompletion.task_template))
    )
    if not completion or completion.daily_task.user_id != user_id:
        return None
    return completion


def set_completion(
    db: Session,
    user_id: str,
    completion_id: str,
    completed: Optional[bool],
) -> Optional[TaskCompletion]:
    """Set the completed flag; None keeps the stored value."""
    completion = get_owned_completion(db, user_id, completion_id)
    if completion is None:
        return None
    if completed is not None:
        completion.completed = completed
    db.commit()
    db.refresh(completion)
    return completion


# --- Spendings ---

def get_owned_spending(db: Session, user_id: str, spending_id: str) -> Optional[Spending]:
    spending = db.get(Spending, spending_id)
    if not spending or spending.user_id != user_id:
        return None
    return spending


def create_spending(
    db: Session,
    user_id: str,
    daily_task_id: str,
    amount: float,
    category: str,
    description: Optional[str] = None,
) -> Spending:
    task = db.get(DailyTask, daily_task_id)
    if not task or task.user_id != user_id:
        raise DailyTaskNotOwned(daily_task_id)

    spending = Spending(
        user_id=user_id,
        daily_task_id=task.id,
        amount=float(amount),
        category=category,
        description=description,
    )
    db.add(spending)
    db.commit()
    db.refresh(spending)
    logger.info("Spending %s (%.2f %s) added to DailyTask %s", spending.id, spending.amount, category, task.id)
    return spending


def update_spending(db: Session, spending: Spending, changes: dict) -> Spending:
    """Apply only the supplied fields (amount / category / description)."""
    for field in ("amount", "category", "description"):
        if field not in changes:
            continue
        # description may be cleared; the others are NOT NULL
        if changes[field] is None and field != "description":
            continue
        setattr(spending, field, changes[field])
    db.commit()
    db.refresh(spending)
    return spending


def delete_spending(db: Session, spending: Spending) -> None:
    db.delete(spending)
    db.commit()


def list_spendings_for_day(db: Session, user_id: str, day) -> list[Spending]:
    return db.scalars(
        select(Spending)
        .join(DailyTask, Spending.daily_task_id == DailyTask.id)
        .where(DailyTask.user_id == user_id, DailyTask.date == day)
        .order_by(Spending.created_at.desc())
    ).all()
