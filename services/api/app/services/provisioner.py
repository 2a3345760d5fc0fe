"""Daily task provisioning.

A DailyTask is created lazily the first time a day is touched, and every time
it is read the set of completions is topped up so that each *active* template
has one. Provisioning only ever adds rows: completions of templates that were
deactivated later stay where they are.

There is no lock around check-then-create. Two first requests for the same
(user, date) can both miss the lookup; the loser hits the unique constraint,
rolls back and re-reads the winner's row.
"""

import logging
from datetime import date, datetime
from typing import Optional, Union

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from ..models import DailyTask, TaskCompletion, TaskTemplate

logger = logging.getLogger("daily.provisioner")


def normalize_day(value: Union[date, datetime]) -> date:
    """Strip the time of day so one calendar day maps to one lookup key."""
    if isinstance(value, datetime):
        return value.date()
    return value


def find_daily_task(db: Session, user_id: str, day: date) -> Optional[DailyTask]:
    return db.scalar(
        select(DailyTask)
        .where(DailyTask.user_id == user_id, DailyTask.date == day)
        .options(
            selectinload(DailyTask.task_completions).selectinload(TaskCompletion.task_template),
            selectinload(DailyTask.spendings),
        )
        .execution_options(populate_existing=True)
    )


def _create_daily_task(db: Session, user_id: str, day: date) -> DailyTask:
    db.add(DailyTask(user_id=user_id, date=day))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info("DailyTask for user %s on %s created concurrently, re-reading", user_id, day)
    task = find_daily_task(db, user_id, day)
    if task is None:
        # The conflicting row vanished between our insert and the re-read
        raise RuntimeError(f"DailyTask for {user_id} on {day} could not be provisioned")
    return task


BACKFILL_ATTEMPTS = 3


def _missing_templates(db: Session, task: DailyTask) -> list[TaskTemplate]:
    active_templates = db.scalars(
        select(TaskTemplate).where(
            TaskTemplate.user_id == task.user_id,
            TaskTemplate.is_active.is_(True),
        )
    ).all()
    present = {tc.task_template_id for tc in task.task_completions}
    return [t for t in active_templates if t.id not in present]


def _backfill_completions(db: Session, task: DailyTask) -> DailyTask:
    """Insert a completion for every active template the day lacks.

    A conflicting insert from a concurrent request rolls back the whole batch,
    so the day is re-read and the still-missing templates are tried again.
    Returns a fresh snapshot of the day.
    """
    task_id, user_id, day = task.id, task.user_id, task.date
    for attempt in range(1, BACKFILL_ATTEMPTS + 1):
        missing = _missing_templates(db, task)
        if not missing:
            return task

        for template in missing:
            db.add(TaskCompletion(daily_task_id=task_id, task_template_id=template.id, completed=False))
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            if attempt == BACKFILL_ATTEMPTS:
                logger.warning("Giving up back-filling DailyTask %s after %d attempts", task_id, attempt)
                raise
            logger.info("Completions for DailyTask %s back-filled concurrently, retrying", task_id)
            task = find_daily_task(db, user_id, day)
            continue

        logger.debug("Back-filled %d completions for DailyTask %s", len(missing), task_id)
        return find_daily_task(db, user_id, day)


def ordered_completions(task: DailyTask) -> list[TaskCompletion]:
    """Completions sorted by their template's sort order (ties keep template name order)."""
    return sorted(
        task.task_completions,
        key=lambda tc: (
            tc.task_template.sort_order if tc.task_template else 0,
            tc.task_template.name if tc.task_template else "",
        ),
    )


def get_or_create_daily_task(db: Session, user_id: str, day: Union[date, datetime]) -> DailyTask:
    """Return the user's DailyTask for `day`, creating it and back-filling completions as needed."""
    day = normalize_day(day)

    task = find_daily_task(db, user_id, day)
    if task is None:
        logger.info("Creating DailyTask for user %s on %s", user_id, day)
        task = _create_daily_task(db, user_id, day)

    return _backfill_completions(db, task)
