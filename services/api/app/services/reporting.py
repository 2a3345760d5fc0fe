"""Calendar and summary aggregation.

Everything here is a pure function over already-loaded DailyTask rows (or any
object exposing `date`, `task_completions` and `spendings`). "Today" and month
boundaries always come from the caller.

Day status uses a five-bucket scheme:
    100%          -> perfect
    75% .. <100%  -> good
    25% .. <75%   -> partial
    >0% .. <25%   -> low
    0% / no tasks -> zero
"""

import calendar
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional

STATUS_PERFECT = "perfect"
STATUS_GOOD = "good"
STATUS_PARTIAL = "partial"
STATUS_LOW = "low"
STATUS_ZERO = "zero"


@dataclass(frozen=True)
class DayCompletion:
    completed: int
    total: int
    percentage: float
    status: str


def classify_day(percentage: float, total: int) -> str:
    if total == 0 or percentage <= 0:
        return STATUS_ZERO
    if percentage >= 100:
        return STATUS_PERFECT
    if percentage >= 75:
        return STATUS_GOOD
    if percentage >= 25:
        return STATUS_PARTIAL
    return STATUS_LOW


def day_completion(task) -> DayCompletion:
    completions = task.task_completions or []
    total = len(completions)
    completed = sum(1 for tc in completions if tc.completed)
    percentage = (completed / total) * 100 if total > 0 else 0.0
    return DayCompletion(completed, total, percentage, classify_day(percentage, total))


def filter_by_range(tasks: Iterable, start: Optional[date] = None, end: Optional[date] = None) -> list:
    """Keep days inside [start, end]; a missing bound is open."""
    out = []
    for task in tasks:
        if start and task.date < start:
            continue
        if end and task.date > end:
            continue
        out.append(task)
    return out


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last)


def total_spending(tasks: Iterable) -> float:
    return sum(sp.amount for task in tasks for sp in (task.spendings or []))


def spending_by_category(tasks: Iterable) -> dict[str, float]:
    totals: dict[str, float] = defaultdict(float)
    for task in tasks:
        for sp in task.spendings or []:
            totals[sp.category] += sp.amount
    return dict(sorted(totals.items(), key=lambda kv: kv[1], reverse=True))


def average_completion(tasks: list) -> float:
    """Mean of per-day percentages. Days without completions count as 0."""
    if not tasks:
        return 0.0
    return sum(day_completion(t).percentage for t in tasks) / len(tasks)


def compute_streak(tasks: Iterable, today: date) -> int:
    """Consecutive days with non-zero completion, ending at the latest day on or before today.

    The streak is 0 when that latest day is older than yesterday. The walk back
    stops at the first calendar gap or the first day at 0%.
    """
    by_date = {t.date: t for t in tasks if t.date <= today}
    if not by_date:
        return 0

    latest = max(by_date)
    if latest < today - timedelta(days=1):
        return 0

    streak = 0
    cursor = latest
    while cursor in by_date and day_completion(by_date[cursor]).percentage > 0:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def template_success_rate(tasks: Iterable, template_id: str) -> dict:
    """How often one template was completed on the days where it was tracked at all."""
    completed_count = 0
    total_count = 0
    for task in tasks:
        completion = next(
            (tc for tc in task.task_completions or [] if tc.task_template_id == template_id),
            None,
        )
        if completion is None:
            continue
        total_count += 1
        if completion.completed:
            completed_count += 1
    rate = (completed_count / total_count) * 100 if total_count > 0 else 0.0
    return {
        "template_id": template_id,
        "completed_count": completed_count,
        "total_count": total_count,
        "rate": round(rate, 2),
    }


def summarize(
    tasks: list,
    today: date,
    start: Optional[date] = None,
    end: Optional[date] = None,
    template_id: Optional[str] = None,
) -> dict:
    """Aggregate stats for the days in [start, end].

    The streak is computed over *all* given days, not just the filtered range,
    since it is anchored at today.
    """
    selected = filter_by_range(tasks, start, end)
    statuses = [day_completion(t).status for t in selected]

    return {
        "start": start,
        "end": end,
        "days": len(selected),
        "perfect_days": statuses.count(STATUS_PERFECT),
        "good_days": statuses.count(STATUS_GOOD),
        "total_spending": round(total_spending(selected), 2),
        "average_completion": round(average_completion(selected), 2),
        "streak": compute_streak(tasks, today),
        "spending_by_category": spending_by_category(selected),
        "template_stats": template_success_rate(selected, template_id) if template_id else None,
    }


def challenge_progress(start_date: date, today: date, length_days: int) -> dict:
    """Day N of the challenge (day 1 is the start date) and how many days are left."""
    end_date = start_date + timedelta(days=length_days - 1)
    day_number = (today - start_date).days + 1
    days_remaining = max(0, (end_date - today).days)
    return {
        "start_date": start_date,
        "end_date": end_date,
        "day_number": day_number,
        "days_remaining": days_remaining,
        "length_days": length_days,
        "finished": days_remaining == 0,
    }
