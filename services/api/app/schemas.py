"""Pydantic schemas for the daily challenge API.

Request/response models for:
- Users and auth
- Task templates and completions
- Daily tasks (with nested completions and spendings)
- Spendings
- Diet meals
- Calendar and summary reports
"""

import json
from datetime import datetime, date
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


# --- Auth ---

class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=80)
    password: str = Field(..., min_length=6, max_length=128)
    name: str = Field(..., min_length=1, max_length=200)


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserOut(BaseModel):
    id: str
    username: str
    name: str
    challenge_start_date: date

    class Config:
        from_attributes = True


class UserEnvelope(BaseModel):
    user: Optional[UserOut]


class ChallengeStartUpdate(BaseModel):
    challenge_start_date: date


# --- Task Template ---

class TaskTemplateCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    icon: Optional[str] = Field(None, max_length=80)
    sort_order: int = 0
    is_active: bool = True


class TaskTemplatePatch(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    icon: Optional[str] = Field(None, max_length=80)
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None


class TaskTemplateOut(BaseModel):
    id: str
    user_id: str
    name: str
    icon: str
    sort_order: int
    is_active: bool

    class Config:
        from_attributes = True


class ReorderItem(BaseModel):
    id: str
    sort_order: int


class ReorderRequest(BaseModel):
    items: list[ReorderItem]


# --- Task Completion ---

class TaskCompletionPatch(BaseModel):
    completed: Optional[bool] = None


class TaskCompletionOut(BaseModel):
    id: str
    daily_task_id: str
    task_template_id: str
    completed: bool
    task_template: Optional[TaskTemplateOut] = None

    class Config:
        from_attributes = True


# --- Spending ---

class SpendingCreate(BaseModel):
    daily_task_id: str
    amount: float = Field(..., gt=0)
    category: str = Field(..., min_length=1, max_length=80)
    description: Optional[str] = None


class SpendingPatch(BaseModel):
    amount: Optional[float] = Field(None, gt=0)
    category: Optional[str] = Field(None, min_length=1, max_length=80)
    description: Optional[str] = None


class SpendingOut(BaseModel):
    id: str
    user_id: str
    daily_task_id: str
    amount: float
    category: str
    description: Optional[str]
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# --- Daily Task ---

class DailyTaskCreate(BaseModel):
    date: date


class DailyTaskPatch(BaseModel):
    steps: Optional[bool] = None
    training: Optional[bool] = None
    diet: Optional[bool] = None
    book: Optional[bool] = None
    learning: Optional[bool] = None
    water: Optional[bool] = None


class DailyTaskOut(BaseModel):
    id: str
    user_id: str
    date: date
    steps: bool
    training: bool
    diet: bool
    book: bool
    learning: bool
    water: bool
    task_completions: list[TaskCompletionOut] = []
    spendings: list[SpendingOut] = []

    class Config:
        from_attributes = True


class DailyTaskEnvelope(BaseModel):
    task: Optional[DailyTaskOut]


# --- Diet Meal ---

def _decode_ingredients(value: Any) -> Any:
    # Older clients send the list JSON-encoded in a string
    if isinstance(value, str):
        if not value.strip():
            return []
        try:
            return json.loads(value)
        except json.JSONDecodeError as exc:
            raise ValueError("ingredients must be a JSON list") from exc
    return value


class DietMealCreate(BaseModel):
    day: int = Field(..., ge=1, le=7)
    meal_type: str = Field(..., min_length=1, max_length=80)
    name: str = Field(..., min_length=1, max_length=200)
    kcal: float = Field(0, ge=0)
    protein: float = Field(0, ge=0)
    fat: float = Field(0, ge=0)
    carbs: float = Field(0, ge=0)
    ingredients: list[Any] = []
    sort_order: int = 0

    @field_validator("ingredients", mode="before")
    @classmethod
    def _ingredients(cls, v):
        return _decode_ingredients(v)


class DietMealPatch(BaseModel):
    day: Optional[int] = Field(None, ge=1, le=7)
    meal_type: Optional[str] = Field(None, min_length=1, max_length=80)
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    kcal: Optional[float] = Field(None, ge=0)
    protein: Optional[float] = Field(None, ge=0)
    fat: Optional[float] = Field(None, ge=0)
    carbs: Optional[float] = Field(None, ge=0)
    ingredients: Optional[list[Any]] = None
    sort_order: Optional[int] = None

    @field_validator("ingredients", mode="before")
    @classmethod
    def _ingredients(cls, v):
        return _decode_ingredients(v)


class DietMealOut(BaseModel):
    id: str
    user_id: str
    day: int
    meal_type: str
    name: str
    kcal: float
    protein: float
    fat: float
    carbs: float
    ingredients: list[Any]
    sort_order: int

    class Config:
        from_attributes = True


# --- Calendar / Summary ---

class CalendarDayOut(DailyTaskOut):
    completed: int
    total: int
    percentage: float
    status: str


class TemplateStatsOut(BaseModel):
    template_id: str
    completed_count: int
    total_count: int
    rate: float


class SummaryOut(BaseModel):
    start: Optional[date]
    end: Optional[date]
    days: int
    perfect_days: int
    good_days: int
    total_spending: float
    average_completion: float
    streak: int
    spending_by_category: dict[str, float]
    template_stats: Optional[TemplateStatsOut] = None


class ChallengeProgressOut(BaseModel):
    start_date: date
    end_date: date
    day_number: int
    days_remaining: int
    length_days: int
    finished: bool
