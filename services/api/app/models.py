"""SQLAlchemy ORM models for the daily challenge API.

Tables:
- users: Accounts with bcrypt password hash and challenge start date
- task_templates: User-defined habits checked off every day
- daily_tasks: One row per (user, calendar day), the aggregation root for that day
- task_completions: Whether a template was satisfied on a given day
- spendings: Money spent, attached to a day
- diet_meals: Static weekly meal plan (day of week 1-7)
"""

from __future__ import annotations

import uuid
import datetime as dt
from datetime import datetime, date
from typing import Optional

from sqlalchemy import (
    String,
    DateTime,
    Date,
    Text,
    Integer,
    Boolean,
    Float,
    ForeignKey,
    Index,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func
from sqlalchemy.types import JSON

from .db import Base


def generate_uuid() -> str:
    return str(uuid.uuid4())


class User(Base):
    """Account owning templates, days, spendings and diet meals."""
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=generate_uuid
    )
    username: Mapped[str] = mapped_column(String(80), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    challenge_start_date: Mapped[date] = mapped_column(
        Date, nullable=False, default=date.today
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Relationships
    task_templates: Mapped[list["TaskTemplate"]] = relationship(
        "TaskTemplate", back_populates="user", cascade="all, delete-orphan",
        order_by="TaskTemplate.sort_order"
    )
    daily_tasks: Mapped[list["DailyTask"]] = relationship(
        "DailyTask", back_populates="user", cascade="all, delete-orphan"
    )
    spendings: Mapped[list["Spending"]] = relationship(
        "Spending", back_populates="user", cascade="all, delete-orphan"
    )
    diet_meals: Mapped[list["DietMeal"]] = relationship(
        "DietMeal", back_populates="user", cascade="all, delete-orphan"
    )


class TaskTemplate(Base):
    """A recurring habit. Deactivated templates stop being provisioned."""
    __tablename__ = "task_templates"
    __table_args__ = (
        Index("ix_task_templates_user_id", "user_id"),
        UniqueConstraint("user_id", "name", name="uq_task_template_user_name"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    icon: Mapped[str] = mapped_column(String(80), nullable=False, default="CheckCircle")
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    user: Mapped["User"] = relationship("User", back_populates="task_templates")
    completions: Mapped[list["TaskCompletion"]] = relationship(
        "TaskCompletion", back_populates="task_template", cascade="all, delete-orphan"
    )


class DailyTask(Base):
    """One user's one calendar day.

    The boolean columns are the fixed checklist that predates templates.
    They are still writable through PATCH /tasks/{id} but nothing aggregates them.
    """
    __tablename__ = "daily_tasks"
    __table_args__ = (
        Index("ix_daily_tasks_user_id", "user_id"),
        UniqueConstraint("user_id", "date", name="uq_daily_task_user_date"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)

    # Legacy checklist
    steps: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    training: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    diet: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    book: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    learning: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    water: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    user: Mapped["User"] = relationship("User", back_populates="daily_tasks")
    task_completions: Mapped[list["TaskCompletion"]] = relationship(
        "TaskCompletion", back_populates="daily_task", cascade="all, delete-orphan"
    )
    spendings: Mapped[list["Spending"]] = relationship(
        "Spending", back_populates="daily_task", cascade="all, delete-orphan",
        order_by="desc(Spending.created_at)"
    )


class TaskCompletion(Base):
    """Join between a day and a template."""
    __tablename__ = "task_completions"
    __table_args__ = (
        Index("ix_task_completions_daily_task_id", "daily_task_id"),
        UniqueConstraint(
            "daily_task_id", "task_template_id", name="uq_task_completion_day_template"
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    daily_task_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("daily_tasks.id", ondelete="CASCADE"), nullable=False
    )
    task_template_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("task_templates.id", ondelete="CASCADE"), nullable=False
    )
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    daily_task: Mapped["DailyTask"] = relationship("DailyTask", back_populates="task_completions")
    task_template: Mapped["TaskTemplate"] = relationship("TaskTemplate", back_populates="completions")


class Spending(Base):
    """Money spent on a given day.

    user_id duplicates daily_task.user_id so ownership can be checked
    without loading the day.
    """
    __tablename__ = "spendings"
    __table_args__ = (
        Index("ix_spendings_user_id", "user_id"),
        Index("ix_spendings_daily_task_id", "daily_task_id"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    daily_task_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("daily_tasks.id", ondelete="CASCADE"), nullable=False
    )
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    category: Mapped[str] = mapped_column(String(80), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    user: Mapped["User"] = relationship("User", back_populates="spendings")
    daily_task: Mapped["DailyTask"] = relationship("DailyTask", back_populates="spendings")


class DietMeal(Base):
    """Planned meal for a day of the week (1 = Monday ... 7 = Sunday)."""
    __tablename__ = "diet_meals"
    __table_args__ = (
        Index("ix_diet_meals_user_day", "user_id", "day"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    day: Mapped[int] = mapped_column(Integer, nullable=False)
    meal_type: Mapped[str] = mapped_column(String(80), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    kcal: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    protein: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    fat: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    carbs: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    ingredients: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    user: Mapped["User"] = relationship("User", back_populates="diet_meals")
