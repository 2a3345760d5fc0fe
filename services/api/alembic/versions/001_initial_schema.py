"""Initial schema with users, task_templates, daily_tasks, task_completions, spendings, diet_meals

Revision ID: 001_initial_schema
Revises:
Create Date: 2025-11-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Users table
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("username", sa.String(80), unique=True, nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("password_hash", sa.String(128), nullable=False),
        sa.Column("challenge_start_date", sa.Date, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # Task templates table
    op.create_table(
        "task_templates",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("icon", sa.String(80), nullable=False, server_default="CheckCircle"),
        sa.Column("sort_order", sa.Integer, nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "name", name="uq_task_template_user_name"),
    )
    op.create_index("ix_task_templates_user_id", "task_templates", ["user_id"])

    # Daily tasks table (legacy checklist columns kept for old clients)
    op.create_table(
        "daily_tasks",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("date", sa.Date, nullable=False),
        sa.Column("steps", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("training", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("diet", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("book", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("learning", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("water", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "date", name="uq_daily_task_user_date"),
    )
    op.create_index("ix_daily_tasks_user_id", "daily_tasks", ["user_id"])

    # Task completions table
    op.create_table(
        "task_completions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("daily_task_id", sa.String(36), sa.ForeignKey("daily_tasks.id", ondelete="CASCADE"), nullable=False),
        sa.Column("task_template_id", sa.String(36), sa.ForeignKey("task_templates.id", ondelete="CASCADE"), nullable=False),
        sa.Column("completed", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("daily_task_id", "task_template_id", name="uq_task_completion_day_template"),
    )
    op.create_index("ix_task_completions_daily_task_id", "task_completions", ["daily_task_id"])

    # Spendings table
    op.create_table(
        "spendings",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("daily_task_id", sa.String(36), sa.ForeignKey("daily_tasks.id", ondelete="CASCADE"), nullable=False),
        sa.Column("amount", sa.Float, nullable=False),
        sa.Column("category", sa.String(80), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_spendings_user_id", "spendings", ["user_id"])
    op.create_index("ix_spendings_daily_task_id", "spendings", ["daily_task_id"])

    # Diet meals table
    op.create_table(
        "diet_meals",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("day", sa.Integer, nullable=False),
        sa.Column("meal_type", sa.String(80), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("kcal", sa.Float, nullable=False, server_default="0"),
        sa.Column("protein", sa.Float, nullable=False, server_default="0"),
        sa.Column("fat", sa.Float, nullable=False, server_default="0"),
        sa.Column("carbs", sa.Float, nullable=False, server_default="0"),
        sa.Column("ingredients", sa.JSON, nullable=False),
        sa.Column("sort_order", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_diet_meals_user_day", "diet_meals", ["user_id", "day"])


def downgrade() -> None:
    op.drop_table("diet_meals")
    op.drop_table("spendings")
    op.drop_table("task_completions")
    op.drop_table("daily_tasks")
    op.drop_table("task_templates")
    op.drop_table("users")
