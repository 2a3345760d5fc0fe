"""Task templates API router.

Endpoints:
- GET /api/task-templates - List the user's templates by sort order
- POST /api/task-templates - Create a template
- PATCH /api/task-templates/{id} - Partial update
- DELETE /api/task-templates/{id} - Delete (with its completions)
- POST /api/task-templates/reorder - Apply several sort orders atomically
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..db import get_db
from ..deps import get_current_user_id
from ..models import TaskTemplate
from ..schemas import ReorderRequest, TaskTemplateCreate, TaskTemplateOut, TaskTemplatePatch

router = APIRouter(prefix="/task-templates")
logger = logging.getLogger("daily.templates")


def _get_owned_template(db: Session, user_id: str, template_id: str) -> TaskTemplate:
    template = db.get(TaskTemplate, template_id)
    if not template or template.user_id != user_id:
        raise HTTPException(status_code=404, detail="Task template not found")
    return template


@router.get("", response_model=list[TaskTemplateOut])
def list_templates(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return db.scalars(
        select(TaskTemplate)
        .where(TaskTemplate.user_id == user_id)
        .order_by(TaskTemplate.sort_order, TaskTemplate.name)
    ).all()


@router.post("", response_model=TaskTemplateOut, status_code=status.HTTP_201_CREATED)
def create_template(
    payload: TaskTemplateCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    template = TaskTemplate(
        user_id=user_id,
        name=payload.name,
        icon=payload.icon or "CheckCircle",
        sort_order=payload.sort_order,
        is_active=payload.is_active,
    )
    try:
        db.add(template)
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning("Duplicate task template %r for user %s", payload.name, user_id)
        raise HTTPException(status_code=409, detail="Task template with this name already exists")
    db.refresh(template)
    return template


@router.post("/reorder")
def reorder_templates(
    payload: ReorderRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Set sort_order for several templates; either all of them change or none do."""
    ids = {item.id for item in payload.items}
    owned = {
        t.id: t
        for t in db.scalars(
            select(TaskTemplate).where(TaskTemplate.id.in_(ids), TaskTemplate.user_id == user_id)
        ).all()
    }

    for item in payload.items:
        template = owned.get(item.id)
        if template is None:
            db.rollback()
            logger.warning("Reorder by user %s references unknown template %s", user_id, item.id)
            raise HTTPException(status_code=400, detail="Unknown task template in reorder request")
        template.sort_order = item.sort_order

    db.commit()
    return {"success": True}


@router.patch("/{template_id}", response_model=TaskTemplateOut)
def update_template(
    template_id: str,
    payload: TaskTemplatePatch,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    template = _get_owned_template(db, user_id, template_id)

    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(template, field, value)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Task template with this name already exists")
    db.refresh(template)
    return template


@router.delete("/{template_id}")
def delete_template(
    template_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    template = _get_owned_template(db, user_id, template_id)
    db.delete(template)
    db.commit()
    logger.info("Task template %s deleted by user %s", template_id, user_id)
    return {"message": "Task template deleted"}
