from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..db import get_db
from ..deps import get_current_user_id
from ..schemas import TaskCompletionOut, TaskCompletionPatch
from ..services.tracking import set_completion

router = APIRouter(prefix="/task-completions")


@router.patch("/{completion_id}", response_model=TaskCompletionOut)
def update_completion(
    completion_id: str,
    payload: TaskCompletionPatch,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Check or uncheck a task for a day."""
    completion = set_completion(db, user_id, completion_id, payload.completed)
    if completion is None:
        raise HTTPException(status_code=404, detail="Task completion not found")
    return completion
