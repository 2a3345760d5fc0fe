"""Diet plan API router.

Endpoints:
- GET /api/diet-meals - List planned meals, optionally for one day of the week
- POST /api/diet-meals - Create a meal
- PATCH /api/diet-meals/{id} - Partial update
- DELETE /api/diet-meals/{id} - Delete
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..db import get_db
from ..deps import get_current_user_id
from ..models import DietMeal
from ..schemas import DietMealCreate, DietMealOut, DietMealPatch

router = APIRouter(prefix="/diet-meals")
logger = logging.getLogger("daily.diet")


def _get_owned_meal(db: Session, user_id: str, meal_id: str) -> DietMeal:
    meal = db.get(DietMeal, meal_id)
    if not meal or meal.user_id != user_id:
        raise HTTPException(status_code=404, detail="Diet meal not found")
    return meal


@router.get("", response_model=list[DietMealOut])
def list_meals(
    day: Optional[int] = Query(None, ge=1, le=7, description="Day of week, 1 = Monday"),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    query = select(DietMeal).where(DietMeal.user_id == user_id)
    if day is not None:
        query = query.where(DietMeal.day == day)
    return db.scalars(query.order_by(DietMeal.day, DietMeal.sort_order)).all()


@router.post("", response_model=DietMealOut, status_code=status.HTTP_201_CREATED)
def create_meal(
    payload: DietMealCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    meal = DietMeal(**payload.model_dump(), user_id=user_id)
    db.add(meal)
    db.commit()
    db.refresh(meal)
    return meal


@router.patch("/{meal_id}", response_model=DietMealOut)
def update_meal(
    meal_id: str,
    payload: DietMealPatch,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    meal = _get_owned_meal(db, user_id, meal_id)

    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(meal, field, value)

    db.commit()
    db.refresh(meal)
    return meal


@router.delete("/{meal_id}")
def delete_meal(
    meal_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    meal = _get_owned_meal(db, user_id, meal_id)
    db.delete(meal)
    db.commit()
    logger.info("Diet meal %s deleted by user %s", meal_id, user_id)
    return {"message": "Diet meal deleted"}
