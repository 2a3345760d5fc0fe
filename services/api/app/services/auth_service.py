import logging
from datetime import date
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from ..core.security import hash_password, verify_password
from ..models import TaskTemplate, User

logger = logging.getLogger("daily.auth")

DEFAULT_TASK_TEMPLATES = [
    {"name": "10 000 steps", "icon": "TrendingUp", "sort_order": 1},
    {"name": "Training / stretching", "icon": "Dumbbell", "sort_order": 2},
    {"name": "Healthy diet", "icon": "Apple", "sort_order": 3},
    {"name": "Reading a book", "icon": "Book", "sort_order": 4},
    {"name": "Learning (1 hour)", "icon": "GraduationCap", "sort_order": 5},
    {"name": "2.5 litres of water", "icon": "Droplet", "sort_order": 6},
]


class UsernameTaken(Exception):
    pass


def seed_default_templates(db: Session, user: User) -> list[TaskTemplate]:
    """Add the default template set for a user. Caller commits."""
    templates = [
        TaskTemplate(user_id=user.id, is_active=True, **defaults)
        for defaults in DEFAULT_TASK_TEMPLATES
    ]
    db.add_all(templates)
    return templates


def register_user(
    db: Session,
    username: str,
    password: str,
    name: str,
    challenge_start: date,
) -> User:
    """Create a user together with the default templates.

    Raises:
        UsernameTaken if the username already exists
    """
    existing = db.scalar(select(User).where(User.username == username))
    if existing:
        raise UsernameTaken(username)

    user = User(
        username=username,
        name=name,
        password_hash=hash_password(password),
        challenge_start_date=challenge_start,
    )
    db.add(user)
    db.flush()
    seed_default_templates(db, user)
    db.commit()
    db.refresh(user)
    logger.info("Registered user %s (%s)", user.username, user.id)
    return user


def authenticate_user(db: Session, username: str, password: str) -> Optional[User]:
    user = db.scalar(select(User).where(User.username == username))
    if not user or not verify_password(password, user.password_hash):
        return None
    return user


def backfill_default_templates(db: Session) -> int:
    """Seed defaults for every user that has no templates at all. Returns users touched."""
    counts = dict(
        db.execute(
            select(TaskTemplate.user_id, func.count(TaskTemplate.id)).group_by(TaskTemplate.user_id)
        ).all()
    )
    touched = 0
    for user in db.scalars(select(User)).all():
        if counts.get(user.id):
            logger.info("User %s already has %d task templates", user.username, counts[user.id])
            continue
        seed_default_templates(db, user)
        touched += 1
        logger.info("Creating default tasks for user %s", user.username)
    db.commit()
    return touched


def set_challenge_start(db: Session, start: date, user: Optional[User] = None) -> int:
    """Correct the challenge start date for one user, or for everyone when user is None."""
    users = [user] if user is not None else db.scalars(select(User)).all()
    for u in users:
        u.challenge_start_date = start
    db.commit()
    return len(users)
