"""Profile routes for the authenticated user."""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bandstand.database import get_db
from bandstand.dependencies import get_current_user_id
from bandstand.exceptions import ConflictException, NotFoundException
from bandstand.models.user import User, UserRole
from bandstand.schemas.user import UserEnvelope, UserUpdate
from bandstand.services.security import hash_password

logger = logging.getLogger(__name__)
router = APIRouter()


def _load_user(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise NotFoundException("User", user_id)
    return user


@router.get("/user", response_model=UserEnvelope)
def get_profile(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """Return the caller's profile (never the password hash)."""
    return UserEnvelope(user=_load_user(db, user_id))


@router.put("/user", response_model=UserEnvelope)
def update_profile(
    payload: UserUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Partial profile update."""
    user = _load_user(db, user_id)
    updates = payload.model_dump(exclude_unset=True, exclude_none=True)

    new_email = updates.get("email")
    if new_email and new_email != user.email:
        taken = db.query(User).filter(User.email == new_email, User.user_id != user_id).first()
        if taken:
            raise ConflictException("User", "email", new_email)

    password = updates.pop("password", None)
    if password:
        user.password_hash = hash_password(password)

    for field, value in updates.items():
        setattr(user, field, value)
    if user.role != UserRole.artist:
        user.description = ""

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictException("User", "email", updates.get("email"))
    db.refresh(user)
    logger.info("Updated profile of user %s", user_id)
    return UserEnvelope(message="Profile updated", user=user)


@router.get("/usernames", response_model=list[str])
def list_usernames(db: Session = Depends(get_db)):
    """Display names of every registered user."""
    return [user.full_name for user in db.query(User).order_by(User.first_name, User.last_name).all()]
