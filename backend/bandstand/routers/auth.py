"""Registration and login routes."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bandstand.database import get_db
from bandstand.exceptions import ConflictException, UnauthorizedException
from bandstand.models.user import User, UserRole
from bandstand.schemas.common import MessageOut
from bandstand.schemas.user import LoginRequest, TokenOut, UserCreate
from bandstand.services.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/register", response_model=MessageOut, status_code=status.HTTP_201_CREATED)
def register(payload: UserCreate, db: Session = Depends(get_db)):
    """Create an account; only artists keep a profile description."""
    if db.query(User).filter(User.email == payload.email).first():
        raise ConflictException("User", "email", payload.email)

    fields = payload.model_dump(exclude={"password", "description"})
    user = User(
        **fields,
        password_hash=hash_password(payload.password),
        description=payload.description if payload.role == UserRole.artist else "",
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictException("User", "email", payload.email)
    logger.info("Registered user %s (%s)", user.user_id, user.role.value)
    return MessageOut(message="User registered successfully")


@router.post("/login", response_model=TokenOut)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == payload.email).first()
    if not user or not verify_password(payload.password, user.password_hash):
        raise UnauthorizedException("Invalid credentials")
    logger.info("User %s logged in", user.user_id)
    return TokenOut(token=create_access_token(user.user_id))
