"""Shared FastAPI dependencies: bearer auth guard and the feed broadcaster."""
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from bandstand.database import get_db
from bandstand.exceptions import UnauthorizedException
from bandstand.models.user import User
from bandstand.services.feed_broadcaster import FeedBroadcaster
from bandstand.services.security import decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """Resolve the ``Authorization: Bearer`` header to a user id (401 otherwise)."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise UnauthorizedException("Unauthorized")
    return decode_access_token(credentials.credentials)


def get_current_user(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> User:
    user = db.query(User).filter(User.user_id == user_id).first()
    if user is None:
        raise UnauthorizedException("Unknown user")
    return user


def get_broadcaster(request: Request) -> FeedBroadcaster:
    return request.app.state.broadcaster
