"""Password hashing and signed access tokens.

bcrypt via passlib for passwords, HS256 JWTs via python-jose for sessions.
Tokens carry the user id in ``sub`` and expire after
``settings.TOKEN_EXPIRE_MINUTES``.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from bandstand.config import settings
from bandstand.exceptions import UnauthorizedException

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.PASSWORD_HASH_ROUNDS,
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(password, hashed_password)
    except ValueError:
        # Unrecognised or corrupt hash
        logger.warning("Stored password hash could not be parsed")
        return False


def create_access_token(subject_id: str, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.TOKEN_EXPIRE_MINUTES))
    claims = {"sub": subject_id, "exp": expire}
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: Optional[str]) -> str:
    """Return the subject id of a valid token, else raise UnauthorizedException."""
    if not token:
        raise UnauthorizedException("Unauthorized")
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as exc:
        logger.info("Rejected access token: %s", exc)
        raise UnauthorizedException("Invalid or expired token")
    subject_id = payload.get("sub")
    if not subject_id:
        raise UnauthorizedException("Invalid or expired token")
    return subject_id
