import os
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from mediasignage.db import get_db
from mediasignage.errors import AuthError
from mediasignage.models.user import User

logger = logging.getLogger(__name__)

JWT_SECRET = os.getenv("SIGNAGE_JWT_SECRET", "change-me-in-production")
JWT_ALGORITHM = "HS256"
JWT_EXPIRE_DAYS = int(os.getenv("SIGNAGE_JWT_EXPIRE_DAYS", "7"))
BCRYPT_ROUNDS = int(os.getenv("SIGNAGE_BCRYPT_ROUNDS", "12"))

_bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class OwnerContext:
    """The authenticated owner every store query is scoped to."""

    user_id: str


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(user_id: str, now: datetime | None = None) -> str:
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "iat": issued_at,
        "exp": issued_at + timedelta(days=JWT_EXPIRE_DAYS),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> str:
    """Return the user id carried by a token, or raise AuthError."""
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.PyJWTError as exc:
        logger.debug("Rejected bearer token: %s", exc)
        raise AuthError("Invalid or expired token") from exc
    user_id = str(payload.get("sub") or "").strip()
    if not user_id:
        raise AuthError("Invalid or expired token")
    return user_id


def get_current_owner(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    db: Session = Depends(get_db),
) -> OwnerContext:
    if credentials is None or not credentials.credentials:
        raise AuthError("Authentication required")
    user_id = decode_access_token(credentials.credentials)
    if db.get(User, user_id) is None:
        raise AuthError("Invalid or expired token")
    return OwnerContext(user_id=user_id)
