import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from mediasignage.db import get_db
from mediasignage.errors import AuthError, NotFound, ValidationError
from mediasignage.models.user import User
from mediasignage.schemas.auth import LoginIn, RegisterIn, TokenOut, UserOut
from mediasignage.services.auth import (
    OwnerContext,
    create_access_token,
    get_current_owner,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _normalize_email(value: str) -> str:
    email = (value or "").strip().lower()
    if "@" not in email:
        raise ValidationError("A valid email is required")
    return email


@router.post("/register", response_model=TokenOut, status_code=201)
def register(payload: RegisterIn, db: Session = Depends(get_db)):
    email = _normalize_email(payload.email)
    if db.query(User).filter(User.email == email).first():
        raise ValidationError("User already exists")
    user = User(
        email=email,
        password_hash=hash_password(payload.password),
        name=(payload.name or "").strip() or None,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered account %s", user.id)
    return {"token": create_access_token(user.id), "user": user}


@router.post("/login", response_model=TokenOut)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    email = (payload.email or "").strip().lower()
    user = db.query(User).filter(User.email == email).first()
    if not user or not verify_password(payload.password, user.password_hash):
        raise AuthError("Invalid credentials")
    return {"token": create_access_token(user.id), "user": user}


@router.get("/me", response_model=UserOut)
def me(owner: OwnerContext = Depends(get_current_owner), db: Session = Depends(get_db)):
    user = db.get(User, owner.user_id)
    if not user:
        raise NotFound("User not found")
    return user
