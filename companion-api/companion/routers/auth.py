import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import or_
from sqlalchemy.orm import Session
from companion.deps import get_db, get_current_user
from companion.models.user import User
from companion.schemas.auth import RegisterIn, LoginIn, TokenOut, RefreshTokenOut
from companion.schemas.user import MessageOut, UserOut
from companion.core.security import hash_password, verify_password, create_access_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

GUEST_EMAIL_DOMAIN = "fallout-companion.local"


def _token_response(user: User) -> TokenOut:
    return TokenOut(
        access_token=create_access_token(str(user.id)),
        user=UserOut.model_validate(user),
    )


@router.post("/register", response_model=TokenOut, status_code=201)
def register(payload: RegisterIn, db: Session = Depends(get_db)):
    email = payload.email.lower()

    exists = db.query(User).filter(or_(User.email == email, User.username == payload.username)).first()
    if exists:
        raise HTTPException(status_code=400, detail="User already exists with this email or username")

    # Argon2 handles long passwords; still capped at 200 chars via schema.
    user = User(
        email=email,
        username=payload.username,
        password_hash=hash_password(payload.password),
        role="user",
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"[Auth] Registered user {user.username}")
    return _token_response(user)


@router.post("/login", response_model=TokenOut)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == payload.email.lower()).first()
    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    return _token_response(user)


@router.post("/guest", response_model=TokenOut)
def guest(db: Session = Depends(get_db)):
    """Start a guest session: an account with no credentials and read-mostly access."""
    suffix = uuid.uuid4().hex[:12]
    user = User(
        username=f"Guest_{suffix}",
        email=f"guest_{suffix}@{GUEST_EMAIL_DOMAIN}",
        role="guest",
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"[Auth] Guest session created for {user.username}")
    return _token_response(user)


@router.get("/me", response_model=UserOut)
def me(user: User = Depends(get_current_user)):
    return user


@router.post("/refresh", response_model=RefreshTokenOut)
def refresh_token(user: User = Depends(get_current_user)):
    return RefreshTokenOut(access_token=create_access_token(str(user.id)))


@router.post("/logout", response_model=MessageOut)
def logout():
    # Tokens are stateless; the client drops its copy
    return MessageOut(message="Logged out successfully")
