"""Authentication API — login endpoint and per-user journal settings."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlmodel import Session, select

from backend.config import settings
from backend.database import get_session
from backend.models.user import User
from backend.schemas.journal import SettingsRead, SettingsUpdate
from backend.services.auth import check_login, create_access_token
from backend.api.deps import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


class LoginRequest(BaseModel):
    username: str
    password: str
    totp_code: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


@router.post("/login", response_model=LoginResponse)
def login(body: LoginRequest, session: Session = Depends(get_session)):
    user = session.exec(select(User).where(User.username == body.username)).first()

    reason = check_login(user, body.password, body.totp_code)
    if reason:
        logger.warning(f"Refused login for '{body.username}': {reason}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=reason,
        )

    token = create_access_token(subject=user.username)
    return LoginResponse(access_token=token)


def user_settings(user: User) -> SettingsRead:
    """Effective journal settings: the user's own values over service defaults."""
    return SettingsRead(
        starting_balance=(
            user.starting_balance if user.starting_balance is not None else settings.starting_balance
        ),
        currency=user.currency or settings.currency,
    )


@router.get("/settings", response_model=SettingsRead)
def get_settings(user: User = Depends(get_current_user)):
    return user_settings(user)


@router.put("/settings", response_model=SettingsRead)
def update_settings(
    data: SettingsUpdate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(user, key, value)
    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info(f"Updated settings for '{user.username}'")
    return user_settings(user)
