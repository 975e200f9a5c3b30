"""Authentication router endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from helpers.rate_limiter import LOGIN_RATE_LIMIT, REGISTER_RATE_LIMIT, limiter
from repositories.database import get_db
from services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=schemas.Profile)
@limiter.limit(REGISTER_RATE_LIMIT)
def register(
    request: Request, profile: schemas.ProfileCreate, db: Session = Depends(get_db)
) -> db_models.Profile:
    """
    Register a new citizen.

    Rate limited to 3 per minute.
    """
    return AuthService.sign_up(db, profile)


@router.post("/login", response_model=schemas.Token)
@limiter.limit(LOGIN_RATE_LIMIT)
def login(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
) -> schemas.Token:
    """
    Login with email (as username) and password. Rate limited to 5 per minute.

    Domain exceptions are caught by centralized exception handlers.
    """
    return AuthService.sign_in(db, form_data.username, form_data.password)


@router.post("/logout")
def logout(
    session: auth.AuthSession = Depends(auth.get_current_session),
    db: Session = Depends(get_db),
) -> dict[str, str]:
    """End every open session of the current profile."""
    AuthService.sign_out(db, session)
    return {"message": "Signed out"}


@router.get("/me", response_model=Optional[schemas.SessionInfo])
def read_session(
    token: Optional[str] = Depends(auth.get_optional_token),
    db: Session = Depends(get_db),
) -> schemas.SessionInfo | None:
    """Restore the session behind a stored token; null when there is none."""
    return AuthService.restore_session(db, token)
