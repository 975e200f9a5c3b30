from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from fastapi import Depends
from fastapi.security import (
    HTTPAuthorizationCredentials,
    HTTPBearer,
    OAuth2PasswordBearer,
)
import jwt
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from authentication.permissions import require_admin
from models.config import settings
from models.exceptions import AuthenticationException, InactiveUserException
from repositories.database import get_db
from repositories.profile_repository import ProfileRepository

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/auth/login")
optional_oauth2_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthSession:
    """
    Signed-in principal handed explicitly to services.

    Created per request from a valid bearer token and discarded with it;
    sign-out invalidates every token through the profile's session_version.
    """

    profile_id: int
    email: str
    role: db_models.ProfileRole

    @property
    def id(self) -> int:
        return self.profile_id

    @classmethod
    def from_profile(cls, profile: db_models.Profile) -> "AuthSession":
        return cls(profile_id=profile.id, email=profile.email, role=profile.role)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode(), hashed_password.encode())


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=15)
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(
        to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM
    )
    return encoded_jwt


def create_session_token(profile: db_models.Profile) -> str:
    """Issue a bearer token bound to the profile's current session version."""
    return create_access_token(
        data={"sub": str(profile.email), "ver": int(profile.session_version)},
        expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def authenticate_profile(
    db: Session, email: str, password: str
) -> db_models.Profile | None:
    profile = ProfileRepository(db).get_by_email(email)
    if not profile:
        return None
    if not verify_password(password, str(profile.hashed_password)):
        return None
    return profile


def decode_token(token: str) -> schemas.TokenData:
    """
    Decode and validate a bearer token.

    Raises:
        AuthenticationException: If the token is malformed, expired or has no subject.
    """
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
    except jwt.exceptions.ExpiredSignatureError:
        raise AuthenticationException("Session expired. Please log in again.")
    except jwt.exceptions.InvalidTokenError:
        raise AuthenticationException("Could not validate credentials")

    email_value = payload.get("sub")
    if email_value is None:
        raise AuthenticationException("Could not validate credentials")
    return schemas.TokenData(
        email=str(email_value), session_version=int(payload.get("ver", 0))
    )


def resolve_token(db: Session, token: str) -> db_models.Profile:
    """
    Map a bearer token to its profile.

    Raises:
        AuthenticationException: If the token is invalid, the profile is gone,
            or the session was closed by sign-out.
    """
    token_data = decode_token(token)
    profile = ProfileRepository(db).get_by_email(str(token_data.email))
    if profile is None:
        raise AuthenticationException("Could not validate credentials")
    if token_data.session_version != profile.session_version:
        raise AuthenticationException("Session has ended. Please log in again.")
    return profile


async def get_current_profile(
    token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)
) -> db_models.Profile:
    """
    Get the current authenticated profile from the JWT token.

    Raises:
        AuthenticationException: If credentials are invalid or profile not found.
        InactiveUserException: If the profile has been deactivated.
    """
    profile = resolve_token(db, token)
    if not bool(profile.is_active):
        raise InactiveUserException("Account has been deactivated")
    return profile


async def get_optional_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(
        optional_oauth2_scheme
    ),
) -> Optional[str]:
    """Bearer token from the Authorization header, or None when absent."""
    if credentials is None:
        return None
    return credentials.credentials


async def get_current_session(
    profile: db_models.Profile = Depends(get_current_profile),
) -> AuthSession:
    return AuthSession.from_profile(profile)


async def get_admin_session(
    session: AuthSession = Depends(get_current_session),
) -> AuthSession:
    """
    Require municipal_admin or super_admin.

    Raises:
        InsufficientPermissionsException: If the principal is a citizen.
    """
    require_admin(session)
    return session
