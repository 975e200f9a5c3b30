"""
Authentication Service

Identity provider for the application: sign-up, sign-in, sign-out and
session restoration.
"""

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from authentication.auth import (
    AuthSession,
    authenticate_profile,
    create_session_token,
    get_password_hash,
    resolve_token,
)
from authentication.permissions import require_role_manager
from helpers.password_validation import validate_password_complexity
from models.exceptions import (
    AlreadyExistsException,
    InactiveUserException,
    InsufficientPermissionsException,
    InvalidCredentialsException,
    ProfileNotFoundException,
    ValidationException,
)
from repositories.database import translate_backend_errors
from repositories.profile_repository import ProfileRepository


class AuthService:
    """Service for authentication business logic."""

    @staticmethod
    @translate_backend_errors
    def sign_up(db: Session, data: schemas.ProfileCreate) -> db_models.Profile:
        """
        Create an account and its citizen profile.

        Args:
            db: Database session
            data: Email, password and full name

        Returns:
            Created profile with role=citizen and points=0

        Raises:
            ValidationException: If the name is blank or the password is weak
            AlreadyExistsException: If the email is already registered
        """
        full_name = data.full_name.strip()
        if not full_name:
            raise ValidationException("Full name is required")

        is_valid, errors = validate_password_complexity(data.password)
        if not is_valid:
            raise ValidationException("; ".join(errors))

        profile_repo = ProfileRepository(db)
        if profile_repo.get_by_email(data.email):
            raise AlreadyExistsException("Email already registered")

        profile = db_models.Profile(
            email=data.email.lower(),
            full_name=full_name,
            hashed_password=get_password_hash(data.password),
            role=db_models.ProfileRole.CITIZEN,
            points=0,
        )
        try:
            profile = profile_repo.create(profile)
        except IntegrityError:
            profile_repo.rollback()
            raise AlreadyExistsException("Email already registered")

        logger.info(f"Profile {profile.id} signed up")
        return profile

    @staticmethod
    @translate_backend_errors
    def sign_in(db: Session, email: str, password: str) -> schemas.Token:
        """
        Authenticate a profile and create an access token.

        Raises:
            InvalidCredentialsException: If email or password is incorrect
            InactiveUserException: If the profile is deactivated
        """
        profile = authenticate_profile(db, email, password)
        if not profile:
            raise InvalidCredentialsException("Incorrect email or password")
        if not bool(profile.is_active):
            raise InactiveUserException("Account has been deactivated")

        # nosec B106: "bearer" is OAuth2 token type, not a password
        return schemas.Token(
            access_token=create_session_token(profile), token_type="bearer"
        )  # nosec B106

    @staticmethod
    @translate_backend_errors
    def sign_out(db: Session, session: AuthSession) -> None:
        """End every session of the profile by bumping its session version."""
        ProfileRepository(db).bump_session_version(session.profile_id)
        logger.info(f"Profile {session.profile_id} signed out")

    @staticmethod
    @translate_backend_errors
    def restore_session(db: Session, token: str | None) -> schemas.SessionInfo | None:
        """
        Resolve a stored token into the signed-in principal and its profile.

        Returns:
            SessionInfo, or None when there is no token

        Raises:
            AuthenticationException: If the token is invalid, expired or revoked
            InactiveUserException: If the profile has been deactivated
        """
        if not token:
            return None
        profile = resolve_token(db, token)
        if not bool(profile.is_active):
            raise InactiveUserException("Account has been deactivated")
        return schemas.SessionInfo(
            id=profile.id,
            email=profile.email,
            full_name=profile.full_name,
            role=profile.role,
            points=profile.points,
            created_at=profile.created_at,
        )

    @staticmethod
    @translate_backend_errors
    def change_role(
        db: Session,
        session: AuthSession,
        profile_id: int,
        role: db_models.ProfileRole,
    ) -> db_models.Profile:
        """
        Change another profile's role. Super admins only.

        Raises:
            InsufficientPermissionsException: If the actor is not a super admin
                or targets their own profile
            ProfileNotFoundException: If the target profile does not exist
        """
        require_role_manager(session)
        if profile_id == session.profile_id:
            raise InsufficientPermissionsException("You cannot change your own role")

        profile_repo = ProfileRepository(db)
        profile = profile_repo.get_by_id(profile_id)
        if not profile:
            raise ProfileNotFoundException(f"Profile {profile_id} not found")

        profile.role = role
        profile = profile_repo.update(profile)
        logger.info(f"Profile {profile_id} role set to {role.value} by {session.profile_id}")
        return profile
