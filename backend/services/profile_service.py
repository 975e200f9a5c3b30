"""Profile service for the signed-in principal's own page."""

from sqlalchemy.orm import Session

import models.schemas as schemas
from authentication.auth import AuthSession
from authentication.permissions import is_admin
from models.exceptions import ProfileNotFoundException
from repositories.database import translate_backend_errors
from repositories.profile_repository import ProfileRepository
from repositories.report_repository import ReportRepository
from services.report_service import ReportService


class ProfileService:
    """Service for profile pages."""

    @staticmethod
    @translate_backend_errors
    def get_summary(db: Session, session: AuthSession) -> schemas.ProfileSummary:
        """
        Profile row, number of reports filed and, for admins, assigned report counts.

        Raises:
            ProfileNotFoundException: If the profile no longer exists
        """
        profile = ProfileRepository(db).get_by_id(session.profile_id)
        if not profile:
            raise ProfileNotFoundException(f"Profile {session.profile_id} not found")

        return schemas.ProfileSummary(
            profile=schemas.Profile.model_validate(profile),
            reports_filed=ReportRepository(db).count_by_owner(profile.id),
            assigned=ReportService.assigned_summary(db, session)
            if is_admin(session)
            else None,
        )
