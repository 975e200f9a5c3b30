"""
Report service for business logic.

Owns report creation and the status lifecycle:

    pendiente -> en_proceso -> resuelto | rechazado
    pendiente -> resuelto | rechazado

Admins may move a report backwards (e.g. resuelto -> en_proceso); such
changes are recorded as corrections in the audit trail.
"""

from datetime import datetime, timezone

from loguru import logger
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from authentication.auth import AuthSession
from authentication.permissions import (
    can_manage_reports,
    is_admin,
    require_admin,
    require_can_comment,
)
from models.exceptions import (
    BackendUnavailableException,
    EmptyCommentException,
    MissingLocationException,
    ProfileNotFoundException,
    ReportNotFoundException,
    ValidationException,
)
from repositories.database import translate_backend_errors
from repositories.profile_repository import ProfileRepository
from repositories.report_repository import ReportRepository
from repositories.report_update_repository import ReportUpdateRepository
from services.points_service import PointsService

# Position of each status along the intended progression
STATUS_RANK = {
    db_models.ReportStatus.PENDIENTE: 0,
    db_models.ReportStatus.EN_PROCESO: 1,
    db_models.ReportStatus.RESUELTO: 2,
    db_models.ReportStatus.RECHAZADO: 2,
}

TERMINAL_STATUSES = frozenset(
    {db_models.ReportStatus.RESUELTO, db_models.ReportStatus.RECHAZADO}
)


def is_correction(
    current: db_models.ReportStatus, new: db_models.ReportStatus
) -> bool:
    """True when a transition moves against the intended progression."""
    if current in TERMINAL_STATUSES and new in TERMINAL_STATUSES:
        return current != new
    return STATUS_RANK[new] < STATUS_RANK[current]


class ReportService:
    """Service for report-related business logic."""

    @staticmethod
    def _validate_new_report(data: schemas.ReportCreate) -> tuple[str, str]:
        if data.latitude is None or data.longitude is None:
            raise MissingLocationException()
        if not -90 <= data.latitude <= 90 or not -180 <= data.longitude <= 180:
            raise ValidationException("Location is out of range")

        title = data.title.strip()
        description = data.description.strip()
        if not title:
            raise ValidationException("Title cannot be empty")
        if not description:
            raise ValidationException("Description cannot be empty")
        return title, description

    @staticmethod
    @translate_backend_errors
    def create_report(
        db: Session, session: AuthSession, data: schemas.ReportCreate
    ) -> db_models.Report:
        """
        File a new report and credit the owner for it.

        The report is committed first. The activity (linked to the report) and
        the balance increment are committed together afterwards; if that credit
        fails it is retried once and otherwise logged, and the report stays
        listed as uncredited until the balance is repaired.

        Args:
            db: Database session
            session: Reporting principal
            data: Report payload

        Returns:
            Created report with status=pendiente

        Raises:
            MissingLocationException: If latitude/longitude are absent
            ValidationException: If title, description or location are invalid
        """
        title, description = ReportService._validate_new_report(data)
        report_repo = ReportRepository(db)

        report = db_models.Report(
            user_id=session.profile_id,
            title=title,
            description=description,
            category=data.category,
            priority=data.priority,
            latitude=data.latitude,
            longitude=data.longitude,
            address=(data.address or "").strip() or None,
            status=db_models.ReportStatus.PENDIENTE,
        )
        report = report_repo.create(report)
        logger.info(f"Report {report.id} filed by profile {session.profile_id}")

        ReportService._credit_report(db, session.profile_id, report)
        report_repo.refresh(report)
        return report

    @staticmethod
    def _credit_report(db: Session, profile_id: int, report: db_models.Report) -> None:
        for attempt in (1, 2):
            try:
                PointsService.record_activity(
                    db,
                    profile_id,
                    db_models.ActivityType.REPORTE_VALIDO,
                    f"Reporte creado: {report.title}",
                    report_id=report.id,
                )
                return
            except BackendUnavailableException:
                logger.warning(
                    f"Points credit for report {report.id} failed (attempt {attempt})"
                )
        # Left uncredited; PointsService.credit_missing_reports picks it up
        logger.error(
            f"Report {report.id} kept without points credit for profile {profile_id}; "
            f"reconcile required"
        )

    @staticmethod
    @translate_backend_errors
    def get_report(db: Session, report_id: int) -> db_models.Report:
        """
        Get a report with its author.

        Raises:
            ReportNotFoundException: If report not found
        """
        report = ReportRepository(db).get_with_author(report_id)
        if not report:
            raise ReportNotFoundException(f"Report {report_id} not found")
        return report

    @staticmethod
    @translate_backend_errors
    def list_reports(
        db: Session,
        status: db_models.ReportStatus | None = None,
        category: db_models.ReportCategory | None = None,
    ) -> list[db_models.Report]:
        """All reports, newest first, optionally filtered."""
        return ReportRepository(db).list_with_authors(status=status, category=category)

    @staticmethod
    @translate_backend_errors
    def list_reports_for_owner(
        db: Session, session: AuthSession
    ) -> list[db_models.Report]:
        return ReportRepository(db).list_with_authors(user_id=session.profile_id)

    @staticmethod
    @translate_backend_errors
    def post_update(
        db: Session,
        session: AuthSession,
        report_id: int,
        comment: str,
        new_status: db_models.ReportStatus | None = None,
    ) -> db_models.ReportUpdate:
        """
        Comment on a report and, for admins, change its status.

        A status supplied by a non-admin is ignored. The status change and the
        audit row are written in the same commit, so the log never references
        a status the report does not show.

        Args:
            db: Database session
            session: Acting principal
            report_id: Report ID
            comment: Comment text
            new_status: Optional new status

        Returns:
            Created report update

        Raises:
            EmptyCommentException: If the comment is blank
            ReportNotFoundException: If report not found
            InsufficientPermissionsException: If the actor is neither owner nor admin
        """
        text = (comment or "").strip()
        if not text:
            raise EmptyCommentException()

        report_repo = ReportRepository(db)
        update_repo = ReportUpdateRepository(db)

        report = report_repo.get_by_id(report_id)
        if not report:
            raise ReportNotFoundException(f"Report {report_id} not found")

        require_can_comment(session, report)

        update = db_models.ReportUpdate(
            report_id=report.id,
            user_id=session.profile_id,
            comment=text,
        )

        if (
            new_status is not None
            and is_admin(session)
            and new_status != report.status
        ):
            previous = report.status
            correction = is_correction(previous, new_status)
            now = datetime.now(timezone.utc)

            report.status = new_status
            report.updated_at = now
            if new_status == db_models.ReportStatus.RESUELTO:
                report.resolved_at = now
            elif previous == db_models.ReportStatus.RESUELTO:
                report.resolved_at = None

            update.status = new_status
            update.previous_status = previous
            update.is_correction = correction

            if correction:
                logger.warning(
                    f"Report {report.id} corrected from {previous.value} to "
                    f"{new_status.value} by profile {session.profile_id}"
                )
            else:
                logger.info(
                    f"Report {report.id} moved from {previous.value} to "
                    f"{new_status.value} by profile {session.profile_id}"
                )

        update_repo.add(update)
        update_repo.commit()
        update_repo.refresh(update)
        return update

    @staticmethod
    @translate_backend_errors
    def list_updates(db: Session, report_id: int) -> list[db_models.ReportUpdate]:
        """
        Audit trail of a report, newest first.

        Raises:
            ReportNotFoundException: If report not found
        """
        report_repo = ReportRepository(db)
        if not report_repo.exists(id=report_id):
            raise ReportNotFoundException(f"Report {report_id} not found")
        return ReportUpdateRepository(db).list_for_report(report_id)

    @staticmethod
    @translate_backend_errors
    def assign_report(
        db: Session, session: AuthSession, report_id: int, assignee_id: int
    ) -> db_models.Report:
        """
        Assign a report to an administrator.

        Raises:
            InsufficientPermissionsException: If the actor is not an admin
            ReportNotFoundException: If report not found
            ProfileNotFoundException: If the assignee does not exist
            ValidationException: If the assignee is not an admin
        """
        require_admin(session)

        report_repo = ReportRepository(db)
        report = report_repo.get_by_id(report_id)
        if not report:
            raise ReportNotFoundException(f"Report {report_id} not found")

        assignee = ProfileRepository(db).get_by_id(assignee_id)
        if not assignee:
            raise ProfileNotFoundException(f"Profile {assignee_id} not found")
        if not can_manage_reports(assignee):
            raise ValidationException("Reports can only be assigned to administrators")

        report.assigned_to = assignee.id
        report.updated_at = datetime.now(timezone.utc)
        report = report_repo.update(report)
        logger.info(
            f"Report {report.id} assigned to profile {assignee.id} by {session.profile_id}"
        )
        return report

    @staticmethod
    @translate_backend_errors
    def assigned_summary(
        db: Session, session: AuthSession
    ) -> schemas.AssignedReportsSummary:
        """Counts of reports assigned to an admin, by progress."""
        require_admin(session)
        assigned = ReportRepository(db).list_assigned_to(session.profile_id)
        return schemas.AssignedReportsSummary(
            total_assigned=len(assigned),
            resolved=sum(
                1 for r in assigned if r.status == db_models.ReportStatus.RESUELTO
            ),
            in_progress=sum(
                1 for r in assigned if r.status == db_models.ReportStatus.EN_PROCESO
            ),
        )
