"""
Dashboard read model.

Statistics are recomputed from the reports and profiles tables on every
request; nothing is cached or stored.
"""

from collections import Counter
from collections.abc import Iterable

from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from authentication.auth import AuthSession
from authentication.permissions import require_admin
from models.config import settings
from repositories.database import translate_backend_errors
from repositories.profile_repository import ProfileRepository
from repositories.report_repository import ReportRepository


def category_percentages(counts: dict[str, int], total: int) -> dict[str, float]:
    """Share of each category in percent, 0.0 for every category when total is 0."""
    return {
        category.value: (
            round(counts.get(category.value, 0) * 100 / total, 1) if total else 0.0
        )
        for category in db_models.ReportCategory
    }


def aggregate_reports(
    reports: Iterable[db_models.Report],
    total_users: int,
    recent_limit: int = 10,
) -> schemas.DashboardStats:
    """
    Derive dashboard statistics from a set of reports.

    Args:
        reports: Every report to count
        total_users: Number of profiles
        recent_limit: How many of the newest reports to include

    Returns:
        Totals per status and per category, category percentages and the
        newest reports
    """
    reports = list(reports)
    by_status = Counter(r.status for r in reports)
    by_category = Counter(r.category.value for r in reports)
    total = len(reports)

    recent = (
        sorted(reports, key=lambda r: (r.created_at, r.id), reverse=True)[:recent_limit]
        if recent_limit > 0
        else []
    )

    categories = {c.value: by_category.get(c.value, 0) for c in db_models.ReportCategory}
    return schemas.DashboardStats(
        total=total,
        pendiente=by_status.get(db_models.ReportStatus.PENDIENTE, 0),
        en_proceso=by_status.get(db_models.ReportStatus.EN_PROCESO, 0),
        resuelto=by_status.get(db_models.ReportStatus.RESUELTO, 0),
        rechazado=by_status.get(db_models.ReportStatus.RECHAZADO, 0),
        categories=categories,
        category_percentages=category_percentages(categories, total),
        recent_reports=[schemas.Report.model_validate(r) for r in recent],
        total_users=total_users,
    )


class DashboardService:
    """Service for the admin dashboard."""

    @staticmethod
    @translate_backend_errors
    def get_stats(db: Session, session: AuthSession) -> schemas.DashboardStats:
        """
        Compute dashboard statistics. Admins only.

        Raises:
            InsufficientPermissionsException: If the principal is not an admin
        """
        require_admin(session)
        return aggregate_reports(
            ReportRepository(db).list_with_authors(),
            ProfileRepository(db).count(),
            recent_limit=settings.DASHBOARD_RECENT_REPORTS,
        )
