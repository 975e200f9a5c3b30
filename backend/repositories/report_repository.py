"""
Report repository for database operations.
"""

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

import repositories.db_models as db_models
from repositories.base import BaseRepository


class ReportRepository(BaseRepository[db_models.Report]):
    """Repository for Report entity operations."""

    def __init__(self, db: Session):
        super().__init__(db_models.Report, db)

    def get_with_author(self, report_id: int) -> db_models.Report | None:
        """Get a report with its author's profile loaded."""
        return (
            self.db.query(db_models.Report)
            .options(joinedload(db_models.Report.author))
            .filter(db_models.Report.id == report_id)
            .first()
        )

    def list_with_authors(
        self,
        status: db_models.ReportStatus | None = None,
        category: db_models.ReportCategory | None = None,
        user_id: int | None = None,
    ) -> list[db_models.Report]:
        """
        List reports newest first with the author's name embedded.

        Args:
            status: Optional status filter
            category: Optional category filter
            user_id: Optional owner filter

        Returns:
            Reports ordered by created_at descending
        """
        query = self.db.query(db_models.Report).options(
            joinedload(db_models.Report.author)
        )
        if status is not None:
            query = query.filter(db_models.Report.status == status)
        if category is not None:
            query = query.filter(db_models.Report.category == category)
        if user_id is not None:
            query = query.filter(db_models.Report.user_id == user_id)
        return query.order_by(
            db_models.Report.created_at.desc(), db_models.Report.id.desc()
        ).all()

    def list_uncredited_for_owner(self, user_id: int) -> list[db_models.Report]:
        """
        Get a profile's reports that have no reporte_valido activity linked.

        Args:
            user_id: Owner profile ID

        Returns:
            Uncredited reports, oldest first
        """
        credited = (
            self.db.query(db_models.Activity.id)
            .filter(db_models.Activity.report_id == db_models.Report.id)
            .exists()
        )
        return (
            self.db.query(db_models.Report)
            .filter(db_models.Report.user_id == user_id, ~credited)
            .order_by(db_models.Report.created_at.asc(), db_models.Report.id.asc())
            .all()
        )

    def list_assigned_to(self, profile_id: int) -> list[db_models.Report]:
        """Get reports assigned to an admin."""
        return (
            self.db.query(db_models.Report)
            .filter(db_models.Report.assigned_to == profile_id)
            .all()
        )

    def count_by_owner(self, user_id: int) -> int:
        return (
            self.db.query(func.count(db_models.Report.id))
            .filter(db_models.Report.user_id == user_id)
            .scalar()
            or 0
        )
