"""Repository for report update (audit trail) operations."""

from sqlalchemy.orm import Session, joinedload

import repositories.db_models as db_models
from repositories.base import BaseRepository


class ReportUpdateRepository(BaseRepository[db_models.ReportUpdate]):
    """Repository for ReportUpdate CRUD operations."""

    def __init__(self, db: Session):
        """
        Initialize report update repository.

        Args:
            db: Database session
        """
        super().__init__(db_models.ReportUpdate, db)

    def list_for_report(self, report_id: int) -> list[db_models.ReportUpdate]:
        """
        Get all updates for a report, newest first, with author names.

        Args:
            report_id: Report ID

        Returns:
            List of updates ordered by created_at descending
        """
        return (
            self.db.query(db_models.ReportUpdate)
            .options(joinedload(db_models.ReportUpdate.author))
            .filter(db_models.ReportUpdate.report_id == report_id)
            .order_by(
                db_models.ReportUpdate.created_at.desc(),
                db_models.ReportUpdate.id.desc(),
            )
            .all()
        )
