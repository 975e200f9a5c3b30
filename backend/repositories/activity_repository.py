"""Repository for the points activity ledger."""

from sqlalchemy import func
from sqlalchemy.orm import Session

import repositories.db_models as db_models
from repositories.base import BaseRepository


class ActivityRepository(BaseRepository[db_models.Activity]):
    """Repository for Activity operations. Rows are never updated or deleted."""

    def __init__(self, db: Session):
        super().__init__(db_models.Activity, db)

    def list_recent_for_user(self, user_id: int, limit: int) -> list[db_models.Activity]:
        """
        Get a profile's latest activities, newest first.

        Args:
            user_id: Profile ID
            limit: Maximum number of activities

        Returns:
            List of activities
        """
        return (
            self.db.query(db_models.Activity)
            .filter(db_models.Activity.user_id == user_id)
            .order_by(db_models.Activity.created_at.desc(), db_models.Activity.id.desc())
            .limit(limit)
            .all()
        )

    def sum_points_for_user(self, user_id: int) -> int:
        """Total points ever credited to a profile."""
        return (
            self.db.query(func.coalesce(func.sum(db_models.Activity.points_earned), 0))
            .filter(db_models.Activity.user_id == user_id)
            .scalar()
        )
