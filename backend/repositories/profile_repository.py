"""
Profile repository for database operations.

Balance changes go through single UPDATE statements evaluated by the
database (``points = points + N``) so concurrent requests on the same
profile cannot overwrite each other.
"""

from sqlalchemy import func, update
from sqlalchemy.orm import Session

import repositories.db_models as db_models
from repositories.base import BaseRepository


class ProfileRepository(BaseRepository[db_models.Profile]):
    """Repository for Profile entity operations."""

    def __init__(self, db: Session):
        super().__init__(db_models.Profile, db)

    def get_by_email(self, email: str) -> db_models.Profile | None:
        """
        Get profile by email (case-insensitive).

        Args:
            email: Email address

        Returns:
            Profile if found, None otherwise
        """
        return (
            self.db.query(db_models.Profile)
            .filter(func.lower(db_models.Profile.email) == email.lower())
            .first()
        )

    def get_points(self, profile_id: int) -> int | None:
        """Read the stored balance straight from the database."""
        return (
            self.db.query(db_models.Profile.points)
            .filter(db_models.Profile.id == profile_id)
            .scalar()
        )

    def increment_points(self, profile_id: int, amount: int) -> bool:
        """
        Add points to a balance without committing.

        Args:
            profile_id: Profile ID
            amount: Non-negative number of points

        Returns:
            True if the profile row was updated
        """
        result = self.db.execute(
            update(db_models.Profile)
            .where(db_models.Profile.id == profile_id)
            .values(points=db_models.Profile.points + amount)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def debit_points_if_available(self, profile_id: int, amount: int) -> bool:
        """
        Subtract points only when the balance covers them, without committing.

        Executes ``UPDATE profiles SET points = points - N WHERE id = ? AND
        points >= N``. The check and the write are one statement, so two
        redemptions racing on the same balance cannot both succeed.

        Args:
            profile_id: Profile ID
            amount: Points to subtract

        Returns:
            True if the debit was applied, False if the balance was too low
        """
        result = self.db.execute(
            update(db_models.Profile)
            .where(
                db_models.Profile.id == profile_id,
                db_models.Profile.points >= amount,
            )
            .values(points=db_models.Profile.points - amount)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def bump_session_version(self, profile_id: int) -> None:
        """Invalidate every token issued so far for this profile."""
        self.db.execute(
            update(db_models.Profile)
            .where(db_models.Profile.id == profile_id)
            .values(session_version=db_models.Profile.session_version + 1)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
