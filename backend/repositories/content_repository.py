"""Repositories for educational content and citizen interactions with it."""

from sqlalchemy import func, update
from sqlalchemy.orm import Session

import repositories.db_models as db_models
from repositories.base import BaseRepository


class ContentRepository(BaseRepository[db_models.EducationalContent]):
    """Repository for EducationalContent operations."""

    def __init__(self, db: Session):
        super().__init__(db_models.EducationalContent, db)

    def list_published(self) -> list[db_models.EducationalContent]:
        """Published content, newest first."""
        return (
            self.db.query(db_models.EducationalContent)
            .filter(db_models.EducationalContent.is_published.is_(True))
            .order_by(
                db_models.EducationalContent.created_at.desc(),
                db_models.EducationalContent.id.desc(),
            )
            .all()
        )

    def increment_views(self, content_id: int) -> None:
        """Add one view, evaluated by the database, without committing."""
        self.db.execute(
            update(db_models.EducationalContent)
            .where(db_models.EducationalContent.id == content_id)
            .values(views=db_models.EducationalContent.views + 1)
            .execution_options(synchronize_session=False)
        )


class ContentInteractionRepository(BaseRepository[db_models.ContentInteraction]):
    """Repository for ContentInteraction operations."""

    def __init__(self, db: Session):
        super().__init__(db_models.ContentInteraction, db)

    def get_interaction(
        self,
        user_id: int,
        content_id: int,
        interaction_type: db_models.InteractionType,
    ) -> db_models.ContentInteraction | None:
        """
        Get a single interaction of a type for a (user, content) pair.

        Args:
            user_id: Profile ID
            content_id: Content ID
            interaction_type: view, like or complete

        Returns:
            ContentInteraction if found, None otherwise
        """
        return self.find_one_by(
            user_id=user_id, content_id=content_id, interaction_type=interaction_type
        )

    def count_likes_by_content(self, content_ids: list[int]) -> dict[int, int]:
        """Batch count likes for several content items."""
        if not content_ids:
            return {}
        rows = (
            self.db.query(
                db_models.ContentInteraction.content_id,
                func.count(db_models.ContentInteraction.id),
            )
            .filter(
                db_models.ContentInteraction.content_id.in_(content_ids),
                db_models.ContentInteraction.interaction_type
                == db_models.InteractionType.LIKE,
            )
            .group_by(db_models.ContentInteraction.content_id)
            .all()
        )
        return {content_id: count for content_id, count in rows}

    def get_user_interactions(
        self, user_id: int, content_ids: list[int]
    ) -> set[tuple[int, db_models.InteractionType]]:
        """
        Get (content_id, interaction_type) pairs a user has for the given content.

        Args:
            user_id: Profile ID
            content_ids: Content IDs to check

        Returns:
            Set of (content_id, interaction_type) tuples
        """
        if not content_ids:
            return set()
        rows = (
            self.db.query(
                db_models.ContentInteraction.content_id,
                db_models.ContentInteraction.interaction_type,
            )
            .filter(
                db_models.ContentInteraction.user_id == user_id,
                db_models.ContentInteraction.content_id.in_(content_ids),
            )
            .all()
        )
        return {(row[0], row[1]) for row in rows}
