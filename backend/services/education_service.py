"""Service for educational content and citizen interactions with it."""

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from authentication.auth import AuthSession
from models.exceptions import ContentNotFoundException
from repositories.content_repository import (
    ContentInteractionRepository,
    ContentRepository,
)
from repositories.database import translate_backend_errors
from services.points_service import PointsService, points_for


class EducationService:
    """Service for educational content business logic."""

    @staticmethod
    def _get_published(db: Session, content_id: int) -> db_models.EducationalContent:
        content = ContentRepository(db).get_by_id(content_id)
        if not content or not bool(content.is_published):
            raise ContentNotFoundException(f"Content {content_id} not found")
        return content

    @staticmethod
    @translate_backend_errors
    def list_published_content(
        db: Session, session: AuthSession | None = None
    ) -> list[schemas.EducationalContent]:
        """
        Published content, newest first, with like counts and the caller's flags.

        Args:
            db: Database session
            session: Optional principal used for liked_by_me/viewed_by_me

        Returns:
            List of content items
        """
        contents = ContentRepository(db).list_published()
        content_ids = [c.id for c in contents]
        interaction_repo = ContentInteractionRepository(db)

        likes = interaction_repo.count_likes_by_content(content_ids)
        mine = (
            interaction_repo.get_user_interactions(session.profile_id, content_ids)
            if session
            else set()
        )

        result = []
        for content in contents:
            item = schemas.EducationalContent.model_validate(content)
            item.likes = likes.get(content.id, 0)
            item.liked_by_me = (content.id, db_models.InteractionType.LIKE) in mine
            item.viewed_by_me = (content.id, db_models.InteractionType.VIEW) in mine
            result.append(item)
        return result

    @staticmethod
    @translate_backend_errors
    def record_content_view(
        db: Session, session: AuthSession, content_id: int
    ) -> schemas.ContentViewResult:
        """
        Register the principal's first view of a content item.

        The first view inserts the interaction, adds one to the view counter and
        credits the educacion activity, all in one commit. Later views change
        nothing.

        Raises:
            ContentNotFoundException: If content is missing or unpublished
        """
        content_repo = ContentRepository(db)
        interaction_repo = ContentInteractionRepository(db)

        content = EducationService._get_published(db, content_id)

        if interaction_repo.exists(
            user_id=session.profile_id,
            content_id=content_id,
            interaction_type=db_models.InteractionType.VIEW,
        ):
            return schemas.ContentViewResult(
                first_view=False, views=content.views, points_awarded=0
            )

        interaction_repo.add(
            db_models.ContentInteraction(
                user_id=session.profile_id,
                content_id=content_id,
                interaction_type=db_models.InteractionType.VIEW,
            )
        )
        content_repo.increment_views(content_id)
        PointsService.stage_activity(
            db,
            session.profile_id,
            db_models.ActivityType.EDUCACION,
            f"Leyó: {content.title}",
        )
        try:
            interaction_repo.commit()
        except IntegrityError:
            # A concurrent request recorded the same first view
            interaction_repo.rollback()
            content_repo.refresh(content)
            return schemas.ContentViewResult(
                first_view=False, views=content.views, points_awarded=0
            )

        content_repo.refresh(content)
        awarded = points_for(db_models.ActivityType.EDUCACION)
        logger.info(
            f"Profile {session.profile_id} viewed content {content_id} (+{awarded} points)"
        )
        return schemas.ContentViewResult(
            first_view=True, views=content.views, points_awarded=awarded
        )

    @staticmethod
    @translate_backend_errors
    def toggle_like(
        db: Session, session: AuthSession, content_id: int
    ) -> schemas.LikeToggleResult:
        """
        Like a content item, or remove the like if already present.

        No points are awarded for likes.

        Raises:
            ContentNotFoundException: If content is missing or unpublished
        """
        interaction_repo = ContentInteractionRepository(db)
        EducationService._get_published(db, content_id)

        existing = interaction_repo.get_interaction(
            session.profile_id, content_id, db_models.InteractionType.LIKE
        )
        if existing:
            interaction_repo.delete(existing)
            liked = False
        else:
            interaction_repo.create(
                db_models.ContentInteraction(
                    user_id=session.profile_id,
                    content_id=content_id,
                    interaction_type=db_models.InteractionType.LIKE,
                )
            )
            liked = True

        likes = interaction_repo.count_likes_by_content([content_id]).get(content_id, 0)
        return schemas.LikeToggleResult(liked=liked, likes=likes)

    @staticmethod
    @translate_backend_errors
    def mark_complete(
        db: Session, session: AuthSession, content_id: int
    ) -> schemas.ContentCompleteResult:
        """Record that the principal completed an activity. Idempotent, no points."""
        interaction_repo = ContentInteractionRepository(db)
        EducationService._get_published(db, content_id)

        if not interaction_repo.exists(
            user_id=session.profile_id,
            content_id=content_id,
            interaction_type=db_models.InteractionType.COMPLETE,
        ):
            interaction_repo.create(
                db_models.ContentInteraction(
                    user_id=session.profile_id,
                    content_id=content_id,
                    interaction_type=db_models.InteractionType.COMPLETE,
                )
            )
        return schemas.ContentCompleteResult(completed=True)
