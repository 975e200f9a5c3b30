"""
Points ledger service.

Credits are appended to the ``activities`` table and applied to the stored
balance in the same transaction. Redemptions debit the balance with a single
conditional UPDATE so the balance can never go below zero, even when two
devices redeem at the same moment.
"""

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from authentication.auth import AuthSession
from models.config import settings
from models.exceptions import (
    InactiveRewardException,
    InsufficientPointsException,
    ProfileNotFoundException,
    RewardNotFoundException,
    RewardOutOfStockException,
    ValidationException,
)
from repositories.activity_repository import ActivityRepository
from repositories.database import translate_backend_errors
from repositories.profile_repository import ProfileRepository
from repositories.report_repository import ReportRepository
from repositories.reward_repository import RewardRepository, UserRewardRepository


def points_for(activity_type: db_models.ActivityType) -> int:
    """Fixed number of points credited for an activity type."""
    return {
        db_models.ActivityType.REPORTE_VALIDO: settings.POINTS_REPORT_CREATED,
        db_models.ActivityType.EDUCACION: settings.POINTS_CONTENT_VIEW,
        db_models.ActivityType.RECICLAJE: settings.POINTS_RECYCLING,
        db_models.ActivityType.COMPARTIR: settings.POINTS_SHARE,
    }[activity_type]


class PointsService:
    """Service for point accrual and reward redemption."""

    @staticmethod
    def stage_activity(
        db: Session,
        profile_id: int,
        activity_type: db_models.ActivityType,
        description: str,
        report_id: int | None = None,
    ) -> db_models.Activity:
        """
        Add an activity row and its balance increment to the open transaction.

        Nothing is committed; the caller commits together with its own writes.

        Raises:
            ProfileNotFoundException: If the profile does not exist
        """
        amount = points_for(activity_type)
        activity = db_models.Activity(
            user_id=profile_id,
            activity_type=activity_type,
            points_earned=amount,
            description=description[:300],
            report_id=report_id,
        )
        ActivityRepository(db).add(activity)
        if not ProfileRepository(db).increment_points(profile_id, amount):
            raise ProfileNotFoundException(f"Profile {profile_id} not found")
        return activity

    @staticmethod
    @translate_backend_errors
    def record_activity(
        db: Session,
        profile_id: int,
        activity_type: db_models.ActivityType,
        description: str,
        points_earned: int | None = None,
        report_id: int | None = None,
    ) -> db_models.Activity:
        """
        Append an activity and credit its points in one transaction.

        Args:
            db: Database session
            profile_id: Profile credited
            activity_type: Kind of participation
            description: Human-readable ledger line
            points_earned: Optional expected amount; must match the fixed
                amount for the activity type
            report_id: Report that earned a reporte_valido credit

        Returns:
            Created activity

        Raises:
            ValidationException: If points_earned disagrees with the fixed amount
            ProfileNotFoundException: If the profile does not exist
        """
        if points_earned is not None and points_earned != points_for(activity_type):
            raise ValidationException(
                f"{activity_type.value} activities are worth {points_for(activity_type)} points"
            )

        activity_repo = ActivityRepository(db)
        try:
            activity = PointsService.stage_activity(
                db, profile_id, activity_type, description, report_id=report_id
            )
            activity_repo.commit()
        except ProfileNotFoundException:
            activity_repo.rollback()
            raise

        activity_repo.refresh(activity)
        logger.info(
            f"Credited {activity.points_earned} points to profile {profile_id} "
            f"({activity_type.value})"
        )
        return activity

    @staticmethod
    @translate_backend_errors
    def redeem(db: Session, session: AuthSession, reward_id: int) -> schemas.RedemptionResult:
        """
        Redeem a reward against the principal's balance.

        Args:
            db: Database session
            session: Redeeming principal
            reward_id: Reward to redeem

        Returns:
            The redemption record and the balance left afterwards

        Raises:
            RewardNotFoundException: If the reward does not exist
            InactiveRewardException: If the reward is not active
            InsufficientPointsException: If the balance does not cover the reward
            RewardOutOfStockException: If a limited reward has no units left
        """
        reward_repo = RewardRepository(db)
        user_reward_repo = UserRewardRepository(db)
        profile_repo = ProfileRepository(db)

        reward = reward_repo.get_by_id(reward_id)
        if not reward:
            raise RewardNotFoundException(f"Reward {reward_id} not found")
        if not bool(reward.is_active):
            raise InactiveRewardException(reward_id)

        required = int(reward.points_required)
        available = profile_repo.get_points(session.profile_id)
        if available is None:
            raise ProfileNotFoundException(f"Profile {session.profile_id} not found")
        if available < required:
            raise InsufficientPointsException(available, required)

        # The check above may be stale by now; the conditional debit is authoritative
        if not profile_repo.debit_points_if_available(session.profile_id, required):
            profile_repo.rollback()
            current = profile_repo.get_points(session.profile_id) or 0
            logger.warning(
                f"Redemption of reward {reward_id} by profile {session.profile_id} "
                f"lost a race for the balance"
            )
            raise InsufficientPointsException(current, required)

        if not reward_repo.take_one_unit(reward_id):
            profile_repo.rollback()
            raise RewardOutOfStockException(reward_id)

        redemption = db_models.UserReward(
            user_id=session.profile_id,
            reward_id=reward_id,
            status=db_models.UserRewardStatus.PENDIENTE,
            points_spent=required,
        )
        user_reward_repo.add(redemption)
        user_reward_repo.commit()
        user_reward_repo.refresh(redemption)

        remaining = profile_repo.get_points(session.profile_id) or 0
        logger.info(
            f"Profile {session.profile_id} redeemed reward {reward_id} "
            f"for {required} points ({remaining} left)"
        )
        return schemas.RedemptionResult(
            redemption=schemas.UserReward.model_validate(redemption),
            remaining_points=remaining,
        )

    @staticmethod
    @translate_backend_errors
    def list_rewards(db: Session) -> list[db_models.Reward]:
        """Active rewards ordered by price."""
        return RewardRepository(db).list_active()

    @staticmethod
    @translate_backend_errors
    def list_activities(db: Session, session: AuthSession) -> list[db_models.Activity]:
        """The principal's most recent ledger entries."""
        return ActivityRepository(db).list_recent_for_user(
            session.profile_id, settings.ACTIVITY_HISTORY_LIMIT
        )

    @staticmethod
    @translate_backend_errors
    def list_redemptions(db: Session, session: AuthSession) -> list[db_models.UserReward]:
        """The principal's redemptions with the reward embedded."""
        return UserRewardRepository(db).list_for_user(session.profile_id)

    @staticmethod
    @translate_backend_errors
    def reconcile_points(db: Session, profile_id: int) -> schemas.PointsReconciliation:
        """
        Compare the stored balance with credits minus redemptions.

        Reports whose credit never landed are listed and their points counted
        in ``expected``, so a lost credit shows up as negative drift.

        Raises:
            ProfileNotFoundException: If the profile does not exist
        """
        stored = ProfileRepository(db).get_points(profile_id)
        if stored is None:
            raise ProfileNotFoundException(f"Profile {profile_id} not found")

        credited = ActivityRepository(db).sum_points_for_user(profile_id)
        spent = UserRewardRepository(db).sum_points_spent(profile_id)
        uncredited = [
            r.id for r in ReportRepository(db).list_uncredited_for_owner(profile_id)
        ]
        owed = len(uncredited) * points_for(db_models.ActivityType.REPORTE_VALIDO)
        expected = int(credited) - int(spent) + owed
        drift = stored - expected
        if drift:
            logger.warning(
                f"Points drift for profile {profile_id}: stored={stored} "
                f"expected={expected} uncredited_reports={uncredited}"
            )
        return schemas.PointsReconciliation(
            stored=stored,
            expected=expected,
            drift=drift,
            uncredited_reports=uncredited,
        )

    @staticmethod
    @translate_backend_errors
    def credit_missing_reports(
        db: Session, profile_id: int
    ) -> schemas.PointsReconciliation:
        """
        Credit every report of a profile that has no linked credit.

        Each report is credited in its own transaction. A report credited
        concurrently by someone else hits the unique report link and is skipped.

        Returns:
            Reconciliation after the repair

        Raises:
            ProfileNotFoundException: If the profile does not exist
        """
        if ProfileRepository(db).get_points(profile_id) is None:
            raise ProfileNotFoundException(f"Profile {profile_id} not found")

        for report in ReportRepository(db).list_uncredited_for_owner(profile_id):
            try:
                PointsService.record_activity(
                    db,
                    profile_id,
                    db_models.ActivityType.REPORTE_VALIDO,
                    f"Reporte creado: {report.title}",
                    report_id=report.id,
                )
            except IntegrityError:
                db.rollback()
                logger.info(f"Report {report.id} was already credited")
                continue
            logger.warning(f"Recovered missing credit for report {report.id}")

        return PointsService.reconcile_points(db, profile_id)
