"""Repositories for the reward catalog and redemptions."""

from sqlalchemy import func, update
from sqlalchemy.orm import Session, joinedload

import repositories.db_models as db_models
from repositories.base import BaseRepository


class RewardRepository(BaseRepository[db_models.Reward]):
    """Repository for Reward catalog operations."""

    def __init__(self, db: Session):
        super().__init__(db_models.Reward, db)

    def list_active(self) -> list[db_models.Reward]:
        """Active rewards, cheapest first."""
        return (
            self.db.query(db_models.Reward)
            .filter(db_models.Reward.is_active.is_(True))
            .order_by(db_models.Reward.points_required.asc(), db_models.Reward.id.asc())
            .all()
        )

    def take_one_unit(self, reward_id: int) -> bool:
        """
        Decrement a limited reward's stock by one, without committing.

        Rewards with unlimited stock (NULL quantity) always succeed.

        Returns:
            False if the reward is limited and has no units left
        """
        result = self.db.execute(
            update(db_models.Reward)
            .where(
                db_models.Reward.id == reward_id,
                db_models.Reward.available_quantity.is_not(None),
                db_models.Reward.available_quantity > 0,
            )
            .values(available_quantity=db_models.Reward.available_quantity - 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 1:
            return True
        return self.exists(id=reward_id, available_quantity=None)


class UserRewardRepository(BaseRepository[db_models.UserReward]):
    """Repository for UserReward redemption records."""

    def __init__(self, db: Session):
        super().__init__(db_models.UserReward, db)

    def list_for_user(self, user_id: int) -> list[db_models.UserReward]:
        """Redemptions with their reward embedded, newest first."""
        return (
            self.db.query(db_models.UserReward)
            .options(joinedload(db_models.UserReward.reward))
            .filter(db_models.UserReward.user_id == user_id)
            .order_by(
                db_models.UserReward.redeemed_at.desc(), db_models.UserReward.id.desc()
            )
            .all()
        )

    def sum_points_spent(self, user_id: int) -> int:
        """Total points a profile has spent on redemptions."""
        return (
            self.db.query(func.coalesce(func.sum(db_models.UserReward.points_spent), 0))
            .filter(db_models.UserReward.user_id == user_id)
            .scalar()
        )
