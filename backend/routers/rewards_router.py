from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
from repositories.database import get_db
from services.points_service import PointsService

router = APIRouter(prefix="/rewards", tags=["rewards"])


@router.get("/", response_model=List[schemas.Reward])
def list_rewards(
    db: Session = Depends(get_db),
    session: auth.AuthSession = Depends(auth.get_current_session),
):
    """Active rewards, cheapest first."""
    return PointsService.list_rewards(db)


@router.post("/{reward_id}/redeem", response_model=schemas.RedemptionResult)
def redeem_reward(
    reward_id: int,
    db: Session = Depends(get_db),
    session: auth.AuthSession = Depends(auth.get_current_session),
):
    """Redeem a reward with the current balance."""
    return PointsService.redeem(db, session, reward_id)


@router.get("/mine", response_model=List[schemas.UserReward])
def list_my_rewards(
    db: Session = Depends(get_db),
    session: auth.AuthSession = Depends(auth.get_current_session),
):
    return PointsService.list_redemptions(db, session)


@router.get("/activities", response_model=List[schemas.Activity])
def list_my_activities(
    db: Session = Depends(get_db),
    session: auth.AuthSession = Depends(auth.get_current_session),
):
    """Latest point-earning activities of the current profile."""
    return PointsService.list_activities(db, session)
