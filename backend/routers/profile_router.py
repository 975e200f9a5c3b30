"""Profile router endpoints for the signed-in principal."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
from repositories.database import get_db
from services.points_service import PointsService
from services.profile_service import ProfileService

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("/summary", response_model=schemas.ProfileSummary)
def get_summary(
    db: Session = Depends(get_db),
    session: auth.AuthSession = Depends(auth.get_current_session),
):
    return ProfileService.get_summary(db, session)


@router.get("/reconcile", response_model=schemas.PointsReconciliation)
def reconcile_points(
    db: Session = Depends(get_db),
    session: auth.AuthSession = Depends(auth.get_current_session),
):
    """Compare the stored balance with the activity and redemption ledger."""
    return PointsService.reconcile_points(db, session.profile_id)
