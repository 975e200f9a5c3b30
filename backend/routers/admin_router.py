from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
from repositories.database import get_db
from services.auth_service import AuthService
from services.points_service import PointsService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.put("/profiles/{profile_id}/role", response_model=schemas.Profile)
def change_role(
    profile_id: int,
    role_update: schemas.ProfileRoleUpdate,
    db: Session = Depends(get_db),
    session: auth.AuthSession = Depends(auth.get_current_session),
):
    """
    Change a profile's role.

    Restricted to super administrators; nobody can change their own role.
    """
    return AuthService.change_role(db, session, profile_id, role_update.role)


@router.get(
    "/profiles/{profile_id}/reconcile", response_model=schemas.PointsReconciliation
)
def reconcile_profile_points(
    profile_id: int,
    db: Session = Depends(get_db),
    session: auth.AuthSession = Depends(auth.get_admin_session),
):
    """Check a profile's stored balance against its ledger."""
    return PointsService.reconcile_points(db, profile_id)


@router.post(
    "/profiles/{profile_id}/credit-missing-reports",
    response_model=schemas.PointsReconciliation,
)
def credit_missing_reports(
    profile_id: int,
    db: Session = Depends(get_db),
    session: auth.AuthSession = Depends(auth.get_admin_session),
):
    """Credit reports whose points never landed, then reconcile."""
    return PointsService.credit_missing_reports(db, profile_id)
