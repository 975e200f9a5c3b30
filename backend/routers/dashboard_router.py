from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
from repositories.database import get_db
from services.dashboard_service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/", response_model=schemas.DashboardStats)
def get_dashboard(
    db: Session = Depends(get_db),
    session: auth.AuthSession = Depends(auth.get_admin_session),
):
    """Report counts by status and category, recent reports and user count."""
    return DashboardService.get_stats(db, session)
