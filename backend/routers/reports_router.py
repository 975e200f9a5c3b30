from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from repositories.database import get_db
from services.report_service import ReportService

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/", response_model=List[schemas.Report])
def list_reports(
    status: Optional[db_models.ReportStatus] = None,
    category: Optional[db_models.ReportCategory] = None,
    db: Session = Depends(get_db),
    session: auth.AuthSession = Depends(auth.get_current_session),
):
    """List reports newest first, optionally filtered by status and category."""
    return ReportService.list_reports(db, status=status, category=category)


@router.post("/", response_model=schemas.Report)
def create_report(
    report: schemas.ReportCreate,
    db: Session = Depends(get_db),
    session: auth.AuthSession = Depends(auth.get_current_session),
):
    """
    File a new environmental report.

    Latitude and longitude are required; the reporter is credited with points.
    """
    return ReportService.create_report(db, session, report)


@router.get("/mine", response_model=List[schemas.Report])
def list_my_reports(
    db: Session = Depends(get_db),
    session: auth.AuthSession = Depends(auth.get_current_session),
):
    return ReportService.list_reports_for_owner(db, session)


@router.get("/{report_id}", response_model=schemas.Report)
def get_report(
    report_id: int,
    db: Session = Depends(get_db),
    session: auth.AuthSession = Depends(auth.get_current_session),
):
    return ReportService.get_report(db, report_id)


@router.get("/{report_id}/updates", response_model=List[schemas.ReportUpdate])
def list_updates(
    report_id: int,
    db: Session = Depends(get_db),
    session: auth.AuthSession = Depends(auth.get_current_session),
):
    """Audit trail of a report, newest first."""
    return ReportService.list_updates(db, report_id)


@router.post("/{report_id}/updates", response_model=schemas.ReportUpdate)
def post_update(
    report_id: int,
    update: schemas.ReportUpdateCreate,
    db: Session = Depends(get_db),
    session: auth.AuthSession = Depends(auth.get_current_session),
):
    """
    Comment on a report.

    - comment: required text
    - status: new status, applied only when the author is an administrator
    """
    return ReportService.post_update(
        db, session, report_id, update.comment, new_status=update.status
    )


@router.put("/{report_id}/assign", response_model=schemas.Report)
def assign_report(
    report_id: int,
    assignment: schemas.ReportAssign,
    db: Session = Depends(get_db),
    session: auth.AuthSession = Depends(auth.get_admin_session),
):
    return ReportService.assign_report(db, session, report_id, assignment.assignee_id)
