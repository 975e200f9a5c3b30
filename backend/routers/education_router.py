from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
from repositories.database import get_db
from services.education_service import EducationService

router = APIRouter(prefix="/education", tags=["education"])


@router.get("/", response_model=List[schemas.EducationalContent])
def list_content(
    db: Session = Depends(get_db),
    session: auth.AuthSession = Depends(auth.get_current_session),
):
    """Published campaigns, tips and activities, newest first."""
    return EducationService.list_published_content(db, session)


@router.post("/{content_id}/view", response_model=schemas.ContentViewResult)
def view_content(
    content_id: int,
    db: Session = Depends(get_db),
    session: auth.AuthSession = Depends(auth.get_current_session),
):
    """Record a view. Only the first view per profile earns points."""
    return EducationService.record_content_view(db, session, content_id)


@router.post("/{content_id}/like", response_model=schemas.LikeToggleResult)
def toggle_like(
    content_id: int,
    db: Session = Depends(get_db),
    session: auth.AuthSession = Depends(auth.get_current_session),
):
    return EducationService.toggle_like(db, session, content_id)


@router.post("/{content_id}/complete", response_model=schemas.ContentCompleteResult)
def complete_content(
    content_id: int,
    db: Session = Depends(get_db),
    session: auth.AuthSession = Depends(auth.get_current_session),
):
    return EducationService.mark_complete(db, session, content_id)
