"""
Services layer for business logic.

This package contains service modules that encapsulate business logic
separate from the API routes.
"""

from .auth_service import AuthService
from .dashboard_service import DashboardService, aggregate_reports
from .education_service import EducationService
from .points_service import PointsService
from .profile_service import ProfileService
from .report_service import ReportService

__all__ = [
    "AuthService",
    "DashboardService",
    "EducationService",
    "PointsService",
    "ProfileService",
    "ReportService",
    "aggregate_reports",
]
