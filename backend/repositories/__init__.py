"""
Repository pattern implementation for data access layer.
"""

from .activity_repository import ActivityRepository
from .base import BaseRepository
from .content_repository import ContentInteractionRepository, ContentRepository
from .profile_repository import ProfileRepository
from .report_repository import ReportRepository
from .report_update_repository import ReportUpdateRepository
from .reward_repository import RewardRepository, UserRewardRepository

__all__ = [
    "ActivityRepository",
    "BaseRepository",
    "ContentInteractionRepository",
    "ContentRepository",
    "ProfileRepository",
    "ReportRepository",
    "ReportUpdateRepository",
    "RewardRepository",
    "UserRewardRepository",
]
