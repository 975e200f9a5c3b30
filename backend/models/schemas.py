from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from repositories.db_models import (
    ActivityType,
    ContentCategory,
    ProfileRole,
    ReportCategory,
    ReportPriority,
    ReportStatus,
    RewardCategory,
    UserRewardStatus,
)


# Profile Schemas
class ProfileBase(BaseModel):
    email: EmailStr
    full_name: str


class ProfileCreate(ProfileBase):
    password: str


class Profile(ProfileBase):
    id: int
    role: ProfileRole
    points: int
    avatar_url: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProfileRoleUpdate(BaseModel):
    role: ProfileRole


class AssignedReportsSummary(BaseModel):
    """Counts of reports assigned to an admin."""

    total_assigned: int
    resolved: int
    in_progress: int


class ProfileSummary(BaseModel):
    profile: Profile
    reports_filed: int
    assigned: Optional[AssignedReportsSummary] = None


class PointsReconciliation(BaseModel):
    """
    Stored balance compared with the balance implied by the ledger.

    ``expected`` includes the credit still owed for each uncredited report.
    """

    stored: int
    expected: int
    drift: int
    uncredited_reports: List[int] = []


# Token Schemas
class Token(BaseModel):
    access_token: str
    token_type: str


class TokenData(BaseModel):
    email: Optional[str] = None
    session_version: int = 0


class SessionInfo(BaseModel):
    """Signed-in principal joined with its profile row."""

    id: int
    email: EmailStr
    full_name: str
    role: ProfileRole
    points: int
    created_at: datetime


# Report Schemas
class ReportCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    category: ReportCategory
    priority: ReportPriority = ReportPriority.MEDIA
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address: Optional[str] = Field(default=None, max_length=300)


class Report(BaseModel):
    id: int
    user_id: int
    title: str
    description: str
    category: ReportCategory
    status: ReportStatus
    priority: ReportPriority
    latitude: float
    longitude: float
    address: Optional[str] = None
    assigned_to: Optional[int] = None
    resolved_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    author_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ReportUpdateCreate(BaseModel):
    comment: str
    status: Optional[ReportStatus] = None


class ReportUpdate(BaseModel):
    id: int
    report_id: int
    user_id: int
    status: Optional[ReportStatus] = None
    previous_status: Optional[ReportStatus] = None
    is_correction: bool = False
    comment: str
    created_at: datetime
    author_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ReportAssign(BaseModel):
    assignee_id: int


# Points ledger schemas
class Activity(BaseModel):
    id: int
    user_id: int
    activity_type: ActivityType
    points_earned: int
    description: str
    report_id: Optional[int] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class Reward(BaseModel):
    id: int
    title: str
    description: str
    points_required: int
    category: RewardCategory
    image_url: Optional[str] = None
    available_quantity: Optional[int] = None
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class UserReward(BaseModel):
    id: int
    user_id: int
    reward_id: int
    status: UserRewardStatus
    points_spent: int
    redeemed_at: datetime
    reward: Optional[Reward] = None

    model_config = ConfigDict(from_attributes=True)


class RedemptionResult(BaseModel):
    redemption: UserReward
    remaining_points: int


# Education schemas
class EducationalContent(BaseModel):
    id: int
    title: str
    content: str
    category: ContentCategory
    image_url: Optional[str] = None
    views: int
    is_published: bool
    created_at: datetime
    likes: int = 0
    liked_by_me: bool = False
    viewed_by_me: bool = False

    model_config = ConfigDict(from_attributes=True)


class ContentViewResult(BaseModel):
    first_view: bool
    views: int
    points_awarded: int


class LikeToggleResult(BaseModel):
    liked: bool
    likes: int


class ContentCompleteResult(BaseModel):
    completed: bool


# Dashboard schemas
class DashboardStats(BaseModel):
    """Derived read model for the admin dashboard."""

    total: int
    pendiente: int
    en_proceso: int
    resuelto: int
    rechazado: int
    categories: Dict[str, int]
    category_percentages: Dict[str, float]
    recent_reports: List[Report]
    total_users: int
