"""
Database models using SQLAlchemy 2.0 style with Mapped type hints.

Tables mirror the citizen-engagement schema: profiles, reports,
report_updates, activities, rewards, user_rewards, educational_content
and content_interactions.
"""

import enum
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from repositories.database import Base


class ProfileRole(str, enum.Enum):
    CITIZEN = "citizen"
    MUNICIPAL_ADMIN = "municipal_admin"
    SUPER_ADMIN = "super_admin"


class ReportCategory(str, enum.Enum):
    BASURA = "basura"
    CONTAMINACION = "contaminacion"
    TALA_ILEGAL = "tala_ilegal"
    MAL_USO_ESPACIOS = "mal_uso_espacios"


class ReportStatus(str, enum.Enum):
    PENDIENTE = "pendiente"
    EN_PROCESO = "en_proceso"
    RESUELTO = "resuelto"
    RECHAZADO = "rechazado"


class ReportPriority(str, enum.Enum):
    BAJA = "baja"
    MEDIA = "media"
    ALTA = "alta"


class ActivityType(str, enum.Enum):
    """Kinds of participation that earn points."""

    REPORTE_VALIDO = "reporte_valido"
    RECICLAJE = "reciclaje"
    EDUCACION = "educacion"
    COMPARTIR = "compartir"


class RewardCategory(str, enum.Enum):
    DESCUENTO = "descuento"
    RECONOCIMIENTO = "reconocimiento"
    BENEFICIO = "beneficio"


class UserRewardStatus(str, enum.Enum):
    PENDIENTE = "pendiente"
    ENTREGADO = "entregado"
    USADO = "usado"


class ContentCategory(str, enum.Enum):
    CAMPANA = "campana"
    CONSEJO = "consejo"
    ACTIVIDAD = "actividad"


class InteractionType(str, enum.Enum):
    VIEW = "view"
    LIKE = "like"
    COMPLETE = "complete"


def _utc_now() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(timezone.utc)


class Profile(Base):
    __tablename__ = "profiles"
    __table_args__ = (
        CheckConstraint("points >= 0", name="ck_profiles_points_non_negative"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    email: Mapped[str] = mapped_column(String, unique=True, index=True, nullable=False)
    full_name: Mapped[str] = mapped_column(String, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String, nullable=False)
    role: Mapped[ProfileRole] = mapped_column(
        Enum(ProfileRole), default=ProfileRole.CITIZEN, nullable=False
    )
    points: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    avatar_url: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    # Bumped on sign-out; tokens carry the version they were issued with
    session_version: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)

    # Relationships
    reports: Mapped[List["Report"]] = relationship(
        "Report", back_populates="author", foreign_keys="Report.user_id"
    )
    activities: Mapped[List["Activity"]] = relationship(
        "Activity", back_populates="profile"
    )
    user_rewards: Mapped[List["UserReward"]] = relationship(
        "UserReward", back_populates="profile"
    )


class Report(Base):
    __tablename__ = "reports"
    __table_args__ = (
        Index("ix_reports_status", "status"),
        Index("ix_reports_category", "category"),
        Index("ix_reports_created_at", "created_at"),
        Index("ix_reports_assigned_to", "assigned_to"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("profiles.id"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[ReportCategory] = mapped_column(
        Enum(ReportCategory), nullable=False
    )
    status: Mapped[ReportStatus] = mapped_column(
        Enum(ReportStatus), default=ReportStatus.PENDIENTE, nullable=False
    )
    priority: Mapped[ReportPriority] = mapped_column(
        Enum(ReportPriority), default=ReportPriority.MEDIA, nullable=False
    )
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    address: Mapped[Optional[str]] = mapped_column(String(300), nullable=True)
    assigned_to: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("profiles.id"), nullable=True
    )
    resolved_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utc_now, onupdate=_utc_now
    )

    # Relationships
    author: Mapped["Profile"] = relationship(
        "Profile", back_populates="reports", foreign_keys=[user_id]
    )
    assignee: Mapped[Optional["Profile"]] = relationship(
        "Profile", foreign_keys=[assigned_to]
    )
    updates: Mapped[List["ReportUpdate"]] = relationship(
        "ReportUpdate", back_populates="report"
    )

    @property
    def author_name(self) -> str | None:
        return self.author.full_name if self.author else None


class ReportUpdate(Base):
    """Append-only audit trail of comments and status changes on a report."""

    __tablename__ = "report_updates"
    __table_args__ = (Index("ix_report_updates_report_created", "report_id", "created_at"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    report_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("reports.id"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("profiles.id"), nullable=False
    )
    status: Mapped[Optional[ReportStatus]] = mapped_column(
        Enum(ReportStatus), nullable=True
    )
    previous_status: Mapped[Optional[ReportStatus]] = mapped_column(
        Enum(ReportStatus), nullable=True
    )
    is_correction: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    comment: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)

    # Relationships
    report: Mapped["Report"] = relationship("Report", back_populates="updates")
    author: Mapped["Profile"] = relationship("Profile")

    @property
    def author_name(self) -> str | None:
        return self.author.full_name if self.author else None


class Activity(Base):
    """Ledger entry crediting points to a profile."""

    __tablename__ = "activities"
    __table_args__ = (
        Index("ix_activities_user_created", "user_id", "created_at"),
        UniqueConstraint("report_id", name="uq_activities_report_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("profiles.id"), nullable=False
    )
    # Set for reporte_valido credits; one credit per report
    report_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("reports.id", name="fk_activities_report_id"), nullable=True
    )
    activity_type: Mapped[ActivityType] = mapped_column(
        Enum(ActivityType), nullable=False
    )
    points_earned: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str] = mapped_column(String(300), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)

    profile: Mapped["Profile"] = relationship("Profile", back_populates="activities")


class Reward(Base):
    __tablename__ = "rewards"
    __table_args__ = (
        CheckConstraint("points_required >= 0", name="ck_rewards_points_required"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    points_required: Mapped[int] = mapped_column(Integer, nullable=False)
    category: Mapped[RewardCategory] = mapped_column(
        Enum(RewardCategory), nullable=False
    )
    image_url: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    # None means unlimited
    available_quantity: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)


class UserReward(Base):
    __tablename__ = "user_rewards"
    __table_args__ = (Index("ix_user_rewards_user_redeemed", "user_id", "redeemed_at"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("profiles.id"), nullable=False
    )
    reward_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("rewards.id"), nullable=False
    )
    status: Mapped[UserRewardStatus] = mapped_column(
        Enum(UserRewardStatus), default=UserRewardStatus.PENDIENTE, nullable=False
    )
    # Snapshot of the price paid, used when reconciling balances
    points_spent: Mapped[int] = mapped_column(Integer, nullable=False)
    redeemed_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)

    profile: Mapped["Profile"] = relationship("Profile", back_populates="user_rewards")
    reward: Mapped["Reward"] = relationship("Reward")


class EducationalContent(Base):
    __tablename__ = "educational_content"
    __table_args__ = (Index("ix_educational_content_published", "is_published"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[ContentCategory] = mapped_column(
        Enum(ContentCategory), nullable=False
    )
    image_url: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    author_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("profiles.id"), nullable=True
    )
    is_published: Mapped[bool] = mapped_column(Boolean, default=False)
    views: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utc_now, onupdate=_utc_now
    )

    interactions: Mapped[List["ContentInteraction"]] = relationship(
        "ContentInteraction", back_populates="content", cascade="all, delete-orphan"
    )


class ContentInteraction(Base):
    """Tracks views, likes and completions of educational content."""

    __tablename__ = "content_interactions"
    __table_args__ = (
        UniqueConstraint(
            "user_id",
            "content_id",
            "interaction_type",
            name="uq_content_interaction_user_content_type",
        ),
        Index("ix_content_interactions_content", "content_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    content_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("educational_content.id", ondelete="CASCADE"),
        nullable=False,
    )
    interaction_type: Mapped[InteractionType] = mapped_column(
        Enum(InteractionType), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)

    content: Mapped["EducationalContent"] = relationship(
        "EducationalContent", back_populates="interactions"
    )
