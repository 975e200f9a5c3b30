"""initial schema
Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 00:00:00

Profiles, reports with their update trail, the points ledger, the reward
catalog and educational content.
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

report_status = sa.Enum(
    "PENDIENTE", "EN_PROCESO", "RESUELTO", "RECHAZADO", name="reportstatus"
)


def upgrade():
    op.create_table(
        "profiles",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("full_name", sa.String(), nullable=False),
        sa.Column("hashed_password", sa.String(), nullable=False),
        sa.Column(
            "role",
            sa.Enum("CITIZEN", "MUNICIPAL_ADMIN", "SUPER_ADMIN", name="profilerole"),
            nullable=False,
        ),
        sa.Column("points", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("avatar_url", sa.String(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=True),
        sa.Column(
            "session_version",
            sa.Integer(),
            nullable=False,
            server_default="0",
            comment="Bumped on sign-out to revoke issued tokens",
        ),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.CheckConstraint("points >= 0", name="ck_profiles_points_non_negative"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_profiles_id", "profiles", ["id"])
    op.create_index("ix_profiles_email", "profiles", ["email"], unique=True)

    op.create_table(
        "reports",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column(
            "category",
            sa.Enum(
                "BASURA",
                "CONTAMINACION",
                "TALA_ILEGAL",
                "MAL_USO_ESPACIOS",
                name="reportcategory",
            ),
            nullable=False,
        ),
        sa.Column("status", report_status, nullable=False),
        sa.Column(
            "priority",
            sa.Enum("BAJA", "MEDIA", "ALTA", name="reportpriority"),
            nullable=False,
        ),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("address", sa.String(length=300), nullable=True),
        sa.Column("assigned_to", sa.Integer(), nullable=True),
        sa.Column("resolved_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"]),
        sa.ForeignKeyConstraint(["assigned_to"], ["profiles.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_reports_id", "reports", ["id"])
    op.create_index("ix_reports_status", "reports", ["status"])
    op.create_index("ix_reports_category", "reports", ["category"])
    op.create_index("ix_reports_created_at", "reports", ["created_at"])
    op.create_index("ix_reports_assigned_to", "reports", ["assigned_to"])

    op.create_table(
        "report_updates",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("report_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("status", report_status, nullable=True),
        sa.Column(
            "previous_status",
            report_status,
            nullable=True,
        ),
        sa.Column("is_correction", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("comment", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["report_id"], ["reports.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_report_updates_id", "report_updates", ["id"])
    op.create_index(
        "ix_report_updates_report_created", "report_updates", ["report_id", "created_at"]
    )

    op.create_table(
        "activities",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column(
            "activity_type",
            sa.Enum(
                "REPORTE_VALIDO", "RECICLAJE", "EDUCACION", "COMPARTIR", name="activitytype"
            ),
            nullable=False,
        ),
        sa.Column("points_earned", sa.Integer(), nullable=False),
        sa.Column("description", sa.String(length=300), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_activities_id", "activities", ["id"])
    op.create_index("ix_activities_user_created", "activities", ["user_id", "created_at"])

    op.create_table(
        "rewards",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("points_required", sa.Integer(), nullable=False),
        sa.Column(
            "category",
            sa.Enum("DESCUENTO", "RECONOCIMIENTO", "BENEFICIO", name="rewardcategory"),
            nullable=False,
        ),
        sa.Column("image_url", sa.String(), nullable=True),
        sa.Column(
            "available_quantity",
            sa.Integer(),
            nullable=True,
            comment="Remaining stock, null for unlimited",
        ),
        sa.Column("is_active", sa.Boolean(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.CheckConstraint("points_required >= 0", name="ck_rewards_points_required"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_rewards_id", "rewards", ["id"])

    op.create_table(
        "user_rewards",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("reward_id", sa.Integer(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("PENDIENTE", "ENTREGADO", "USADO", name="userrewardstatus"),
            nullable=False,
        ),
        sa.Column("points_spent", sa.Integer(), nullable=False),
        sa.Column("redeemed_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"]),
        sa.ForeignKeyConstraint(["reward_id"], ["rewards.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_user_rewards_id", "user_rewards", ["id"])
    op.create_index(
        "ix_user_rewards_user_redeemed", "user_rewards", ["user_id", "redeemed_at"]
    )

    op.create_table(
        "educational_content",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column(
            "category",
            sa.Enum("CAMPANA", "CONSEJO", "ACTIVIDAD", name="contentcategory"),
            nullable=False,
        ),
        sa.Column("image_url", sa.String(), nullable=True),
        sa.Column("author_id", sa.Integer(), nullable=True),
        sa.Column("is_published", sa.Boolean(), nullable=True),
        sa.Column("views", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["author_id"], ["profiles.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_educational_content_id", "educational_content", ["id"])
    op.create_index(
        "ix_educational_content_published", "educational_content", ["is_published"]
    )

    op.create_table(
        "content_interactions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("content_id", sa.Integer(), nullable=False),
        sa.Column(
            "interaction_type",
            sa.Enum("VIEW", "LIKE", "COMPLETE", name="interactiontype"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["content_id"], ["educational_content.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "user_id",
            "content_id",
            "interaction_type",
            name="uq_content_interaction_user_content_type",
        ),
    )
    op.create_index("ix_content_interactions_id", "content_interactions", ["id"])
    op.create_index(
        "ix_content_interactions_content", "content_interactions", ["content_id"]
    )


def downgrade():
    op.drop_table("content_interactions")
    op.drop_table("educational_content")
    op.drop_table("user_rewards")
    op.drop_table("rewards")
    op.drop_table("activities")
    op.drop_table("report_updates")
    op.drop_table("reports")
    op.drop_table("profiles")
