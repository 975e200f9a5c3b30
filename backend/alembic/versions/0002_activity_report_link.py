"""Link report credits to their report

Revision ID: 0002_activity_report_link
Revises: 0001_initial
Create Date: 2026-10-19

Adds activities.report_id so a reporte_valido credit can be traced back to
the report that earned it:
- report_id: nullable foreign key to reports.id
- uq_activities_report_id: at most one credit per report

Reports filed before this revision have no linked credit and will be listed
as uncredited by reconciliation until their owner's balance is repaired.
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0002_activity_report_link"
down_revision = "0001_initial"
branch_labels = None
depends_on = None


def upgrade() -> None:
    with op.batch_alter_table("activities") as batch_op:
        batch_op.add_column(
            sa.Column(
                "report_id",
                sa.Integer(),
                nullable=True,
                comment="Report credited by this activity (reporte_valido only)",
            )
        )
        batch_op.create_foreign_key(
            "fk_activities_report_id", "reports", ["report_id"], ["id"]
        )
        batch_op.create_unique_constraint("uq_activities_report_id", ["report_id"])


def downgrade() -> None:
    with op.batch_alter_table("activities") as batch_op:
        batch_op.drop_constraint("uq_activities_report_id", type_="unique")
        batch_op.drop_constraint("fk_activities_report_id", type_="foreignkey")
        batch_op.drop_column("report_id")
