"""initial remediation schema

Revision ID: a1c4e7f2b905
Revises:
Create Date: 2026-01-12 09:14:02.381554

Devices, SecureBoot reports, remediation workflows and workflow executions.
"""

from collections.abc import Sequence
from typing import Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "a1c4e7f2b905"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "device",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("machine_name", sa.String(), nullable=False),
        sa.Column("domain_name", sa.String(), nullable=True),
        sa.Column("manufacturer", sa.String(), nullable=True),
        sa.Column("model", sa.String(), nullable=True),
        sa.Column("fleet_id", sa.String(), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=True),
        sa.Column("last_seen_at", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_device_machine_name", "device", ["machine_name"])
    op.create_index("ix_device_fleet_id", "device", ["fleet_id"])

    op.create_table(
        "secureboot_report",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("device_id", sa.String(), nullable=False),
        sa.Column("deployment_state", sa.String(), nullable=True),
        sa.Column("alerts_json", sa.Text(), nullable=True),
        sa.Column("certificates_json", sa.Text(), nullable=True),
        sa.Column("client_version", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["device_id"], ["device.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_secureboot_report_device_id", "secureboot_report", ["device_id"])
    op.create_index(
        "ix_secureboot_report_device_created",
        "secureboot_report",
        ["device_id", "created_at"],
    )

    op.create_table(
        "remediation_workflow",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("enabled", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("priority", sa.Integer(), server_default=sa.text("100"), nullable=False),
        sa.Column("trigger_json", sa.Text(), nullable=True),
        sa.Column("actions_json", sa.Text(), server_default="[]", nullable=False),
        *_timestamps(),
        sa.Column("created_by", sa.String(), nullable=True),
        sa.Column("updated_by", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_remediation_workflow_priority", "remediation_workflow", ["priority"]
    )

    op.create_table(
        "workflow_execution",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("workflow_id", sa.String(), nullable=False),
        sa.Column("device_id", sa.String(), nullable=False),
        sa.Column("report_id", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("result_message", sa.Text(), nullable=True),
        sa.Column("action_results", sa.JSON(), nullable=False),
        sa.ForeignKeyConstraint(
            ["workflow_id"], ["remediation_workflow.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["device_id"], ["device.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(
            ["report_id"], ["secureboot_report.id"], ondelete="SET NULL"
        ),
        sa.CheckConstraint(
            "status IN ('running', 'completed', 'failed')",
            name="workflow_execution_status_check",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_workflow_execution_workflow_id", "workflow_execution", ["workflow_id"]
    )
    op.create_index(
        "ix_workflow_execution_device_id", "workflow_execution", ["device_id"]
    )
    op.create_index("ix_workflow_execution_status", "workflow_execution", ["status"])
    op.create_index(
        "ix_workflow_execution_workflow_started",
        "workflow_execution",
        ["workflow_id", "started_at"],
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(
        "ix_workflow_execution_workflow_started", table_name="workflow_execution"
    )
    op.drop_index("ix_workflow_execution_status", table_name="workflow_execution")
    op.drop_index("ix_workflow_execution_device_id", table_name="workflow_execution")
    op.drop_index("ix_workflow_execution_workflow_id", table_name="workflow_execution")
    op.drop_table("workflow_execution")
    op.drop_index("ix_remediation_workflow_priority", table_name="remediation_workflow")
    op.drop_table("remediation_workflow")
    op.drop_index(
        "ix_secureboot_report_device_created", table_name="secureboot_report"
    )
    op.drop_index("ix_secureboot_report_device_id", table_name="secureboot_report")
    op.drop_table("secureboot_report")
    op.drop_index("ix_device_fleet_id", table_name="device")
    op.drop_index("ix_device_machine_name", table_name="device")
    op.drop_table("device")
