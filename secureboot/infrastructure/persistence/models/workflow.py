"""RemediationWorkflow and WorkflowExecution ORM models."""

from datetime import datetime
from typing import Any

import sqlalchemy as sa
from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from secureboot.infrastructure.persistence.database import Base
from secureboot.infrastructure.persistence.models.mixins import CuidMixin, UserAuditMixin
from secureboot.shared.enums import WorkflowExecutionStatus


class RemediationWorkflow(CuidMixin, UserAuditMixin, Base):
    """Workflow definition. Table: remediation_workflow. Trigger + actions JSON text."""

    __tablename__ = "remediation_workflow"

    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    enabled: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=sa.true()
    )
    priority: Mapped[int] = mapped_column(
        Integer, nullable=False, default=100, server_default=sa.text("100"), index=True
    )
    trigger_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    actions_json: Mapped[str] = mapped_column(
        Text, nullable=False, default="[]", server_default="[]"
    )


class WorkflowExecution(CuidMixin, Base):
    """Workflow execution audit. Table: workflow_execution."""

    __tablename__ = "workflow_execution"

    workflow_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("remediation_workflow.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    device_id: Mapped[str] = mapped_column(
        String, ForeignKey("device.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    report_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("secureboot_report.id", ondelete="SET NULL"), nullable=True
    )
    status: Mapped[str] = mapped_column(String, nullable=False, index=True)
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    result_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    action_results: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list
    )

    __table_args__ = (
        Index("ix_workflow_execution_workflow_started", "workflow_id", "started_at"),
        CheckConstraint(
            "status IN ({})".format(
                ", ".join(
                    "'{}'".format(v.replace("'", "''"))
                    for v in WorkflowExecutionStatus.values()
                )
            ),
            name="workflow_execution_status_check",
        ),
    )
