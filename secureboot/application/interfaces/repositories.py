"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs or domain entities only; no infrastructure imports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from secureboot.application.dtos.device import DeviceResult, ReportResult
    from secureboot.application.dtos.workflow import (
        WorkflowExecutionHistoryItem,
        WorkflowRecord,
        WorkflowWrite,
    )
    from secureboot.domain.entities.execution import WorkflowExecution
    from secureboot.domain.entities.workflow import WorkflowDefinition


# Device repository interface
class IDeviceRepository(Protocol):
    """Protocol for device repository (DIP)."""

    async def get_device(self, device_id: str) -> DeviceResult | None:
        """Return device snapshot by ID."""

    async def merge_tags(self, device_id: str, tags: dict[str, Any]) -> dict[str, Any]:
        """Merge key/values into the device's tags; return the resulting tags."""


# Report repository interface
class IReportRepository(Protocol):
    """Protocol for SecureBoot report repository (DIP)."""

    async def get_report(self, report_id: str) -> ReportResult | None:
        """Return report by ID (raw alerts and certificate payloads)."""


# Workflow definition repository interface
class IWorkflowDefinitionRepository(Protocol):
    """Protocol for loading and maintaining remediation workflow definitions."""

    async def list_definitions(self) -> list[WorkflowDefinition]:
        """Return every definition (enabled or not), parsed, in load order."""

    async def list_records(self) -> list[WorkflowRecord]:
        """Return stored workflows ordered by priority then name."""

    async def get_record(self, workflow_id: str) -> WorkflowRecord | None:
        """Return stored workflow by ID."""

    async def create_record(self, data: WorkflowWrite, *, actor: str | None = None) -> WorkflowRecord:
        """Create a workflow."""

    async def update_record(
        self, workflow_id: str, data: WorkflowWrite, *, actor: str | None = None
    ) -> WorkflowRecord | None:
        """Replace a workflow's fields; None when not found."""

    async def delete_record(self, workflow_id: str) -> bool:
        """Delete a workflow; False when not found."""


# Workflow execution repository interface
class IWorkflowExecutionRepository(Protocol):
    """Protocol for the workflow execution audit trail."""

    async def add_execution(self, execution: WorkflowExecution) -> WorkflowExecution:
        """Store an execution and return it with its assigned id."""

    async def list_for_workflow(
        self, workflow_id: str, limit: int
    ) -> list[WorkflowExecutionHistoryItem]:
        """Return the newest executions of a workflow (newest first)."""
