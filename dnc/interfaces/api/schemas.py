"""Request/Response schemas for the dnc HTTP API.

These Pydantic models define the API contract. Field names on the wire
are camelCase, matching the stored task documents.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from dnc.domain.task import Task


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# =============================================================================
# Task Schemas
# =============================================================================


class InitTaskRequest(_CamelModel):
    """Request to create a root task."""

    task_id: str = Field(alias="taskId")
    goal: str
    acceptance: str


class AppendChildRequest(_CamelModel):
    """Request to append a child under a parent in a tree."""

    parent_task_id: str = Field(alias="parentTaskId")
    task_id: str = Field(alias="taskId")
    goal: str
    acceptance: str


class UpdateTaskRequest(_CamelModel):
    """Partial update for a single node. Omitted fields stay as they are."""

    goal: Optional[str] = None
    status: Optional[str] = None
    acceptance: Optional[str] = None
    additional_instructions: Optional[str] = Field(default=None, alias="additionalInstructions")


class UpdateTaskResponse(BaseModel):
    """Updated node plus an advisory transition warning, if any."""

    task: Task
    warning: Optional[str] = None


class TreeSummaryResponse(_CamelModel):
    """Status counts for a tree."""

    root_task_id: str = Field(alias="rootTaskId")
    goal: str
    total: int
    counts: dict[str, int]
    progress_percent: float = Field(alias="progressPercent")


# =============================================================================
# Misc Schemas
# =============================================================================


class HealthResponse(BaseModel):
    status: str = "ok"
    message: str = "dnc server is running"


class ErrorResponse(BaseModel):
    error: str
