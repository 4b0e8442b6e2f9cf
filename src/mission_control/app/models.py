"""Pydantic models shared across API, storage, search, and views.

Beginner terms used in this file:
- Model: a typed schema class used for validation/serialization.
- Alias: the camelCase JSON key a field is stored under (createdAt, dueDate).
- extra="allow": unknown keys in stored records are kept and written back,
  but nothing in search or views reads them.
- Records are lenient (any status string, numeric ids read as text); request
  bodies are strict and reject values outside the known enums.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag
from pydantic.alias_generators import to_camel

TaskStatus = Literal["pending", "in-progress", "completed"]
TaskPriority = Literal["low", "medium", "high"]
OutputStatus = Literal["draft", "review", "final"]
OutputAction = Literal["review", "approve", "feedback", "read"]
SearchResultType = Literal["activity", "task"]


class RecordModel(BaseModel):
    """Base for records persisted in the JSON data directory."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        coerce_numbers_to_str=True,
    )


class RequestModel(BaseModel):
    """Base for request bodies; same key style as records, unknown keys ignored."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Activity(RecordModel):
    """A logged workspace event (file edit, command execution, message)."""

    id: str
    timestamp: str = ""
    type: str = ""
    action: str = ""
    details: str = ""


class Task(RecordModel):
    """A to-do item shown on the dashboard and the weekly calendar."""

    id: str
    title: str = ""
    # Any string is kept; the known values are enforced on request bodies only.
    status: str = "pending"
    priority: str = "medium"
    created_at: str = ""
    completed_at: str | None = None
    description: str | None = None
    # Calendar slot used by the weekly view.
    date: str | None = None
    time: str | None = None


def _search_item_kind(value: Any) -> str:
    # Both record types accept extra keys, so pick the branch explicitly.
    if isinstance(value, Task):
        return "task"
    if isinstance(value, Activity):
        return "activity"
    if isinstance(value, dict) and "title" in value and "details" not in value:
        return "task"
    return "activity"


SearchItem = Annotated[
    Annotated[Activity, Tag("activity")] | Annotated[Task, Tag("task")],
    Discriminator(_search_item_kind),
]


class SearchResult(BaseModel):
    """One ranked search hit; item is the stored record, unmodified."""

    type: SearchResultType
    item: SearchItem
    score: int


class SearchResponse(BaseModel):
    """Response body for GET /api/search."""

    query: str
    # Number of results returned after the top-N cut.
    total: int
    results: list[SearchResult] = Field(default_factory=list)


class SharedMemo(RecordModel):
    id: str
    direction: str
    type: str = "memo"
    message: str
    created_at: str
    read: bool = False


class SharedTask(RecordModel):
    id: str
    owner: str
    title: str
    priority: str = "medium"
    due_date: str = ""
    completed: bool = False


class SharedTaskView(SharedTask):
    """Shared task as listed per owner, with the overdue flag computed server-side."""

    overdue: bool = False


class OutputItem(RecordModel):
    """A deliverable: document, memory entry, repository link, or slides."""

    id: str
    title: str
    type: str
    url: str
    summary: str | None = None
    tags: list[str] = Field(default_factory=list)
    project: str | None = None
    status: str = "final"
    action: str | None = None
    linear_issue_id: str | None = None
    created_at: str


class CreateActivityRequest(RequestModel):
    """Request body for POST /api/activities."""

    type: str = Field(min_length=1)
    action: str = Field(min_length=1)
    details: str = ""


class CreateTaskRequest(RequestModel):
    """Request body for POST /api/tasks."""

    # min_length enforces non-empty title at API boundary.
    title: str = Field(min_length=1)
    status: TaskStatus = "pending"
    priority: TaskPriority = "medium"
    description: str | None = None
    date: str | None = None
    time: str | None = None


class UpdateTaskRequest(RequestModel):
    """Request body for PUT /api/tasks; only provided fields change."""

    id: str = Field(min_length=1)
    title: str | None = Field(default=None, min_length=1)
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    description: str | None = None
    date: str | None = None
    time: str | None = None
    completed_at: str | None = None


class DeleteRequest(RequestModel):
    """Request body for DELETE endpoints."""

    id: str = Field(min_length=1)


class CreateMemoRequest(RequestModel):
    direction: str = Field(min_length=1)
    message: str = Field(min_length=1)
    type: str | None = None


class UpdateMemoRequest(RequestModel):
    id: str = Field(min_length=1)
    read: bool


class CreateSharedTaskRequest(RequestModel):
    owner: str = Field(min_length=1)
    title: str = Field(min_length=1)
    priority: str = "medium"
    due_date: str = ""


class UpdateSharedTaskRequest(RequestModel):
    id: str = Field(min_length=1)
    completed: bool


class CreateOutputRequest(RequestModel):
    """Request body for POST /api/outputs; loose strings are normalized by storage."""

    title: str = ""
    type: str = ""
    url: str = ""
    summary: str | None = None
    # Non-string entries are dropped by storage.
    tags: list[Any] = Field(default_factory=list)
    project: str | None = None
    status: str | None = None
    action: str | None = None
    linear_issue_id: str | None = None
