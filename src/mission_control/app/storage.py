"""Flat-file JSON storage backend for the dashboard collections.

Beginner terms:
- Collection: one JSON file holding an array of records (tasks.json, ...).
- Read-modify-write: load the whole array, change it in memory, write it back.
  There is no locking; the last writer wins.
- Newest first: records are prepended, so the files read top-down by recency.
"""

from __future__ import annotations

import json
import logging
import uuid
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from .models import (
    Activity,
    CreateActivityRequest,
    CreateMemoRequest,
    CreateOutputRequest,
    CreateSharedTaskRequest,
    CreateTaskRequest,
    OutputItem,
    SharedMemo,
    SharedTask,
    Task,
    UpdateTaskRequest,
)
from .views import normalize_output_action, normalize_output_status, parse_timestamp

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)

DEFAULT_MEMO_TYPE = "memo"
DEFAULT_REPORT_LIMIT = 14


class StorageError(RuntimeError):
    """Raised when a collection file exists but cannot be decoded."""


class JsonCollection(Generic[RecordT]):
    """One JSON array file mapped to a list of typed records."""

    def __init__(self, path: Path, model: type[RecordT]) -> None:
        self.path = path
        self.model = model

    def read(self) -> list[RecordT]:
        """Load all records; a missing file or non-array document reads as empty."""
        if not self.path.exists():
            return []
        try:
            with self.path.open("r", encoding="utf-8") as f:
                parsed = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise StorageError(f"Cannot read {self.path.name}: {exc}") from exc
        if not isinstance(parsed, list):
            logger.warning("storage event=non_array_document path=%s", self.path)
            return []
        try:
            return [self.model.model_validate(item) for item in parsed]
        except ValidationError as exc:
            raise StorageError(f"Invalid record in {self.path.name}: {exc}") from exc

    def write(self, records: list[RecordT]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = [
            record.model_dump(mode="json", by_alias=True, exclude_none=True) for record in records
        ]
        self.path.write_text(
            json.dumps(payload, indent=2, ensure_ascii=False),
            encoding="utf-8",
        )


class MissionControlStorage:
    """All dashboard collections living under one data directory."""

    def __init__(
        self,
        data_dir: Path,
        *,
        report_limit: int = DEFAULT_REPORT_LIMIT,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.data_dir = Path(data_dir)
        self.report_limit = report_limit
        # Injectable clock keeps ids and timestamps deterministic in tests.
        self._clock = clock or (lambda: datetime.now(tz=UTC))
        self.activities = JsonCollection(self.data_dir / "activities.json", Activity)
        self.tasks = JsonCollection(self.data_dir / "tasks.json", Task)
        self.memos = JsonCollection(self.data_dir / "shared-memo.json", SharedMemo)
        self.shared_tasks = JsonCollection(self.data_dir / "shared-tasks.json", SharedTask)
        self.outputs = JsonCollection(self.data_dir / "outputs.json", OutputItem)
        self.projects_path = self.data_dir / "projects.json"
        self.reports_dir = self.data_dir / "reports"

    # Activities

    def list_activities(self) -> list[Activity]:
        return self.activities.read()

    def create_activity(self, payload: CreateActivityRequest) -> Activity:
        current = self.activities.read()
        activity = Activity(
            id=_next_numeric_id(current),
            timestamp=self._now_iso(),
            type=payload.type,
            action=payload.action,
            details=payload.details,
        )
        self.activities.write([activity, *current])
        return activity

    # Tasks

    def list_tasks(self) -> list[Task]:
        return self.tasks.read()

    def create_task(self, payload: CreateTaskRequest) -> Task:
        current = self.tasks.read()
        task = Task(
            id=_next_numeric_id(current),
            title=payload.title,
            status=payload.status,
            priority=payload.priority,
            created_at=self._now_iso(),
            completed_at=self._now_iso() if payload.status == "completed" else None,
            description=payload.description,
            date=payload.date,
            time=payload.time,
        )
        self.tasks.write([task, *current])
        return task

    def update_task(self, payload: UpdateTaskRequest) -> Task:
        """Merge provided fields into the stored task; the id never changes."""
        current = self.tasks.read()
        index = _index_of(current, payload.id)
        if index is None:
            raise KeyError(f"Task {payload.id} does not exist")

        existing = current[index]
        changes = payload.model_dump(exclude_unset=True, exclude={"id"})
        if changes.get("status") == "completed" and existing.status != "completed":
            changes.setdefault("completed_at", self._now_iso())
        updated = existing.model_copy(update=changes)
        # model_copy skips validation; round-trip so the merged record is checked.
        updated = Task.model_validate(updated.model_dump(by_alias=True))
        current[index] = updated
        self.tasks.write(current)
        return updated

    def delete_task(self, task_id: str) -> None:
        current = self.tasks.read()
        remaining = [task for task in current if task.id != task_id]
        if len(remaining) == len(current):
            raise KeyError(f"Task {task_id} does not exist")
        self.tasks.write(remaining)

    # Shared memos

    def list_memos(self) -> list[SharedMemo]:
        return self.memos.read()

    def create_memo(self, payload: CreateMemoRequest) -> SharedMemo:
        direction = payload.direction.strip()
        message = payload.message.strip()
        if not direction:
            raise ValueError("Direction is required.")
        if not message:
            raise ValueError("Message is required.")
        memo_type = (payload.type or "").strip() or DEFAULT_MEMO_TYPE

        memo = SharedMemo(
            id=str(uuid.uuid4()),
            direction=direction,
            type=memo_type,
            message=message,
            created_at=self._now_iso(),
            read=False,
        )
        self.memos.write([memo, *self.memos.read()])
        return memo

    def set_memo_read(self, memo_id: str, read: bool) -> SharedMemo:
        current = self.memos.read()
        index = _index_of(current, memo_id)
        if index is None:
            raise KeyError(f"Memo {memo_id} does not exist")
        current[index] = current[index].model_copy(update={"read": read})
        self.memos.write(current)
        return current[index]

    def delete_memo(self, memo_id: str) -> None:
        current = self.memos.read()
        remaining = [memo for memo in current if memo.id != memo_id]
        if len(remaining) == len(current):
            raise KeyError(f"Memo {memo_id} does not exist")
        self.memos.write(remaining)

    # Shared tasks

    def list_shared_tasks(self) -> list[SharedTask]:
        return self.shared_tasks.read()

    def create_shared_task(self, payload: CreateSharedTaskRequest) -> SharedTask:
        owner = payload.owner.strip()
        title = payload.title.strip()
        if not owner or not title:
            raise ValueError("owner and title are required.")
        task = SharedTask(
            id=str(uuid.uuid4()),
            owner=owner,
            title=title,
            priority=payload.priority.strip().lower() or "medium",
            due_date=payload.due_date.strip(),
            completed=False,
        )
        self.shared_tasks.write([task, *self.shared_tasks.read()])
        return task

    def set_shared_task_completed(self, task_id: str, completed: bool) -> SharedTask:
        current = self.shared_tasks.read()
        index = _index_of(current, task_id)
        if index is None:
            raise KeyError(f"Shared task {task_id} does not exist")
        current[index] = current[index].model_copy(update={"completed": completed})
        self.shared_tasks.write(current)
        return current[index]

    # Outputs

    def list_outputs(self) -> list[OutputItem]:
        return sort_by_created_at_desc(self.outputs.read())

    def create_output(self, payload: CreateOutputRequest) -> OutputItem:
        title = _safe_string(payload.title)
        output_type = _safe_string(payload.type)
        url = _safe_string(payload.url)
        if not title or not output_type or not url:
            raise ValueError("title, type, and url are required.")

        now = self._clock()
        output = OutputItem(
            id=f"out-{int(now.timestamp() * 1000)}",
            title=title,
            type=output_type,
            url=url,
            summary=_safe_string(payload.summary) or None,
            tags=_clean_tags(payload.tags),
            project=_safe_string(payload.project) or None,
            status=normalize_output_status(payload.status),
            action=normalize_output_action(payload.action),
            linear_issue_id=_safe_string(payload.linear_issue_id) or None,
            created_at=_iso(now),
        )
        self.outputs.write(sort_by_created_at_desc([output, *self.outputs.read()]))
        return output

    # Read-only documents

    def load_projects(self) -> Any:
        """Return projects.json as-is; any read or parse failure yields {}."""
        try:
            with self.projects_path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError):
            logger.warning("storage event=projects_unavailable path=%s", self.projects_path)
            return {}

    def list_reports(self) -> list[Any]:
        """Newest daily reports by file name; any failure yields []."""
        if not self.reports_dir.is_dir():
            return []
        try:
            files = sorted(
                (path for path in self.reports_dir.iterdir() if path.name.endswith(".json")),
                key=lambda path: path.name,
                reverse=True,
            )[: self.report_limit]
            return [json.loads(path.read_text(encoding="utf-8")) for path in files]
        except (OSError, ValueError):
            logger.warning("storage event=reports_unavailable path=%s", self.reports_dir)
            return []

    def _now_iso(self) -> str:
        return _iso(self._clock())


def sort_by_created_at_desc(outputs: list[OutputItem]) -> list[OutputItem]:
    """Newest first; unparseable timestamps sort as the epoch."""
    epoch = datetime.fromtimestamp(0, tz=UTC)
    return sorted(
        outputs,
        key=lambda item: parse_timestamp(item.created_at) or epoch,
        reverse=True,
    )


def _next_numeric_id(records: list[Any]) -> str:
    """Max numeric id + 1; non-numeric ids are ignored."""
    max_id = 0
    for record in records:
        try:
            max_id = max(max_id, int(record.id))
        except (TypeError, ValueError):
            continue
    return str(max_id + 1)


def _index_of(records: list[Any], record_id: str) -> int | None:
    for index, record in enumerate(records):
        if record.id == record_id:
            return index
    return None


def _safe_string(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _clean_tags(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def _iso(moment: datetime) -> str:
    # JavaScript-style ISO string (millisecond precision, Z suffix).
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")
