"""Display helpers: enum normalization, filter buckets, and grouping.

Beginner terms:
- Bucket: the coarse category a filter chip on the console selects
  (DOCS, MEMORY, FILE, ...).
- Grouping: turning a flat list into an ordered mapping for rendering
  (activities per day, shared tasks per owner).
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, date, datetime
from typing import Any, Literal

from .models import (
    Activity,
    OutputAction,
    OutputItem,
    OutputStatus,
    SharedTask,
    SharedTaskView,
)

ActivityBucket = Literal["TASK", "FILE", "MESSAGE", "EXEC", "OTHER"]
OutputBucket = Literal["DOCS", "MEMORY", "GITHUB", "SLIDE", "OTHER"]

ACTIVITY_FILTERS = ("ALL", "TASK", "FILE", "MESSAGE", "EXEC")
OUTPUT_FILTERS = ("ALL", "ACTION", "DOCS", "MEMORY", "GITHUB", "SLIDE", "OTHER")

UNKNOWN_DATE = "unknown"

_OUTPUT_STATUSES: tuple[OutputStatus, ...] = ("draft", "review", "final")
_OUTPUT_ACTIONS: tuple[OutputAction, ...] = ("review", "approve", "feedback", "read")
_PRIORITY_ORDER = {"high": 0, "medium": 1, "low": 2}


def normalize_activity_filter(activity_type: Any) -> ActivityBucket:
    value = activity_type.lower() if isinstance(activity_type, str) else ""
    if value == "task":
        return "TASK"
    if value == "file":
        return "FILE"
    if value == "message":
        return "MESSAGE"
    # git commits are shown alongside command executions.
    if value in ("exec", "git"):
        return "EXEC"
    return "OTHER"


def normalize_output_type(output_type: Any) -> OutputBucket:
    value = output_type.strip().lower() if isinstance(output_type, str) else ""
    if value in ("google-docs", "docs", "doc"):
        return "DOCS"
    if value == "memory":
        return "MEMORY"
    if value == "github":
        return "GITHUB"
    if value in ("slide", "slides"):
        return "SLIDE"
    return "OTHER"


def normalize_output_status(status: Any) -> OutputStatus:
    """Unknown or missing status is treated as final."""
    value = status.strip().lower() if isinstance(status, str) else ""
    for candidate in _OUTPUT_STATUSES:
        if value == candidate:
            return candidate
    return "final"


def normalize_output_action(action: Any) -> OutputAction | None:
    value = action.strip().lower() if isinstance(action, str) else ""
    for candidate in _OUTPUT_ACTIONS:
        if value == candidate:
            return candidate
    return None


def filter_activities(activities: Iterable[Activity], bucket: str) -> list[Activity]:
    wanted = bucket.upper()
    if wanted == "ALL":
        return list(activities)
    return [item for item in activities if normalize_activity_filter(item.type) == wanted]


def filter_outputs(outputs: Iterable[OutputItem], bucket: str) -> list[OutputItem]:
    """Select outputs for a console filter chip; ACTION means "needs someone"."""
    wanted = bucket.upper()
    if wanted == "ALL":
        return list(outputs)
    if wanted == "ACTION":
        return [item for item in outputs if normalize_output_action(item.action) is not None]
    return [item for item in outputs if normalize_output_type(item.type) == wanted]


def group_activities_by_date(activities: Iterable[Activity]) -> dict[str, list[Activity]]:
    """Group by calendar day (UTC), newest day first; unknown days go last."""
    groups: dict[str, list[Activity]] = {}
    for activity in activities:
        parsed = parse_timestamp(activity.timestamp)
        key = parsed.date().isoformat() if parsed else UNKNOWN_DATE
        groups.setdefault(key, []).append(activity)

    ordered_keys = sorted((key for key in groups if key != UNKNOWN_DATE), reverse=True)
    if UNKNOWN_DATE in groups:
        ordered_keys.append(UNKNOWN_DATE)
    return {key: groups[key] for key in ordered_keys}


def group_shared_tasks_by_owner(
    tasks: Iterable[SharedTask],
    owner_order: Iterable[str] = (),
) -> dict[str, list[SharedTask]]:
    """Group shared tasks per owner.

    Owners listed in `owner_order` come first in that order, the rest
    alphabetically. Within an owner: open tasks before completed ones, then by
    due date (missing dates last), then by priority.
    """
    groups: dict[str, list[SharedTask]] = {}
    for task in tasks:
        groups.setdefault(task.owner, []).append(task)

    preferred = [owner for owner in owner_order if owner in groups]
    remaining = sorted(owner for owner in groups if owner not in preferred)
    return {
        owner: sorted(groups[owner], key=_shared_task_sort_key)
        for owner in [*preferred, *remaining]
    }


def is_overdue(due_date: str, today: date | None = None) -> bool:
    parsed = parse_timestamp(due_date)
    if parsed is None:
        return False
    reference = today or datetime.now(tz=UTC).date()
    return parsed.date() < reference


def flag_overdue(
    groups: dict[str, list[SharedTask]],
    today: date | None = None,
) -> dict[str, list[SharedTaskView]]:
    """Attach `overdue` to each task; completed tasks are never overdue."""
    reference = today or datetime.now(tz=UTC).date()
    return {
        owner: [
            SharedTaskView.model_validate(
                {
                    **task.model_dump(),
                    "overdue": not task.completed and is_overdue(task.due_date, reference),
                }
            )
            for task in tasks
        ]
        for owner, tasks in groups.items()
    }


def parse_timestamp(value: Any) -> datetime | None:
    """Parse ISO dates/datetimes (``Z`` suffix allowed); None when unparseable."""
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def _shared_task_sort_key(task: SharedTask) -> tuple[bool, bool, str, int]:
    due = parse_timestamp(task.due_date)
    return (
        task.completed,
        due is None,
        due.isoformat() if due else "",
        _PRIORITY_ORDER.get(task.priority.lower(), len(_PRIORITY_ORDER)),
    )
