from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest

from mission_control.app.models import (
    CreateActivityRequest,
    CreateMemoRequest,
    CreateOutputRequest,
    CreateSharedTaskRequest,
    CreateTaskRequest,
    UpdateTaskRequest,
)
from mission_control.app.storage import MissionControlStorage, StorageError


def _fixed_clock() -> datetime:
    return datetime(2024, 5, 1, 12, 30, 0, 123000, tzinfo=UTC)


@pytest.fixture
def storage(data_dir: Path) -> MissionControlStorage:
    return MissionControlStorage(data_dir, clock=_fixed_clock)


def _read(path: Path) -> list[dict]:
    return json.loads(path.read_text(encoding="utf-8"))


def test_missing_and_non_array_files_read_as_empty(storage: MissionControlStorage) -> None:
    assert storage.list_tasks() == []
    storage.tasks.path.write_text('{"tasks": []}', encoding="utf-8")
    assert storage.list_tasks() == []


def test_malformed_file_raises_storage_error(storage: MissionControlStorage) -> None:
    storage.activities.path.write_text("[", encoding="utf-8")
    with pytest.raises(StorageError):
        storage.list_activities()


def test_records_with_unknown_enum_values_and_numeric_ids_load(
    storage: MissionControlStorage,
) -> None:
    storage.tasks.path.write_text(
        json.dumps([{"id": 7, "title": "Other", "status": "blocked", "priority": "urgent"}]),
        encoding="utf-8",
    )
    storage.outputs.path.write_text(
        json.dumps(
            [
                {
                    "id": "out-1",
                    "title": "Deck",
                    "type": "slides",
                    "url": "u",
                    "status": "archived",
                    "action": "ping",
                    "createdAt": "2024-01-01T00:00:00.000Z",
                }
            ]
        ),
        encoding="utf-8",
    )

    [task] = storage.list_tasks()
    assert task.id == "7"
    assert (task.status, task.priority) == ("blocked", "urgent")

    updated = storage.update_task(UpdateTaskRequest(id="7", title="Renamed"))
    assert updated.status == "blocked"
    assert _read(storage.tasks.path)[0]["id"] == "7"

    [output] = storage.list_outputs()
    assert (output.status, output.action) == ("archived", "ping")


def test_create_activity_uses_next_numeric_id_and_prepends(
    storage: MissionControlStorage,
) -> None:
    storage.activities.path.write_text(
        json.dumps([{"id": "7", "type": "file"}, {"id": "legacy-id", "type": "exec"}]),
        encoding="utf-8",
    )

    activity = storage.create_activity(
        CreateActivityRequest(type="message", action="send", details="Posted standup")
    )

    assert activity.id == "8"
    assert activity.timestamp == "2024-05-01T12:30:00.123Z"
    stored = _read(storage.activities.path)
    assert [item["id"] for item in stored] == ["8", "7", "legacy-id"]


def test_task_update_merges_and_keeps_id(storage: MissionControlStorage) -> None:
    created = storage.create_task(CreateTaskRequest(title="Draft plan", priority="high"))

    updated = storage.update_task(UpdateTaskRequest(id=created.id, status="completed"))

    assert updated.id == created.id
    assert updated.title == "Draft plan"
    assert updated.priority == "high"
    assert updated.status == "completed"
    assert updated.completed_at == "2024-05-01T12:30:00.123Z"
    stored = _read(storage.tasks.path)
    assert stored[0]["completedAt"] == "2024-05-01T12:30:00.123Z"
    assert "description" not in stored[0]


def test_task_update_preserves_unknown_fields(storage: MissionControlStorage) -> None:
    storage.tasks.path.write_text(
        json.dumps([{"id": "1", "title": "Old", "calendarColor": "blue"}]),
        encoding="utf-8",
    )

    storage.update_task(UpdateTaskRequest(id="1", title="New"))

    assert _read(storage.tasks.path) == [
        {
            "id": "1",
            "title": "New",
            "status": "pending",
            "priority": "medium",
            "createdAt": "",
            "calendarColor": "blue",
        }
    ]


def test_task_update_and_delete_missing_raise_key_error(
    storage: MissionControlStorage,
) -> None:
    with pytest.raises(KeyError):
        storage.update_task(UpdateTaskRequest(id="404", title="x"))
    with pytest.raises(KeyError):
        storage.delete_task("404")


def test_memo_lifecycle(storage: MissionControlStorage) -> None:
    memo = storage.create_memo(CreateMemoRequest(direction="  to-ops ", message=" hello "))
    assert memo.direction == "to-ops"
    assert memo.message == "hello"
    assert memo.type == "memo"
    assert memo.read is False

    assert storage.set_memo_read(memo.id, True).read is True
    storage.delete_memo(memo.id)
    assert storage.list_memos() == []
    with pytest.raises(KeyError):
        storage.delete_memo(memo.id)


def test_memo_rejects_whitespace_message(storage: MissionControlStorage) -> None:
    with pytest.raises(ValueError, match="Message is required"):
        storage.create_memo(CreateMemoRequest(direction="to-ops", message="   "))


def test_shared_task_completion(storage: MissionControlStorage) -> None:
    task = storage.create_shared_task(
        CreateSharedTaskRequest(
            owner="kai",
            title="Book room",
            priority="HIGH",
            due_date="2024-05-03",
        )
    )
    assert task.priority == "high"

    done = storage.set_shared_task_completed(task.id, True)
    assert done.completed is True
    assert _read(storage.shared_tasks.path)[0]["dueDate"] == "2024-05-03"


def test_create_output_normalizes_fields(storage: MissionControlStorage) -> None:
    output = storage.create_output(
        CreateOutputRequest(
            title=" Q2 plan ",
            type="google-docs",
            url=" https://docs.example.com/q2 ",
            summary="   ",
            tags=[" plan ", "", 3, "q2"],
            status="PUBLISHED",
            action="Approve",
            linear_issue_id="SAK-42",
        )
    )

    assert output.id == f"out-{int(_fixed_clock().timestamp() * 1000)}"
    assert output.title == "Q2 plan"
    assert output.url == "https://docs.example.com/q2"
    assert output.summary is None
    assert output.tags == ["plan", "q2"]
    assert output.status == "final"
    assert output.action == "approve"
    stored = _read(storage.outputs.path)[0]
    assert stored["linearIssueId"] == "SAK-42"
    assert "summary" not in stored


def test_create_output_requires_title_type_url(storage: MissionControlStorage) -> None:
    with pytest.raises(ValueError, match="title, type, and url are required"):
        storage.create_output(CreateOutputRequest(title="x", type="  ", url="https://x"))


def test_outputs_sorted_newest_first(storage: MissionControlStorage) -> None:
    rows = [("old", "2024-01-01T00:00:00Z"), ("bad", "not a date"), ("new", "2024-03-01T00:00:00Z")]
    storage.outputs.path.write_text(
        json.dumps(
            [
                {"id": output_id, "title": "t", "type": "doc", "url": "u", "createdAt": created}
                for output_id, created in rows
            ]
        ),
        encoding="utf-8",
    )

    assert [item.id for item in storage.list_outputs()] == ["new", "old", "bad"]


def test_projects_fall_back_to_empty_object(
    storage: MissionControlStorage, data_dir: Path
) -> None:
    assert storage.load_projects() == {}
    (data_dir / "projects.json").write_text("{broken", encoding="utf-8")
    assert storage.load_projects() == {}
    (data_dir / "projects.json").write_text('{"atlas": {"status": "active"}}', encoding="utf-8")
    assert storage.load_projects() == {"atlas": {"status": "active"}}


def test_reports_keep_newest_files(data_dir: Path) -> None:
    reports_dir = data_dir / "reports"
    reports_dir.mkdir()
    for day in range(1, 6):
        (reports_dir / f"2024-05-0{day}.json").write_text(
            json.dumps({"date": f"2024-05-0{day}"}), encoding="utf-8"
        )
    (reports_dir / "notes.txt").write_text("ignored", encoding="utf-8")

    storage = MissionControlStorage(data_dir, report_limit=3)

    assert [report["date"] for report in storage.list_reports()] == [
        "2024-05-05",
        "2024-05-04",
        "2024-05-03",
    ]


def test_reports_missing_directory(storage: MissionControlStorage) -> None:
    assert storage.list_reports() == []
