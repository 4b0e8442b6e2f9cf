"""FastAPI application wiring for the Mission Control dashboard.

Beginner terms used in this file:
- FastAPI app: the main web application object.
- Route/path operation: a function exposed over HTTP (for example, GET /api/tasks).
- response_model: Pydantic model used to validate/shape API responses.
- app.state: a place to store shared runtime objects (storage, search limit).
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .app.models import (
    Activity,
    CreateActivityRequest,
    CreateMemoRequest,
    CreateOutputRequest,
    CreateSharedTaskRequest,
    CreateTaskRequest,
    DeleteRequest,
    OutputItem,
    SearchResponse,
    SharedMemo,
    SharedTask,
    SharedTaskView,
    Task,
    UpdateMemoRequest,
    UpdateSharedTaskRequest,
    UpdateTaskRequest,
)
from .app.search import SEARCH_RESULT_LIMIT, InvalidQueryError, search
from .app.storage import DEFAULT_REPORT_LIMIT, MissionControlStorage, StorageError
from .app.ui import render_homepage
from .app.views import (
    ACTIVITY_FILTERS,
    OUTPUT_FILTERS,
    filter_activities,
    filter_outputs,
    flag_overdue,
    group_activities_by_date,
    group_shared_tasks_by_owner,
)

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Application factory.

    This pattern builds and returns a fully configured FastAPI app instance.
    It is useful for tests because each test can point at its own data dir.
    """
    # Load local .env values into process environment if keys are not already set.
    _load_env_file(Path(".env"))

    data_dir = Path(os.getenv("MISSION_CONTROL_DATA_DIR", "data").strip() or "data")
    storage = MissionControlStorage(
        data_dir=data_dir,
        report_limit=_env_int("MISSION_CONTROL_REPORT_LIMIT", default=DEFAULT_REPORT_LIMIT),
    )
    search_limit = _env_int("MISSION_CONTROL_SEARCH_LIMIT", default=SEARCH_RESULT_LIMIT)
    owner_order = [
        owner.strip()
        for owner in os.getenv("MISSION_CONTROL_OWNER_ORDER", "").split(",")
        if owner.strip()
    ]

    app = FastAPI(title="mission_control", version="0.1.0")
    # Shared objects live in app.state so route handlers (and tests) can reuse them.
    app.state.storage = storage
    app.state.search_limit = search_limit
    app.state.owner_order = owner_order
    logger.info("app event=configured data_dir=%s search_limit=%d", data_dir, search_limit)

    # Every error body uses {"error": "..."} so the console can show it directly.
    @app.exception_handler(StarletteHTTPException)
    async def http_error(_: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request body.", "details": _validation_messages(exc)},
        )

    # Multiple health endpoints map to the same function for compatibility with
    # different health checkers and load balancers.
    @app.get("/health")
    @app.get("/healthz")
    @app.get("/live")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/", response_class=HTMLResponse)
    def home() -> str:
        return render_homepage()

    # Search

    @app.get("/api/search", response_model=SearchResponse, response_model_exclude_none=True)
    def search_records(q: str | None = Query(None)) -> SearchResponse:
        query = (q or "").lower()
        with _storage_failure("Failed to search."):
            activities = app.state.storage.list_activities()
            tasks = app.state.storage.list_tasks()
        try:
            results = search(query, activities, tasks, limit=app.state.search_limit)
        except InvalidQueryError as exc:
            raise HTTPException(status_code=400, detail="Query parameter required") from exc
        logger.info("search event=completed query=%s total=%d", query, len(results))
        # total mirrors the returned page, not the number of matches before the cut.
        return SearchResponse(query=query, total=len(results), results=results)

    # Activities

    @app.get("/api/activities", response_model=list[Activity], response_model_exclude_none=True)
    def list_activities(filter_: str = Query("ALL", alias="filter")) -> list[Activity]:
        bucket = _bucket(filter_, ACTIVITY_FILTERS)
        with _storage_failure("Failed to read activities."):
            activities = app.state.storage.list_activities()
        return filter_activities(activities, bucket)

    @app.get(
        "/api/activities/by-date",
        response_model=dict[str, list[Activity]],
        response_model_exclude_none=True,
    )
    def activities_by_date(
        filter_: str = Query("ALL", alias="filter"),
    ) -> dict[str, list[Activity]]:
        bucket = _bucket(filter_, ACTIVITY_FILTERS)
        with _storage_failure("Failed to read activities."):
            activities = app.state.storage.list_activities()
        return group_activities_by_date(filter_activities(activities, bucket))

    @app.post(
        "/api/activities",
        response_model=Activity,
        response_model_exclude_none=True,
        status_code=201,
    )
    def create_activity(payload: CreateActivityRequest) -> Activity:
        with _storage_failure("Failed to create activity."):
            activity = app.state.storage.create_activity(payload)
        logger.info("activity event=created id=%s type=%s", activity.id, activity.type)
        return activity

    # Tasks

    @app.get("/api/tasks", response_model=list[Task], response_model_exclude_none=True)
    def list_tasks() -> list[Task]:
        with _storage_failure("Failed to read tasks."):
            return app.state.storage.list_tasks()

    # Request body is validated against CreateTaskRequest.
    @app.post("/api/tasks", response_model=Task, response_model_exclude_none=True, status_code=201)
    def create_task(payload: CreateTaskRequest) -> Task:
        with _storage_failure("Failed to create task."):
            task = app.state.storage.create_task(payload)
        logger.info("task event=created id=%s status=%s", task.id, task.status)
        return task

    @app.put("/api/tasks", response_model=Task, response_model_exclude_none=True)
    def update_task(payload: UpdateTaskRequest) -> Task:
        with _storage_failure("Failed to update task."):
            try:
                task = app.state.storage.update_task(payload)
            except KeyError as exc:
                raise HTTPException(status_code=404, detail="Task not found.") from exc
            except ValueError as exc:
                raise HTTPException(status_code=400, detail="Invalid task payload.") from exc
        logger.info("task event=updated id=%s status=%s", task.id, task.status)
        return task

    @app.delete("/api/tasks")
    def delete_task(payload: DeleteRequest) -> dict[str, bool]:
        with _storage_failure("Failed to delete task."):
            try:
                app.state.storage.delete_task(payload.id)
            except KeyError as exc:
                raise HTTPException(status_code=404, detail="Task not found.") from exc
        logger.info("task event=deleted id=%s", payload.id)
        return {"success": True}

    # Shared memos

    @app.get("/api/shared-memo", response_model=list[SharedMemo])
    def list_memos() -> list[SharedMemo]:
        with _storage_failure("Failed to read shared memos."):
            return app.state.storage.list_memos()

    @app.post("/api/shared-memo", response_model=SharedMemo, status_code=201)
    def create_memo(payload: CreateMemoRequest) -> SharedMemo:
        with _storage_failure("Failed to create memo."):
            try:
                return app.state.storage.create_memo(payload)
            except ValueError as exc:
                raise HTTPException(status_code=400, detail=str(exc)) from exc

    @app.put("/api/shared-memo", response_model=SharedMemo)
    def update_memo(payload: UpdateMemoRequest) -> SharedMemo:
        with _storage_failure("Failed to update memo."):
            try:
                return app.state.storage.set_memo_read(payload.id, payload.read)
            except KeyError as exc:
                raise HTTPException(status_code=404, detail="Memo not found.") from exc

    @app.delete("/api/shared-memo")
    def delete_memo(payload: DeleteRequest) -> dict[str, str]:
        with _storage_failure("Failed to delete memo."):
            try:
                app.state.storage.delete_memo(payload.id)
            except KeyError as exc:
                raise HTTPException(status_code=404, detail="Memo not found.") from exc
        return {"id": payload.id}

    # Shared tasks

    @app.get("/api/shared-tasks", response_model=list[SharedTask])
    def list_shared_tasks() -> list[SharedTask]:
        with _storage_failure("Failed to read shared tasks."):
            return app.state.storage.list_shared_tasks()

    @app.get("/api/shared-tasks/by-owner", response_model=dict[str, list[SharedTaskView]])
    def shared_tasks_by_owner() -> dict[str, list[SharedTaskView]]:
        with _storage_failure("Failed to read shared tasks."):
            tasks = app.state.storage.list_shared_tasks()
        return flag_overdue(group_shared_tasks_by_owner(tasks, owner_order=app.state.owner_order))

    @app.post("/api/shared-tasks", response_model=SharedTask, status_code=201)
    def create_shared_task(payload: CreateSharedTaskRequest) -> SharedTask:
        with _storage_failure("Failed to create task."):
            try:
                return app.state.storage.create_shared_task(payload)
            except ValueError as exc:
                raise HTTPException(status_code=400, detail=str(exc)) from exc

    @app.put("/api/shared-tasks", response_model=SharedTask)
    def update_shared_task(payload: UpdateSharedTaskRequest) -> SharedTask:
        with _storage_failure("Failed to update task."):
            try:
                return app.state.storage.set_shared_task_completed(payload.id, payload.completed)
            except KeyError as exc:
                raise HTTPException(status_code=404, detail="Task not found.") from exc

    # Outputs

    @app.get("/api/outputs", response_model=list[OutputItem], response_model_exclude_none=True)
    def list_outputs(filter_: str = Query("ALL", alias="filter")) -> list[OutputItem]:
        bucket = _bucket(filter_, OUTPUT_FILTERS)
        with _storage_failure("Failed to read outputs."):
            outputs = app.state.storage.list_outputs()
        return filter_outputs(outputs, bucket)

    @app.post(
        "/api/outputs",
        response_model=OutputItem,
        response_model_exclude_none=True,
        status_code=201,
    )
    def create_output(payload: CreateOutputRequest) -> OutputItem:
        with _storage_failure("Failed to create output."):
            try:
                output = app.state.storage.create_output(payload)
            except ValueError as exc:
                raise HTTPException(status_code=400, detail=str(exc)) from exc
        logger.info("output event=created id=%s type=%s", output.id, output.type)
        return output

    # Read-only documents

    @app.get("/api/projects")
    def projects() -> Any:
        return app.state.storage.load_projects()

    @app.get("/api/reports")
    def reports() -> list[Any]:
        return app.state.storage.list_reports()

    return app


@contextmanager
def _storage_failure(message: str) -> Iterator[None]:
    """Turn unreadable/unwritable data files into a logged 500 response."""
    try:
        yield
    except (StorageError, OSError) as exc:
        logger.exception("storage event=failed message=%s", message)
        raise HTTPException(status_code=500, detail=message) from exc


def _bucket(value: str, allowed: tuple[str, ...]) -> str:
    bucket = value.strip().upper()
    if bucket not in allowed:
        raise HTTPException(
            status_code=400,
            detail=f"Unknown filter {value!r}; expected one of {', '.join(allowed)}.",
        )
    return bucket


def _validation_messages(exc: RequestValidationError) -> list[str]:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg', 'invalid')}" if location else error["msg"])
    return messages


def _env_int(name: str, *, default: int) -> int:
    """Read integer env var; return default when unset/invalid."""
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _load_env_file(path: Path) -> None:
    """Minimal .env loader used to avoid an external dependency for this project."""
    if not path.exists():
        return

    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip()
        if not key:
            continue
        if (value.startswith('"') and value.endswith('"')) or (
            value.startswith("'") and value.endswith("'")
        ):
            value = value[1:-1]
        os.environ.setdefault(key, value)


# Module-level app for `uvicorn mission_control.main:app`.
app = create_app()
