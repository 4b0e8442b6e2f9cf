from __future__ import annotations

import importlib
import json
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest.fixture
def write_json(data_dir: Path) -> Callable[[str, Any], Path]:
    """Seed a file in the data directory, e.g. write_json("tasks.json", [...])."""

    def _write(name: str, payload: Any) -> Path:
        path = data_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch, data_dir: Path) -> Iterator[TestClient]:
    monkeypatch.setenv("MISSION_CONTROL_DATA_DIR", str(data_dir))
    monkeypatch.delenv("MISSION_CONTROL_SEARCH_LIMIT", raising=False)
    monkeypatch.delenv("MISSION_CONTROL_OWNER_ORDER", raising=False)
    from mission_control import main as main_module

    importlib.reload(main_module)
    monkeypatch.setattr(main_module, "_load_env_file", lambda _path: None)
    app = main_module.create_app()
    with TestClient(app) as test_client:
        yield test_client
