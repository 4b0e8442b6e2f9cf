from __future__ import annotations

from typing import Any
from urllib import error

import pytest

from mission_control import record_output


def test_missing_required_args_prints_usage(capsys: pytest.CaptureFixture[str]) -> None:
    assert record_output.main(["--title", "Report"]) == 1
    assert "Usage:" in capsys.readouterr().err


def test_posts_payload_and_prints_result(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    calls: list[tuple[str, dict[str, Any]]] = []

    def fake_post(base_url: str, payload: dict[str, Any]) -> tuple[int, Any]:
        calls.append((base_url, payload))
        return 201, {"id": "out-1", **payload}

    monkeypatch.setattr(record_output, "post_output", fake_post)

    exit_code = record_output.main(
        [
            "--title",
            "Weekly report",
            "--type",
            "google-docs",
            "--url",
            "https://docs.example.com/d/1",
            "--tags",
            "weekly, ops,,",
            "--linear",
            "SAK-42",
            "--base-url",
            "http://dashboard:3000",
        ]
    )

    assert exit_code == 0
    base_url, payload = calls[0]
    assert base_url == "http://dashboard:3000"
    assert payload == {
        "title": "Weekly report",
        "type": "google-docs",
        "url": "https://docs.example.com/d/1",
        "tags": ["weekly", "ops"],
        "status": "final",
        "linearIssueId": "SAK-42",
    }
    assert "Recorded output:" in capsys.readouterr().out


def test_server_error_exits_nonzero(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(
        record_output,
        "post_output",
        lambda _url, _payload: (400, {"error": "title, type, and url are required."}),
    )

    assert record_output.main(["--title", "a", "--type", "b", "--url", "c"]) == 1
    assert "Failed to record output" in capsys.readouterr().err


def test_connection_failure_exits_nonzero(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def refuse(_url: str, _payload: dict[str, Any]) -> tuple[int, Any]:
        raise error.URLError("connection refused")

    monkeypatch.setattr(record_output, "post_output", refuse)

    assert record_output.main(["--title", "a", "--type", "b", "--url", "c"]) == 1
    assert "Request failed: connection refused" in capsys.readouterr().err
