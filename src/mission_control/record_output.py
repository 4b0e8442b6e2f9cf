"""Record a finished deliverable on the Mission Control outputs board.

Example:
    mission-control-record-output --title "Weekly report" --type google-docs \
        --url "https://docs.example.com/d/123" --tags "weekly,ops" --linear SAK-42
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from collections.abc import Sequence
from typing import Any
from urllib import error, request

DEFAULT_BASE_URL = "http://127.0.0.1:8000"


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Post a new output record to Mission Control.")
    parser.add_argument("--title", default="", help="Output title.")
    parser.add_argument("--type", default="", help="Output type (google-docs, memory, ...).")
    parser.add_argument("--url", default="", help="Link to the deliverable.")
    parser.add_argument("--summary", default=None, help="One-line summary.")
    parser.add_argument("--tags", default="", help="Comma separated tags.")
    parser.add_argument("--project", default=None, help="Project name.")
    parser.add_argument("--status", default="final", help="draft, review or final.")
    parser.add_argument("--action", default=None, help="review, approve, feedback or read.")
    parser.add_argument("--linear", default=None, help="Linked Linear issue id, e.g. SAK-42.")
    parser.add_argument(
        "--base-url",
        default=os.getenv("MISSION_CONTROL_BASE_URL", DEFAULT_BASE_URL),
        help="Mission Control server URL.",
    )
    return parser.parse_args(argv)


def build_payload(args: argparse.Namespace) -> dict[str, Any] | None:
    """Build the POST body; None when a required field is missing."""
    title = args.title.strip()
    output_type = args.type.strip()
    url = args.url.strip()
    if not title or not output_type or not url:
        return None

    payload: dict[str, Any] = {
        "title": title,
        "type": output_type,
        "url": url,
        "tags": split_tags(args.tags),
        "status": args.status,
    }
    optional = {
        "summary": args.summary,
        "project": args.project,
        "action": args.action,
        "linearIssueId": args.linear,
    }
    payload.update({key: value for key, value in optional.items() if value is not None})
    return payload


def split_tags(raw: str) -> list[str]:
    return [tag.strip() for tag in (raw or "").split(",") if tag.strip()]


def post_output(base_url: str, payload: dict[str, Any]) -> tuple[int, Any]:
    """POST payload to /api/outputs; returns (status_code, decoded body)."""
    req = request.Request(
        url=f"{base_url.rstrip('/')}/api/outputs",
        method="POST",
        data=json.dumps(payload).encode("utf-8"),
        headers={"Accept": "application/json", "Content-Type": "application/json"},
    )
    timeout_s = _env_float("MISSION_CONTROL_TIMEOUT_S", default=10.0)
    try:
        with request.urlopen(req, timeout=timeout_s) as response:
            return response.status, _decode_body(response.read().decode("utf-8"))
    except error.HTTPError as exc:
        body = exc.read().decode("utf-8", errors="replace")
        return exc.code, _decode_body(body)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    payload = build_payload(args)
    if payload is None:
        print(
            'Usage: mission-control-record-output --title "xx" --type google-docs '
            '--url "https://..." [--summary "..."] [--tags "tag1,tag2"] [--project "xx"] '
            '[--status final] [--linear "SAK-42"]',
            file=sys.stderr,
        )
        return 1

    try:
        status_code, data = post_output(args.base_url, payload)
    except (error.URLError, TimeoutError) as exc:
        print(f"Request failed: {getattr(exc, 'reason', exc)}", file=sys.stderr)
        return 1

    if status_code >= 400:
        print(f"Failed to record output: {json.dumps(data, ensure_ascii=False)}", file=sys.stderr)
        return 1
    print(f"Recorded output: {json.dumps(data, ensure_ascii=False)}")
    return 0


def _decode_body(body: str) -> Any:
    if not body:
        return {}
    try:
        return json.loads(body)
    except json.JSONDecodeError:
        return {"raw": body}


def _env_float(name: str, *, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


if __name__ == "__main__":
    sys.exit(main())
