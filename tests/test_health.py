from __future__ import annotations

import pytest
from fastapi.testclient import TestClient


@pytest.mark.parametrize("route", ["/health", "/healthz", "/live"])
def test_liveness_routes_report_ok(client: TestClient, route: str) -> None:
    response = client.get(route)

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_unknown_route_uses_error_envelope(client: TestClient) -> None:
    response = client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}
