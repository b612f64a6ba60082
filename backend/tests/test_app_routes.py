"""Regression tests for application wiring."""
from fastapi.routing import APIRoute
from fastapi.testclient import TestClient

from app.main import app


def _routes(path: str, method: str) -> list[APIRoute]:
    return [
        route
        for route in app.routes
        if isinstance(route, APIRoute) and route.path == path and method in route.methods
    ]


def test_plan_route_registered_once() -> None:
    """The plan endpoint is mounted exactly once and only for POST."""
    assert len(_routes("/plan", "POST")) == 1
    assert _routes("/plan", "GET") == []


def test_health_endpoint_returns_ok() -> None:
    response = TestClient(app).get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_request_id_echoed_from_header() -> None:
    req_id = "plan-request-id-123"
    response = TestClient(app).get("/health", headers={"X-Request-Id": req_id})

    assert response.headers.get("X-Request-Id") == req_id


def test_get_on_plan_is_method_not_allowed() -> None:
    response = TestClient(app).get("/plan")

    assert response.status_code == 405
