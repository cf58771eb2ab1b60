#!/usr/bin/env python3
"""
Basic health endpoint tests for CI/CD pipeline.
Uses the module-level app configured from the test environment.
"""

from fastapi.testclient import TestClient


def test_health_endpoint():
    """Health endpoint returns 200 and proper structure"""
    from inkbook.main import app

    with TestClient(app) as client:
        response = client.get("/healthz")

    assert response.status_code == 200
    assert response.json() == {"ok": True}


def test_ready_endpoint():
    """Ready endpoint pings the database"""
    from inkbook.main import app

    with TestClient(app) as client:
        response = client.get("/readyz")

    assert response.status_code == 200
    assert response.json() == {"db": "ok"}


def test_correlation_id_header():
    from inkbook.main import app

    with TestClient(app) as client:
        response = client.get("/healthz")

    assert len(response.headers["X-Correlation-ID"]) == 8


def test_admin_endpoints_require_api_key():
    from inkbook.main import app

    with TestClient(app) as client:
        assert client.get("/appointments").status_code == 401
        assert client.get("/appointments", headers={"X-API-Key": "test_admin_key"}).status_code == 200


def test_app_startup():
    """The FastAPI app publishes the booking routes in its schema"""
    from inkbook.main import app

    paths = app.openapi()["paths"]
    for path in ("/availability", "/appointments", "/appointments/{appointment_id}/cancel", "/artists", "/services"):
        assert path in paths
