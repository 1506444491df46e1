from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

import kflow.api.routes.health as health_route
from kflow.api.main import app


def test_live_health_endpoint() -> None:
    client = TestClient(app)
    response = client.get("/health/live")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert response.headers["X-Request-Id"]


def test_ready_health_endpoint_healthy_with_mocks(monkeypatch) -> None:
    monkeypatch.setattr(health_route, "ping_database", lambda timeout_seconds=1.0: True)
    monkeypatch.setattr(health_route, "ping_redis", lambda timeout_seconds=1.0: True)

    response = TestClient(app).get("/health/ready")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_ready_health_endpoint_reports_failed_checks(monkeypatch) -> None:
    monkeypatch.setattr(health_route, "ping_database", lambda timeout_seconds=1.0: True)
    monkeypatch.setattr(health_route, "ping_redis", lambda timeout_seconds=1.0: False)

    response = TestClient(app).get("/health/ready")

    assert response.status_code == 503
    assert response.json()["checks"] == {"postgres": True, "redis": False}


def test_api_health_banner() -> None:
    body = TestClient(app).get("/api/health").json()
    assert body["status"] == "OK"
    assert body["message"] == "Kitchen Flow Backend - Quinta Estación"
    assert datetime.fromisoformat(body["timestamp"]).tzinfo is not None


def test_db_test_success(monkeypatch) -> None:
    moment = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    monkeypatch.setattr(health_route, "database_now", lambda timeout_seconds=1.0: moment)

    response = TestClient(app).get("/api/db-test")

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Conexión a PostgreSQL exitosa",
        "timestamp": moment.isoformat(),
    }


def test_db_test_failure(monkeypatch) -> None:
    def _fail(timeout_seconds: float = 1.0) -> datetime:
        raise OperationalError("SELECT CURRENT_TIMESTAMP", {}, Exception("connection refused"))

    monkeypatch.setattr(health_route, "database_now", _fail)

    response = TestClient(app).get("/api/db-test")

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Error al conectar con PostgreSQL"
    assert "connection refused" in body["error"]


def test_metrics_endpoint_exposes_prometheus_text() -> None:
    client = TestClient(app)
    client.get("/health/live")
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "http_requests_total" in response.text
    assert 'route="/health/live"' in response.text
