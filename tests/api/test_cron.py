"""Tests for the cron refresh trigger and health endpoints."""

from collections.abc import Generator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from marquee.api.main import app as marquee_app
from marquee.api.routers.cron import get_refresh_runner
from marquee.etl.errors import ExternalFetchError
from marquee.etl.types import RefreshSummary
from marquee.settings import settings


@pytest.fixture
def app() -> Generator[FastAPI, None, None]:
    """Application with dependency overrides cleared after each test."""
    yield marquee_app
    marquee_app.dependency_overrides.clear()


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


def _runner(listed: int = 0, error: Exception | None = None) -> AsyncMock:
    if error is not None:
        return AsyncMock(side_effect=error)
    return AsyncMock(return_value=RefreshSummary(listed=listed, processed=listed))


@pytest.fixture
def production(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "environment", "production")
    monkeypatch.setattr(settings.api, "cron_secret", "s3cret")


# -------------------------------------------------------------------------
# Refresh trigger
# -------------------------------------------------------------------------


class TestNowPlayingRefresh:
    @staticmethod
    def test_success_reports_listing_size(app: FastAPI, client: TestClient) -> None:
        runner = _runner(listed=20)
        app.dependency_overrides[get_refresh_runner] = lambda: runner

        response = client.get("/api/cron/now-playing-refresh")

        assert response.status_code == 200
        assert response.json() == {"ok": True, "count": 20}
        runner.assert_awaited_once()

    @staticmethod
    def test_failure_hides_details(app: FastAPI, client: TestClient) -> None:
        runner = _runner(error=ExternalFetchError("TMDB down: api_key=abc"))
        app.dependency_overrides[get_refresh_runner] = lambda: runner

        response = client.get("/api/cron/now-playing-refresh")

        assert response.status_code == 500
        assert response.json() == {"ok": False, "error": "failed"}

    @staticmethod
    def test_secret_not_required_outside_production(app: FastAPI, client: TestClient) -> None:
        app.dependency_overrides[get_refresh_runner] = lambda: _runner()
        assert client.get("/api/cron/now-playing-refresh").status_code == 200


class TestCronSecret:
    @staticmethod
    @pytest.mark.usefixtures("production")
    def test_missing_header_rejected(app: FastAPI, client: TestClient) -> None:
        runner = _runner()
        app.dependency_overrides[get_refresh_runner] = lambda: runner

        response = client.get("/api/cron/now-playing-refresh")

        assert response.status_code == 401
        runner.assert_not_awaited()

    @staticmethod
    @pytest.mark.usefixtures("production")
    def test_wrong_secret_rejected(app: FastAPI, client: TestClient) -> None:
        app.dependency_overrides[get_refresh_runner] = lambda: _runner()
        response = client.get(
            "/api/cron/now-playing-refresh", headers={"Authorization": "Bearer nope"}
        )
        assert response.status_code == 401

    @staticmethod
    @pytest.mark.usefixtures("production")
    def test_matching_secret_accepted(app: FastAPI, client: TestClient) -> None:
        app.dependency_overrides[get_refresh_runner] = lambda: _runner(listed=3)
        response = client.get(
            "/api/cron/now-playing-refresh", headers={"Authorization": "Bearer s3cret"}
        )
        assert response.json() == {"ok": True, "count": 3}

    @staticmethod
    def test_unset_secret_rejected_in_production(
        app: FastAPI, client: TestClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(settings, "environment", "production")
        monkeypatch.setattr(settings.api, "cron_secret", "")
        app.dependency_overrides[get_refresh_runner] = lambda: _runner()

        response = client.get(
            "/api/cron/now-playing-refresh", headers={"Authorization": "Bearer "}
        )
        assert response.status_code == 401


# -------------------------------------------------------------------------
# Health
# -------------------------------------------------------------------------


class TestHealth:
    @staticmethod
    @pytest.mark.parametrize(("connected", "status"), [(True, "healthy"), (False, "degraded")])
    def test_health(client: TestClient, connected: bool, status: str) -> None:
        database = MagicMock()
        database.check_connection = AsyncMock(return_value=connected)

        with patch("marquee.api.main.get_database", return_value=database):
            response = client.get("/api/v1/health")

        body = response.json()
        assert response.status_code == 200
        assert body["status"] == status
        assert body["database"] == {"connected": connected}
        assert body["environment"] == settings.environment
