"""
CBC Exams Backend: API Route Tests
====================================

What:  End-to-end tests through the ASGI app: routing, query parsing,
       exception handlers, middleware headers and the lifespan.
How:   HTTPX AsyncClient + ASGITransport with the session and cache
       dependencies overridden (see conftest.test_client).
"""

import logging
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI

from cbcexams.database import get_db_session
from cbcexams.main import lifespan
from cbcexams.services.result_cache import ResultCache


class TestResourceRoutes:

    @pytest.mark.asyncio
    async def test_search(self, test_client, seeded_resources):
        response = await test_client.get(
            "/v1/api/resources/", params={"q1": "grade9", "q2": "chemistry"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["parameters_used"] == ["q1"]
        assert body["pagination"]["total_records"] == 3
        assert set(body["data"][0]) == {
            "id",
            "name",
            "django_relative_path",
            "google_cloud_storage_link",
            "created_at",
        }

    @pytest.mark.asyncio
    async def test_malformed_pagination_falls_back(self, test_client, seeded_resources):
        response = await test_client.get(
            "/v1/api/resources/", params={"page": "abc", "limit": "-1"}
        )

        assert response.status_code == 200
        pagination = response.json()["pagination"]
        assert pagination["current_page"] == 1
        assert pagination["limit"] == 100
        assert pagination["total_records"] == len(seeded_resources)

    @pytest.mark.asyncio
    async def test_out_of_range_pagination_falls_back(self, test_client, seeded_resources):
        response = await test_client.get(
            "/v1/api/resources/",
            params={"page": "99999999999999999999", "limit": "1_0"},
        )

        assert response.status_code == 200
        pagination = response.json()["pagination"]
        assert pagination["current_page"] == 1
        assert pagination["limit"] == 100

    @pytest.mark.asyncio
    async def test_out_of_range_directory_page_falls_back(self, test_client, seeded_resources):
        response = await test_client.get(
            "/v1/api/resources/parent-directories",
            params={"page": "99999999999999999999"},
        )

        assert response.status_code == 200
        assert response.json()["pagination"]["current_page"] == 1

    @pytest.mark.asyncio
    async def test_search_response_cached(self, test_client, seeded_resources, result_cache):
        first = await test_client.get("/v1/api/resources/", params={"q1": "biology"})
        second = await test_client.get("/v1/api/resources/", params={"q1": "biology"})

        assert first.json() == second.json()
        assert len(result_cache) == 1

    @pytest.mark.asyncio
    async def test_parent_directories(self, test_client, seeded_resources):
        response = await test_client.get(
            "/v1/api/resources/parent-directories", params={"search": "grade 9", "limit": "1"}
        )

        assert response.status_code == 200
        body = response.json()
        assert list(body["data"]) == ["grade-9/english"]
        assert body["pagination"] == {
            "total_records": 2,
            "total_pages": 2,
            "current_page": 1,
            "next_page": 2,
            "limit": 1,
        }

    @pytest.mark.asyncio
    async def test_database_failure_returns_500(self, app, test_client):
        failing = AsyncMock()
        failing.execute = AsyncMock(side_effect=RuntimeError("connection refused"))

        async def failing_session():
            yield failing

        app.dependency_overrides[get_db_session] = failing_session

        response = await test_client.get("/v1/api/resources/", params={"q1": "maths"})

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "server_error"
        assert body["message"] == "Failed to count resources"
        assert "connection refused" not in response.text


class TestFeedbackRoutes:

    @pytest.mark.asyncio
    async def test_submit_and_list(self, test_client):
        created = await test_client.post(
            "/v1/api/feedback",
            json={
                "full_name": "Wanjiru Kamau",
                "email": "wanjiru@example.com",
                "message": "The biology schemes link is broken.",
            },
        )
        assert created.status_code == 201
        assert created.json()["data"]["full_name"] == "Wanjiru Kamau"

        listed = await test_client.get("/v1/api/feedback")
        assert listed.status_code == 200
        assert listed.headers["X-Total-Count"] == "1"
        assert listed.json()["pagination"]["limit"] == 10

    @pytest.mark.asyncio
    async def test_blank_field_returns_400(self, test_client):
        response = await test_client.post(
            "/v1/api/feedback",
            json={"full_name": "Wanjiru", "email": "w@example.com", "message": "   "},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["details"] == {"field": "message"}

    @pytest.mark.asyncio
    async def test_missing_field_returns_422(self, test_client):
        response = await test_client.post("/v1/api/feedback", json={"full_name": "Wanjiru"})

        assert response.status_code == 422


class TestHealthAndMiddleware:

    @pytest.mark.asyncio
    async def test_health_healthy(self, test_client, db_engine, result_cache):
        result_cache.set("resources:q1=x", "payload")

        with patch("cbcexams.routes.health.engine", db_engine):
            response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["cache_entries"] == 1

    @pytest.mark.asyncio
    async def test_health_unhealthy(self, test_client):
        broken = MagicMock()
        broken.connect.side_effect = OSError("could not connect")

        with patch("cbcexams.routes.health.engine", broken):
            response = await test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "unhealthy"

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client, seeded_resources):
        response = await test_client.get(
            "/v1/api/resources/", headers={"X-Request-ID": "trace-123"}
        )

        assert response.headers["X-Request-ID"] == "trace-123"

    @pytest.mark.asyncio
    async def test_request_id_generated(self, test_client, seeded_resources):
        response = await test_client.get("/v1/api/resources/")

        assert len(response.headers["X-Request-ID"]) == 8


class TestLifespan:

    @pytest.mark.asyncio
    async def test_cache_created_and_stopped(self):
        app = FastAPI()

        with patch("cbcexams.main.setup_logging"), \
             patch("cbcexams.main.dispose_engine", new=AsyncMock()) as dispose:
            async with lifespan(app):
                cache = app.state.result_cache
                assert isinstance(cache, ResultCache)
                assert cache.running

            assert not cache.running
            assert app.state.result_cache is None
            dispose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_cache_settings_logged_once(self, caplog):
        app = FastAPI()
        caplog.set_level(logging.INFO)

        with patch("cbcexams.main.setup_logging"), \
             patch("cbcexams.main.dispose_engine", new=AsyncMock()):
            async with lifespan(app):
                pass

        cache_lines = [r for r in caplog.records if "sweep every" in r.getMessage()]
        assert len(cache_lines) == 1
