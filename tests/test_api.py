"""
HTTP surface: /health, /tools, /metrics
"""

import pytest
from fastapi.testclient import TestClient

from strapi_tools.main import app
from strapi_tools.strapi.client import StrapiError
from strapi_tools.tools.builtin_tools import create_strapi_registry


@pytest.fixture
def api(fake_client):
    """App with the lifespan run, then the Strapi client swapped for the fake"""
    with TestClient(app) as client:
        app.state.strapi_client = fake_client
        app.state.registry = create_strapi_registry(fake_client)
        yield client


class TestHealth:
    def test_ok(self, api):
        response = api.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "strapi": "ok", "tools": 13}

    def test_degraded_when_strapi_down(self, api, fake_client):
        fake_client.get_i18n_locales.side_effect = StrapiError("Could not reach Strapi")

        body = api.get("/health").json()

        assert body["status"] == "degraded"
        assert body["strapi"] == "error: Could not reach Strapi"


class TestToolsEndpoints:
    def test_list_tools(self, api):
        body = api.get("/tools").json()

        assert body["count"] == 13
        assert {t["function"]["name"] for t in body["tools"]} >= {"strapi-read", "strapi-create-with-locales"}

    def test_call_tool(self, api, fake_client, english_document):
        fake_client.read.return_value = {"data": english_document}

        response = api.post(
            "/tools/strapi-read",
            json={"content_type": "articles", "document_id": "doc-en", "locale": "en"},
            headers={"X-Trace-ID": "trace-123"},
        )

        body = response.json()
        assert response.status_code == 200
        assert response.headers["X-Trace-ID"] == "trace-123"
        assert body["status"] == "success"
        assert body["validation"]["is_valid"] is True
        assert body["trace_id"] == "trace-123"

    def test_tool_failure_is_still_200(self, api):
        response = api.post("/tools/strapi-read", json={"content_type": "articles"})

        assert response.status_code == 200
        assert response.json()["status"] == "error"

    def test_unknown_tool_is_404(self, api):
        response = api.post("/tools/strapi-nope", json={})

        assert response.status_code == 404


class TestMetrics:
    def test_prometheus_endpoint(self, api):
        api.post("/tools/strapi-get-i18n-locales", json={})

        response = api.get("/metrics/")

        assert response.status_code == 200
        assert "strapi_tools_tool_call_total" in response.text
