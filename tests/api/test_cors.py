"""CORS middleware tests."""

import falcon.asgi
import pytest
from falcon.testing import TestClient

from invoicevault.interfaces.api.middleware.cors import CORSMiddleware
from invoicevault.interfaces.api.resources.health import HealthResource


@pytest.fixture
def cors_client() -> TestClient:
    app = falcon.asgi.App(middleware=[CORSMiddleware(["https://portal.example"])])
    app.add_route("/v1/health", HealthResource())
    return TestClient(app)


def test_allowed_origin_gets_headers(cors_client: TestClient) -> None:
    result = cors_client.simulate_get("/v1/health", headers={"Origin": "https://portal.example"})
    assert result.headers["Access-Control-Allow-Origin"] == "https://portal.example"


def test_unknown_origin_gets_no_headers(cors_client: TestClient) -> None:
    result = cors_client.simulate_get("/v1/health", headers={"Origin": "https://evil.example"})
    assert "Access-Control-Allow-Origin" not in result.headers


def test_preflight_short_circuits(cors_client: TestClient) -> None:
    result = cors_client.simulate_options(
        "/v1/documents/submit", headers={"Origin": "https://portal.example"}
    )
    assert result.status_code == 204
    assert "POST" in result.headers["Access-Control-Allow-Methods"]
