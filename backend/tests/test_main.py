"""Tests for the FastAPI main application factory, health check and CLI.

This module validates that:
    - The FastAPI app is correctly instantiated via main.create_app,
    - OpenAPI metadata (title, version) matches the project contract,
    - Lookup and administration routes are registered,
    - CORS headers are sent,
    - The CLI warms the lookup context before starting uvicorn.

See Also:
    - backend/geoapi/main.py for the application factory.
"""

from __future__ import annotations

from typing import Any

import pytest
from fastapi import testclient

from geoapi import main
from geoapi.core import config
from geoapi.services import context


def test_create_app() -> None:
    """Test that create_app returns a configured FastAPI instance."""
    app = main.create_app()
    assert app is not None
    assert app.title == "GeoAPI"
    assert app.version == "0.1.0"


def test_health_endpoint() -> None:
    """Test the health check endpoint returns ok status."""
    client = testclient.TestClient(main.create_app())
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_app_includes_routers() -> None:
    """Test that all API routes are registered."""
    app = main.create_app()
    paths = app.openapi()["paths"]
    for path in (
        "/",
        "/health",
        "/detalheMunicipio",
        "/detalheFreguesia",
        "/listaDeFreguesias",
        "/listaDeMunicipios",
        "/listaDeMunicipiosComFreguesias",
    ):
        assert path in paths
    # Excluded from the schema, so check it is served.
    client = testclient.TestClient(app)
    assert client.get("/favicon.ico").status_code == 204


def test_cors_headers(client: testclient.TestClient) -> None:
    """Cross-origin requests are allowed."""
    response = client.get(
        "/listaDeMunicipios", headers={"Origin": "http://example.org"}
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"


def test_parse_args_defaults_from_settings() -> None:
    settings = config.Settings(port=9123, host="127.0.0.1")
    args = main.parse_args([], settings)
    assert args.port == 9123
    assert args.host == "127.0.0.1"
    assert main.parse_args(["--port", "8081"], settings).port == 8081


def test_run_loads_context_then_serves(
    geo_context: context.GeoContext, monkeypatch: pytest.MonkeyPatch
) -> None:
    """run() builds the context before handing over to uvicorn."""
    events: list[str] = []

    def fake_get_context() -> context.GeoContext:
        events.append("context")
        return geo_context

    def fake_uvicorn_run(app: Any, **kwargs: Any) -> None:
        events.append(f"serve:{kwargs['port']}")

    monkeypatch.setattr(context, "get_context", fake_get_context)
    monkeypatch.setattr(main.uvicorn, "run", fake_uvicorn_run)

    main.run(["--port", "8099"])
    assert events == ["context", "serve:8099"]
