from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from audio_relay.common.config import RelayConfig
from audio_relay.relay.job_relay import JobRelay
from audio_relay.serve.cors import is_origin_allowed
from audio_relay.serve.fastapi_app import create_app


@pytest.fixture()
def client(config: RelayConfig, relay: JobRelay) -> TestClient:
    return TestClient(create_app(config, relay))


@pytest.mark.parametrize(
    "origin",
    [
        None,
        "http://localhost:5173",
        "https://musigenerator.vercel.app",
        "https://some-preview-abc123.vercel.app",
    ],
)
def test_allowed_origins(origin: str | None) -> None:
    assert is_origin_allowed(origin, RelayConfig())


@pytest.mark.parametrize(
    "origin",
    [
        "https://evil.example.com",
        "https://vercel.app.evil.example.com",
        "http://localhost:8080",
        "null",
    ],
)
def test_rejected_origins(origin: str) -> None:
    assert not is_origin_allowed(origin, RelayConfig())


def test_rejected_origin_never_reaches_handler(client: TestClient, upstream) -> None:
    r = client.post(
        "/api/generate-audio",
        json={"prompt": "x"},
        headers={"Origin": "https://evil.example.com"},
    )
    assert r.status_code == 403
    assert r.json() == {"error": "Not allowed by CORS"}
    assert upstream.requests == []


def test_allowed_origin_gets_credentialed_cors_headers(client: TestClient) -> None:
    r = client.get("/", headers={"Origin": "https://preview.vercel.app"})
    assert r.status_code == 200
    assert r.headers["access-control-allow-origin"] == "https://preview.vercel.app"
    assert r.headers["access-control-allow-credentials"] == "true"


def test_preflight_from_allowed_origin(client: TestClient) -> None:
    r = client.options(
        "/api/riffusion-generate",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "content-type",
        },
    )
    assert r.status_code == 200
    assert r.headers["access-control-allow-origin"] == "http://localhost:3000"


def test_request_without_origin_passes(client: TestClient) -> None:
    r = client.get("/api/parameters")
    assert r.status_code == 200
    assert "access-control-allow-origin" not in r.headers
