from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from audio_relay.common.config import RelayConfig
from audio_relay.relay.job_relay import JobRelay
from audio_relay.relay.upstream import PredictionClient


class FakeUpstream:
    """Scripted prediction API backed by httpx.MockTransport."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.create_response: tuple[int, Any] = (201, {"id": "job-1", "status": "starting"})
        self.statuses: list[dict[str, Any]] = []
        self.sleeps: list[float] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "POST":
            status_code, body = self.create_response
            return httpx.Response(status_code, json=body)
        if len(self.statuses) > 1:
            return httpx.Response(200, json=self.statuses.pop(0))
        return httpx.Response(200, json=self.statuses[0])

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)

    @property
    def status_queries(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "GET"]

    def posted(self, index: int = 0) -> dict[str, Any]:
        posts = [r for r in self.requests if r.method == "POST"]
        return json.loads(posts[index].content)


@pytest.fixture()
def config() -> RelayConfig:
    return RelayConfig(api_token="r8_test_token", upstream_base_url="https://upstream.test")


@pytest.fixture()
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture()
def relay(config: RelayConfig, upstream: FakeUpstream) -> JobRelay:
    client = PredictionClient(config, transport=httpx.MockTransport(upstream.handler))
    return JobRelay(client, sleep=upstream.sleep)
