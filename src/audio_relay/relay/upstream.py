"""httpx client for the Replicate-style prediction API."""
from __future__ import annotations
import logging
from typing import Any

import httpx

from audio_relay.common.config import RelayConfig
from audio_relay.common.errors import UpstreamError

LOGGER = logging.getLogger("audio_relay.relay.upstream")


def _error_message(response: httpx.Response) -> str:
    """Build a message from a non-2xx response, preferring the upstream's own text."""
    detail: Any = None
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("error") or body.get("title")
    if not detail:
        detail = response.reason_phrase or response.text
    return f"Upstream returned {response.status_code}: {detail}"


class PredictionClient:
    """Submits predictions and reads their status.

    Every failure (network, timeout, non-2xx, non-JSON body) surfaces as
    UpstreamError; nothing is retried.
    """

    def __init__(self, config: RelayConfig, transport: httpx.BaseTransport | None = None) -> None:
        self._base_url = config.upstream_base_url.rstrip("/")
        self._token = config.api_token
        self._timeout = config.request_timeout
        self._transport = transport

    def _headers(self, wait: bool = False) -> dict[str, str]:
        headers = {"Authorization": f"Bearer {self._token}"}
        if wait:
            headers["Prefer"] = "wait"
        return headers

    def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        url = f"{self._base_url}{path}"
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                r = client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            LOGGER.error("Upstream %s %s failed: %s", method, path, e)
            raise UpstreamError(str(e) or type(e).__name__) from e

        if r.is_error:
            message = _error_message(r)
            LOGGER.error("Upstream %s %s: %s", method, path, message)
            raise UpstreamError(message, upstream_status=r.status_code)

        try:
            data = r.json()
        except ValueError as e:
            LOGGER.error("Malformed upstream response: %s", e)
            raise UpstreamError("Malformed upstream response") from e
        if not isinstance(data, dict):
            raise UpstreamError("Malformed upstream response")
        return data

    def create_prediction(self, version: str, input: dict[str, Any], wait: bool = False) -> dict[str, Any]:  # noqa: A002
        """
        POST /v1/predictions.

        Args:
            version: Model version identifier.
            input: Provider-specific input object.
            wait: Ask the upstream to hold the connection until the job finishes.
        """
        payload = {"version": version, "input": input}
        return self._request("POST", "/v1/predictions", headers=self._headers(wait), json=payload)

    def get_prediction(self, prediction_id: str) -> dict[str, Any]:
        """GET /v1/predictions/{id}."""
        return self._request("GET", f"/v1/predictions/{prediction_id}", headers=self._headers())
