"""Job relay: submit generation requests upstream and wait for async jobs.

MusicGen is submitted with the synchronous-wait hint and its answer is
returned as-is. Riffusion is submitted, polled until it leaves the
in-progress statuses, then normalized so its output is a bare audio URL.
"""
from __future__ import annotations
import logging
import time
from typing import Any, Callable

from pydantic import ValidationError

from audio_relay.common.errors import (
    InvalidModelError,
    JobFailedError,
    PollTimeoutError,
    UpstreamError,
)
from audio_relay.common.schema import (
    ALLOWED_MODELS,
    MusicGenRequest,
    PredictionJob,
    RiffusionRequest,
)
from audio_relay.relay.upstream import PredictionClient

LOGGER = logging.getLogger("audio_relay.relay.job")

MUSICGEN_VERSION = "671ac645ce5e552cc63a54a2bbff63fcf798043055d2dac5fc9e36a837eedcfb"
RIFFUSION_VERSION = "8cf61ea6c56afd61d8f5b9ffd14d7c216c0a93844ce2d82ac1c9ecc9c7f24e05"

POLL_INTERVAL_SECONDS = 5.0
MAX_POLL_ATTEMPTS = 60


def _parse_job(data: dict[str, Any]) -> PredictionJob:
    try:
        return PredictionJob.model_validate(data)
    except ValidationError as e:
        LOGGER.error("Malformed upstream prediction: %s", e)
        raise UpstreamError("Malformed upstream response") from e


def normalize(job: PredictionJob) -> PredictionJob:
    """Flatten a succeeded job's {"audio": url} output to the url itself."""
    if job.status == "succeeded" and isinstance(job.output, dict):
        audio = job.output.get("audio")
        if audio:
            job.output = audio
    return job


class JobRelay:
    def __init__(
        self,
        client: PredictionClient,
        sleep: Callable[[float], None] = time.sleep,
        poll_interval: float = POLL_INTERVAL_SECONDS,
        max_attempts: int = MAX_POLL_ATTEMPTS,
    ) -> None:
        self._client = client
        self._sleep = sleep
        self._poll_interval = poll_interval
        self._max_attempts = max_attempts

    def submit(self, model: str, input: dict[str, Any]) -> dict[str, Any]:  # noqa: A002
        """
        Submit a prediction for one of the allowed models.

        Args:
            model: Model selector; must be one of ALLOWED_MODELS.
            input: Upstream input object with defaults already applied.

        Returns:
            The MusicGen response verbatim, or the initial Riffusion job descriptor.
        """
        if model not in ALLOWED_MODELS:
            LOGGER.warning("Rejected unsupported model %r", model)
            raise InvalidModelError(model)

        if model == "riffusion":
            LOGGER.info("Submitting Riffusion prediction: %s", _loggable(input))
            return self._client.create_prediction(RIFFUSION_VERSION, input)

        LOGGER.info("Submitting MusicGen prediction (model=%s): %s", model, _loggable(input))
        return self._client.create_prediction(MUSICGEN_VERSION, input, wait=True)

    def poll(self, job: PredictionJob) -> PredictionJob:
        """Wait until the job leaves the in-progress statuses.

        At most max_attempts status queries are made, poll_interval seconds
        apart. A failed job raises JobFailedError; running out of attempts
        raises PollTimeoutError.
        """
        if not job.id:
            raise UpstreamError("Failed to create prediction")

        prediction_id = job.id
        attempts = 0
        while job.in_progress:
            if attempts >= self._max_attempts:
                LOGGER.error("Prediction %s still %s after %d checks", job.id, job.status, attempts)
                raise PollTimeoutError(attempts)
            self._sleep(self._poll_interval)
            job = _parse_job(self._client.get_prediction(prediction_id))
            attempts += 1
            LOGGER.info("Prediction %s status check %d: %s", prediction_id, attempts, job.status)

        if job.status == "failed":
            LOGGER.error("Prediction %s failed: %s", job.id, job.error)
            raise JobFailedError(job.error)
        return job

    def generate_music(self, request: MusicGenRequest) -> dict[str, Any]:
        """Any allowed selector is accepted here; the request always goes to MusicGen."""
        if request.model not in ALLOWED_MODELS:
            LOGGER.warning("Rejected unsupported model %r", request.model)
            raise InvalidModelError(request.model)
        return self.submit("musicgen", request.to_input())

    def generate_riffusion(self, request: RiffusionRequest) -> dict[str, Any]:
        descriptor = self.submit("riffusion", request.to_input())
        job = _parse_job(descriptor)
        LOGGER.info("Riffusion prediction %s created (status=%s)", job.id, job.status)
        job = normalize(self.poll(job))
        if job.status == "succeeded":
            LOGGER.info("Riffusion generation completed: %s", job.output)
        return job.to_payload()


def _loggable(params: dict[str, Any]) -> dict[str, Any]:
    """Drop prompt text from INFO logs; it is logged only at DEBUG."""
    if LOGGER.isEnabledFor(logging.DEBUG):
        return params
    return {k: v for k, v in params.items() if not k.startswith("prompt")}
