"""Pydantic models for request/response types."""
from __future__ import annotations
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

ALLOWED_MODELS: tuple[str, ...] = ("musicgen", "riffusion", "other-model")
DEFAULT_MODEL = "musicgen"

# Statuses that mean the upstream job is still running.
IN_PROGRESS_STATUSES = frozenset({"starting", "processing"})


class _TuningRequest(BaseModel):
    """Shared body handling: a JSON null counts as an omitted field."""

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class MusicGenRequest(_TuningRequest):
    """Body of POST /api/generate-audio; every tuning field has a default."""

    prompt: str = Field(min_length=1)
    model: str = DEFAULT_MODEL
    top_k: int | float = 250
    top_p: float = 0
    duration: int | float = 8
    temperature: float = 1
    continuation: bool = False
    model_version: str = "stereo-large"
    output_format: str = "mp3"
    continuation_start: int | float = 0
    multi_band_diffusion: bool = False
    normalization_strategy: str = "peak"
    classifier_free_guidance: float = 3

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True, protected_namespaces=())

    def to_input(self) -> dict[str, Any]:
        """Upstream `input` object: every field except the model selector."""
        return self.model_dump(exclude={"model"})


class RiffusionRequest(_TuningRequest):
    """Body of POST /api/riffusion-generate."""

    prompt: str = Field(min_length=1)
    prompt_b: str | None = ""
    denoising: float = 0.75
    alpha: float = 0.5
    num_inference_steps: int | float = 50
    seed_image_id: str = "vibes"

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    def to_input(self) -> dict[str, Any]:
        """Upstream `input` object; prompt_b/alpha only for a non-blank prompt_b."""
        params: dict[str, Any] = {
            "prompt_a": self.prompt,
            "denoising": self.denoising,
            "num_inference_steps": self.num_inference_steps,
            "seed_image_id": self.seed_image_id,
        }
        if self.prompt_b and self.prompt_b.strip():
            params["prompt_b"] = self.prompt_b
            params["alpha"] = self.alpha
        return params


class PredictionJob(BaseModel):
    """Upstream prediction; unknown fields are kept so it can be echoed back."""

    id: str | None = None
    status: str | None = None
    output: Any = None
    error: Any = None

    model_config = ConfigDict(extra="allow")

    @property
    def in_progress(self) -> bool:
        return self.status in IN_PROGRESS_STATUSES

    def to_payload(self) -> dict[str, Any]:
        """Dump as received: declared fields the upstream omitted stay omitted."""
        payload = self.model_dump()
        for name in type(self).model_fields:
            if name not in self.model_fields_set:
                payload.pop(name, None)
        return payload


def default_parameters(version: str) -> dict[str, Any]:
    """Default MusicGen parameter set advertised by GET /api/parameters."""
    defaults = {
        name: info.default
        for name, info in MusicGenRequest.model_fields.items()
        if name not in ("prompt", "model")
    }
    return {"version": version, **defaults}
