"""
models.py — Pydantic schema for requests, results and history entries.

All models are frozen: a settings object is never mutated while a request
is in flight, and a result never changes after it is returned. JSON uses
camelCase keys (negativePrompt, base64Data, …) so history files keep the
same shape as the browser build's local storage; snake_case is accepted on
input as well.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .catalog import DEFAULT_MODEL_ID, AspectRatio, StylePreset

DEFAULT_STEPS = 30
DEFAULT_GUIDANCE_SCALE = 7.0


class _Frozen(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        protected_namespaces=(),
    )


class GenerationSettings(_Frozen):
    prompt: str = Field(description="Raw user text, may contain (word:1.3) and a | b syntax")
    negative_prompt: str = Field(default="", description="Content to exclude; empty means none")
    aspect_ratio: AspectRatio = AspectRatio.SQUARE
    style_preset: StylePreset = StylePreset.NONE
    model_id: str = Field(default=DEFAULT_MODEL_ID, min_length=1)
    steps: int = Field(
        default=DEFAULT_STEPS, ge=10, le=50,
        description="Quality knob; only affects prompt text above 40",
    )
    guidance_scale: float = Field(
        default=DEFAULT_GUIDANCE_SCALE, ge=1, le=20,
        description="Adherence knob; only affects prompt text above 12 or below 5",
    )
    seed: Optional[int] = Field(default=None, description="Recorded for remixing, never sent to the backend")


class GeneratedImage(_Frozen):
    id: str
    base64_data: str = Field(min_length=1)
    settings: GenerationSettings
    timestamp: int = Field(description="Milliseconds since the epoch")
    model: str


class HistoryItem(GeneratedImage):
    is_favorite: bool = False

    @classmethod
    def from_image(cls, image: GeneratedImage, is_favorite: bool = False) -> "HistoryItem":
        return cls(
            id=image.id,
            base64_data=image.base64_data,
            settings=image.settings,
            timestamp=image.timestamp,
            model=image.model,
            is_favorite=is_favorite,
        )
