"""
generator.py — Runs one image generation request end to end.

  settings ──► compile_prompt ──► family dispatch ──► extraction ──► GeneratedImage
                   │                    │
                   │       Imagen  → client.aio.models.generate_images
                   │       others  → client.aio.models.generate_content
                   │
          SyntheticProgress ticks alongside the backend call

Exactly one outcome per call: a GeneratedImage with a non-empty payload, or
a GenerationError. Each call is attempted once; there are no retries.
"""

from __future__ import annotations

import base64
import logging
import time
import uuid
from typing import Any, Optional, Union

from google import genai
from google.genai import types

from .catalog import ModelFamily, resolve_family
from .compiler import compile_prompt
from .models import GeneratedImage, GenerationSettings
from .progress import DEFAULT_INTERVAL, ProgressCallback, SyntheticProgress

logger = logging.getLogger(__name__)

NO_IMAGE_DATA_MESSAGE = "No image data returned from the API."
DEFAULT_FAILURE_MESSAGE = "Failed to generate image"
OUTPUT_MIME_TYPE = "image/png"


class GenerationError(Exception):
    """The single error surfaced by ImageGenerator.generate."""

    def __init__(self, message: str = DEFAULT_FAILURE_MESSAGE) -> None:
        super().__init__(message)
        self.message = message


def create_client(api_key: Optional[str] = None) -> genai.Client:
    return genai.Client(api_key=api_key)


# ── Response extraction ──────────────────────────────────────────────────────

def _encode_payload(data: Union[bytes, str, None]) -> Optional[str]:
    if not data:
        return None
    if isinstance(data, str):
        return data
    return base64.b64encode(data).decode("ascii")


def extract_generated_image(response: Any) -> Optional[str]:
    """Image-specialist shape: first generated image's bytes, if any."""
    generated = getattr(response, "generated_images", None) or []
    if not generated:
        return None
    image = getattr(generated[0], "image", None)
    if image is None:
        return None
    return _encode_payload(getattr(image, "image_bytes", None))


def extract_inline_image(response: Any) -> Optional[str]:
    """Generic content shape: first inline-data part of the first candidate."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None
    content = getattr(candidates[0], "content", None)
    for part in getattr(content, "parts", None) or []:
        inline = getattr(part, "inline_data", None)
        if inline is not None and getattr(inline, "data", None):
            return _encode_payload(inline.data)
    return None


# ── Orchestrator ─────────────────────────────────────────────────────────────

class ImageGenerator:
    """Compiles, dispatches and normalises generation requests against one client."""

    def __init__(self, client: Any, progress_interval: float = DEFAULT_INTERVAL) -> None:
        self.client = client
        self.progress_interval = progress_interval
        self._last_timestamp = 0

    async def generate(
        self,
        settings: GenerationSettings,
        on_progress: Optional[ProgressCallback] = None,
    ) -> GeneratedImage:
        family = resolve_family(settings.model_id)
        progress = SyntheticProgress(
            on_progress,
            increment=family.progress_increment,
            interval=self.progress_interval,
        )

        try:
            async with progress:
                prompt = compile_prompt(settings)
                logger.debug(f"Compiled prompt for {settings.model_id}: {prompt}")
                base64_data = await self._dispatch(family, settings, prompt)
                if not base64_data:
                    raise GenerationError(NO_IMAGE_DATA_MESSAGE)
        except GenerationError as exc:
            logger.error(f"Image generation failed: {exc.message}")
            raise
        except Exception as exc:
            message = str(exc) or DEFAULT_FAILURE_MESSAGE
            logger.error(f"Image generation failed: {message}")
            raise GenerationError(message) from exc

        progress.complete()
        return GeneratedImage(
            id=str(uuid.uuid4()),
            base64_data=base64_data,
            settings=settings,
            timestamp=self._next_timestamp(),
            model=settings.model_id,
        )

    async def _dispatch(
        self,
        family: ModelFamily,
        settings: GenerationSettings,
        prompt: str,
    ) -> Optional[str]:
        aspect_ratio = settings.aspect_ratio.value
        logger.info(f"Generating with {settings.model_id} ({family.value}, {aspect_ratio})")

        if family.uses_image_endpoint:
            response = await self.client.aio.models.generate_images(
                model=settings.model_id,
                prompt=prompt,
                config=types.GenerateImagesConfig(
                    number_of_images=1,
                    output_mime_type=OUTPUT_MIME_TYPE,
                    aspect_ratio=aspect_ratio,
                ),
            )
            return extract_generated_image(response)

        response = await self.client.aio.models.generate_content(
            model=settings.model_id,
            contents=types.Content(
                role="user",
                parts=[types.Part.from_text(text=prompt)],
            ),
            config=types.GenerateContentConfig(
                image_config=types.ImageConfig(aspect_ratio=aspect_ratio),
            ),
        )
        return extract_inline_image(response)

    def _next_timestamp(self) -> int:
        now = int(time.time() * 1000)
        self._last_timestamp = max(now, self._last_timestamp)
        return self._last_timestamp
