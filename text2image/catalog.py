"""
catalog.py — Static catalog: aspect ratios, style presets, models, samples.

Model families decide two things downstream:
  Imagen  → image-specialist call (generate_images)
  Flash   → generic content call, fast synthetic progress
  Pro     → generic content call, slow synthetic progress
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


class AspectRatio(str, Enum):
    SQUARE = "1:1"
    LANDSCAPE = "16:9"
    PORTRAIT = "9:16"
    CLASSIC_LANDSCAPE = "4:3"
    CLASSIC_PORTRAIT = "3:4"


class StylePreset(str, Enum):
    NONE = "None"
    PHOTOREALISTIC = "Photorealistic"
    ANIME = "Anime"
    CINEMATIC = "Cinematic"
    DIGITAL_ART = "Digital Art"
    PIXEL_ART = "Pixel Art"
    LINE_ART = "Line Art"
    FANTASY = "Fantasy"


class ModelFamily(str, Enum):
    FLASH = "Flash"
    PRO = "Pro"
    IMAGEN = "Imagen"

    @property
    def uses_image_endpoint(self) -> bool:
        """Imagen models go through generate_images; everything else through generate_content."""
        return self is ModelFamily.IMAGEN

    @property
    def progress_increment(self) -> int:
        return 15 if self is ModelFamily.FLASH else 5


@dataclass(frozen=True)
class ModelOption:
    id: str
    name: str
    description: str
    family: ModelFamily


# ── Catalog ──────────────────────────────────────────────────────────────────

MODELS: List[ModelOption] = [
    ModelOption(
        id="gemini-2.5-flash-image",
        name="Gemini 2.5 Flash",
        description="Fastest generation, low latency. Good for iteration.",
        family=ModelFamily.FLASH,
    ),
    ModelOption(
        id="gemini-3-pro-image-preview",
        name="Gemini 3 Pro",
        description="High fidelity, better instruction following. Slower generation.",
        family=ModelFamily.PRO,
    ),
    ModelOption(
        id="imagen-3.0-generate-001",
        name="Imagen 3",
        description="High photorealism and texture detail. Specialized for image generation.",
        family=ModelFamily.IMAGEN,
    ),
    ModelOption(
        id="imagen-4.0-generate-001",
        name="Imagen 4 (Preview)",
        description="Next-gen image generation. Highest quality and coherence.",
        family=ModelFamily.IMAGEN,
    ),
]

DEFAULT_MODEL_ID = "gemini-2.5-flash-image"

_MODELS_BY_ID: Dict[str, ModelOption] = {m.id: m for m in MODELS}

STYLE_PROMPTS: Dict[StylePreset, str] = {
    StylePreset.NONE:           "",
    StylePreset.PHOTOREALISTIC: "photorealistic, 8k, highly detailed, professional photography, 85mm lens, sharp focus",
    StylePreset.ANIME:          "anime style, studio ghibli, vibrant colors, clean lines, high quality illustration",
    StylePreset.CINEMATIC:      "cinematic lighting, movie scene, dramatic atmosphere, color graded, wide angle, 4k",
    StylePreset.DIGITAL_ART:    "digital painting, trending on artstation, concept art, smooth, sharp details",
    StylePreset.PIXEL_ART:      "pixel art, 16-bit, retro game style, dithering",
    StylePreset.LINE_ART:       "black and white, ink drawing, line art, minimal, clean",
    StylePreset.FANTASY:        "fantasy art, oil painting style, magical atmosphere, detailed background",
}

SAMPLE_PROMPTS: List[str] = [
    "A futuristic city at sunset with neon lights and flying cars",
    "A cute robot gardening in a greenhouse, soft lighting",
    "Portrait of an astronaut reflecting the galaxy in their helmet visor",
    "Medieval castle on a floating island, waterfalls, eagles flying",
]


# ── Lookups ──────────────────────────────────────────────────────────────────

def get_model(model_id: str) -> Optional[ModelOption]:
    return _MODELS_BY_ID.get(model_id)


def resolve_family(model_id: str) -> ModelFamily:
    """
    Classify a model id into its family.

    Catalog entries win. Ids outside the catalog are classified by the
    naming convention the backend uses: "imagen-" prefix, then "flash"
    anywhere in the id, otherwise Pro.
    """
    option = _MODELS_BY_ID.get(model_id)
    if option is not None:
        return option.family

    logger.warning(f"Model '{model_id}' is not in the catalog, guessing family from its name")
    if model_id.startswith("imagen-"):
        return ModelFamily.IMAGEN
    if "flash" in model_id:
        return ModelFamily.FLASH
    return ModelFamily.PRO


def random_sample_prompt(rng: Optional[random.Random] = None) -> str:
    return (rng or random).choice(SAMPLE_PROMPTS)
