"""
text2image — prompt compiler and generation orchestrator for Gemini / Imagen.

  compile_prompt(settings)               → final prompt text (pure)
  ImageGenerator(client).generate(...)   → GeneratedImage or GenerationError
"""

from .catalog import (
    DEFAULT_MODEL_ID,
    MODELS,
    STYLE_PROMPTS,
    AspectRatio,
    ModelFamily,
    ModelOption,
    StylePreset,
    resolve_family,
)
from .compiler import compile_prompt
from .generator import GenerationError, ImageGenerator, create_client
from .history import HistoryManager, HistoryStore, JsonHistoryStore
from .models import GeneratedImage, GenerationSettings, HistoryItem

__all__ = [
    "DEFAULT_MODEL_ID",
    "MODELS",
    "STYLE_PROMPTS",
    "AspectRatio",
    "ModelFamily",
    "ModelOption",
    "StylePreset",
    "resolve_family",
    "compile_prompt",
    "GenerationError",
    "ImageGenerator",
    "create_client",
    "HistoryManager",
    "HistoryStore",
    "JsonHistoryStore",
    "GeneratedImage",
    "GenerationSettings",
    "HistoryItem",
]
