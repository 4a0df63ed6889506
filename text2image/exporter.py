"""
exporter.py — Write a generated image to disk as a PNG.

The payload is decoded and opened with Pillow before anything is written,
so a truncated or non-image payload never produces a broken file.
"""

from __future__ import annotations

import base64
import binascii
import io
import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from .models import GeneratedImage

logger = logging.getLogger(__name__)

FILENAME_PREFIX = "text2image"


class ExportError(Exception):
    """Image payload could not be decoded or written."""


def download_filename(image: GeneratedImage) -> str:
    return f"{FILENAME_PREFIX}-{image.id[:8]}.png"


def decode_image(image: GeneratedImage) -> Image.Image:
    try:
        raw = base64.b64decode(image.base64_data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ExportError(f"Image {image.id} payload is not valid base64: {e}") from e
    try:
        img = Image.open(io.BytesIO(raw))
        img.load()
    except (UnidentifiedImageError, OSError) as e:
        raise ExportError(f"Image {image.id} payload is not a readable image: {e}") from e
    return img


def save_image(image: GeneratedImage, output_dir: Path) -> Path:
    """Save as <output_dir>/text2image-<id8>.png and return the path."""
    img = decode_image(image)
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    save_path = output_dir / download_filename(image)
    img.save(save_path, format="PNG")
    logger.info(f"Saved {save_path.name} ({img.width}x{img.height})")
    return save_path
