"""
config.py — Runtime configuration from the environment / .env.

Environment variables:
  GEMINI_API_KEY                 API key (GOOGLE_API_KEY / API_KEY also accepted)
  TEXT2IMAGE_HISTORY             history JSON file
  TEXT2IMAGE_OUTPUT_DIR          where generated PNGs are written
  TEXT2IMAGE_PROGRESS_INTERVAL   seconds between synthetic progress ticks
  TEXT2IMAGE_MODEL               default model id
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from .catalog import DEFAULT_MODEL_ID
from .progress import DEFAULT_INTERVAL

HISTORY_FILENAME = "text2image-open-history-v1.json"
DEFAULT_HISTORY_PATH = Path.home() / ".text2image" / HISTORY_FILENAME
DEFAULT_OUTPUT_DIR = Path("outputs")

API_KEY_VARS = ("GEMINI_API_KEY", "GOOGLE_API_KEY", "API_KEY")


class ConfigError(Exception):
    """Required configuration is missing or malformed."""


@dataclass
class AppConfig:
    api_key: Optional[str] = None
    history_path: Path = DEFAULT_HISTORY_PATH
    output_dir: Path = DEFAULT_OUTPUT_DIR
    progress_interval: float = DEFAULT_INTERVAL
    default_model: str = DEFAULT_MODEL_ID

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        """Build config from `environ` (defaults to os.environ after loading .env)."""
        if environ is None:
            load_dotenv()
            environ = os.environ

        api_key = next((environ[k] for k in API_KEY_VARS if environ.get(k)), None)

        raw_interval = environ.get("TEXT2IMAGE_PROGRESS_INTERVAL")
        try:
            interval = float(raw_interval) if raw_interval else DEFAULT_INTERVAL
        except ValueError as exc:
            raise ConfigError(
                f"TEXT2IMAGE_PROGRESS_INTERVAL must be a number, got {raw_interval!r}"
            ) from exc
        if interval <= 0:
            raise ConfigError("TEXT2IMAGE_PROGRESS_INTERVAL must be positive")

        history = environ.get("TEXT2IMAGE_HISTORY")
        output = environ.get("TEXT2IMAGE_OUTPUT_DIR")
        return cls(
            api_key=api_key,
            history_path=Path(history).expanduser() if history else DEFAULT_HISTORY_PATH,
            output_dir=Path(output).expanduser() if output else DEFAULT_OUTPUT_DIR,
            progress_interval=interval,
            default_model=environ.get("TEXT2IMAGE_MODEL") or DEFAULT_MODEL_ID,
        )

    def require_api_key(self) -> str:
        if not self.api_key:
            raise ConfigError(
                "GEMINI_API_KEY not set. Create a .env file from .env.example and add your key."
            )
        return self.api_key
