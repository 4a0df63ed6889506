"""
history.py — Visual history of generated images.

The generator never touches history; callers record a result after a
successful generate() and leave history alone on failure.

  HistoryStore      load()/save() contract for any storage medium
  JsonHistoryStore  one JSON file, newest item first
  HistoryManager    list + "current" item, persisted on every change
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional, Protocol

from pydantic import TypeAdapter, ValidationError

from .models import GeneratedImage, GenerationSettings, HistoryItem

logger = logging.getLogger(__name__)

_ITEMS_ADAPTER = TypeAdapter(List[HistoryItem])


class HistoryStore(Protocol):
    def load(self) -> List[HistoryItem]: ...

    def save(self, items: List[HistoryItem]) -> None: ...


class JsonHistoryStore:
    """History persisted as a camelCase JSON array in a single file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> List[HistoryItem]:
        if not self.path.exists():
            return []
        try:
            raw = self.path.read_text(encoding="utf-8")
            return _ITEMS_ADAPTER.validate_json(raw)
        except (OSError, ValidationError, ValueError) as e:
            logger.error(f"Failed to load history from {self.path}: {e}")
            return []

    def save(self, items: List[HistoryItem]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = _ITEMS_ADAPTER.dump_python(items, mode="json", by_alias=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        tmp_path.replace(self.path)


class HistoryManager:
    """Ordered history (newest first) with a current/display item."""

    def __init__(self, store: HistoryStore) -> None:
        self.store = store
        self.items: List[HistoryItem] = []
        self.current: Optional[HistoryItem] = None

    def load(self) -> List[HistoryItem]:
        self.items = list(self.store.load())
        self.current = self.items[0] if self.items else None
        return self.items

    def __len__(self) -> int:
        return len(self.items)

    def get(self, image_id: str) -> HistoryItem:
        for item in self.items:
            if item.id == image_id:
                return item
        raise KeyError(image_id)

    def find(self, prefix: str) -> HistoryItem:
        """Look up by full id or a unique id prefix (as shown in listings)."""
        matches = [item for item in self.items if item.id.startswith(prefix)]
        if len(matches) != 1:
            raise KeyError(prefix)
        return matches[0]

    def add(self, image: GeneratedImage) -> HistoryItem:
        item = image if isinstance(image, HistoryItem) else HistoryItem.from_image(image)
        self.items = [item] + self.items
        self.current = item
        self._persist()
        return item

    def delete(self, image_id: str) -> None:
        self.get(image_id)
        self.items = [item for item in self.items if item.id != image_id]
        if self.current is not None and self.current.id == image_id:
            self.current = self.items[0] if self.items else None
        self._persist()

    def select(self, image_id: str) -> GenerationSettings:
        """Make an item current and return its settings for remixing."""
        item = self.get(image_id)
        self.current = item
        return remix_settings(item)

    def toggle_favorite(self, image_id: str) -> HistoryItem:
        item = self.get(image_id)
        updated = item.model_copy(update={"is_favorite": not item.is_favorite})
        self.items = [updated if i.id == image_id else i for i in self.items]
        if self.current is not None and self.current.id == image_id:
            self.current = updated
        self._persist()
        return updated

    def favorites(self) -> List[HistoryItem]:
        return [item for item in self.items if item.is_favorite]

    def _persist(self) -> None:
        self.store.save(self.items)


def remix_settings(item: GeneratedImage) -> GenerationSettings:
    """Settings to regenerate from; the original request is copied as-is."""
    return item.settings.model_copy()
