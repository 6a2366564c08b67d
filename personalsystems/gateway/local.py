"""JSON-file key/value store used when the API is unreachable."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List

logger = logging.getLogger(__name__)

HABITS_KEY = "ps_habits"
ENTRIES_KEY = "ps_entries"
NOTES_KEY = "ps_notes"
IDEAS_KEY = "ps_ideas"
COLLECTION_KEYS = (HABITS_KEY, ENTRIES_KEY, NOTES_KEY, IDEAS_KEY)


class LocalStore:
    def __init__(self, path: Path | str):
        self.path = Path(path)

    def _read(self) -> Dict[str, List[dict]]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable local store %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            return {}
        return data

    def _write(self, data: Dict[str, List[dict]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
        tmp.replace(self.path)

    def get(self, key: str) -> List[dict]:
        items = self._read().get(key, [])
        return [item for item in items if isinstance(item, dict)] if isinstance(items, list) else []

    def set(self, key: str, items: List[dict]) -> None:
        data = self._read()
        data[key] = items
        self._write(data)

    def upsert(self, key: str, item: dict) -> dict:
        items = self.get(key)
        for idx, existing in enumerate(items):
            if existing.get("id") == item["id"]:
                items[idx] = item
                break
        else:
            items.append(item)
        self.set(key, items)
        return item

    def delete(self, key: str, item_id: str) -> bool:
        items = self.get(key)
        kept = [item for item in items if item.get("id") != item_id]
        if len(kept) == len(items):
            return False
        data = self._read()
        data[key] = kept
        if key == HABITS_KEY:
            data[ENTRIES_KEY] = [
                e for e in self.get(ENTRIES_KEY) if e.get("habit_id") != item_id
            ]
        self._write(data)
        return True
