"""
Local cache of the language catalogue.

Provides:
- LanguageCache: JSON snapshot of the whole collection stored under a fixed
  key, together with the highest id ever assigned
- load_store(): a LanguageStore built from the snapshot (or the seed
  languages) that writes every change back to the cache

An unreadable or malformed snapshot is never fatal: it is logged and the
seed languages are used instead.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, List, Optional

from phonemic_analysis.config import CACHE_FILE, CACHE_KEY
from phonemic_analysis.models import LanguageRecord
from phonemic_analysis.seed import seed_languages
from phonemic_analysis.store import LanguageStore

logger = logging.getLogger(__name__)


class LanguageCache:
    """Local snapshot of the whole language collection.

    The file holds a JSON object with the records stored under a fixed key,
    so other tools can share the file. The id high-water mark is kept next
    to them under "<key>LastId" so deleted ids stay retired across runs.
    Every save rewrites the full snapshot; there is no merging. A missing
    or unreadable snapshot simply loads as None.
    """

    def __init__(self, path: str | Path = CACHE_FILE, key: str = CACHE_KEY):
        self.path = Path(path)
        self.key = key

    @property
    def last_id_key(self) -> str:
        return f"{self.key}LastId"

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable cache %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring cache %s: expected a JSON object", self.path)
            return {}
        return data

    def _write(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")

    def load(self) -> Optional[List[LanguageRecord]]:
        entries = self._read().get(self.key)
        if entries is None:
            return None
        try:
            records = [LanguageRecord.from_dict(e) for e in entries]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.warning("Ignoring malformed cache entry in %s: %s", self.path, e)
            return None
        logger.debug("Loaded %d languages from %s", len(records), self.path)
        return records

    def load_last_id(self) -> int:
        """Highest id ever handed out, 0 when none was recorded."""
        value = self._read().get(self.last_id_key, 0)
        try:
            return int(value or 0)
        except (TypeError, ValueError):
            logger.warning("Ignoring malformed %s in %s: %r", self.last_id_key, self.path, value)
            return 0

    def save(self, records: Iterable[LanguageRecord], last_id: Optional[int] = None) -> None:
        data = self._read()
        data[self.key] = [r.to_dict() for r in records]
        if last_id is not None:
            data[self.last_id_key] = last_id
        self._write(data)
        logger.debug("Saved %d languages to %s", len(data[self.key]), self.path)

    def clear(self) -> None:
        data = self._read()
        removed = [k for k in (self.key, self.last_id_key) if data.pop(k, None) is not None]
        if removed:
            self._write(data)


def load_store(cache: Optional[LanguageCache] = None) -> LanguageStore:
    """Build a store from the cache (or the seed languages) that saves back to it."""
    records = cache.load() if cache is not None else None
    store = None
    if records is not None:
        try:
            store = LanguageStore(records, last_id=cache.load_last_id())
        except ValueError as e:
            logger.warning("Ignoring cached languages in %s: %s", cache.path, e)
    if store is None:
        store = LanguageStore(seed_languages())
    if cache is not None:
        store.subscribe(lambda snapshot: cache.save(snapshot, last_id=store.last_id))
    return store
