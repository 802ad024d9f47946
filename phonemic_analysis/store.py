"""
In-memory language catalogue.

The store owns the ordered collection of LanguageRecords and every mutation
of it: adding languages (id assignment, text normalization), replacing them
from an edit session, and deleting them. Observers registered through
on_change are told after every mutation, which is how the local cache is
kept fresh.

Edit sessions are copy-on-write: the draft is a deep copy and the stored
record only changes when the session is saved.
"""

from __future__ import annotations

import copy
import logging
import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Iterable, Iterator, Optional

from phonemic_analysis.features import Polarity
from phonemic_analysis.models import (
    LanguageRecord,
    Mapping,
    TextOrSequence,
    split_multi_value,
    unique_in_order,
)

logger = logging.getLogger(__name__)

ChangeListener = Callable[[list[LanguageRecord]], None]

# Fields edited as symbol lists; set-like ones are deduplicated
_LIST_FIELDS = {"surface_phonemes", "analyzed_phonemes", "elementary_segments", "suprasegmentals"}
_SET_FIELDS = {"elementary_segments", "suprasegmentals"}
_MAPPING_FIELDS = {"surface", "elementary", "notes"}

VOWELS = ("a", "e", "i", "o", "u", "æ", "ɑ", "ɛ", "ɪ", "ɒ", "ɔ", "ʊ", "ʌ", "ə", "ɜ")
_DIACRITICS_RE = re.compile("[ːˑ̥̃̊]")
_VOWEL_START_RE = re.compile("^[aeiouæɑɛɪɒɔʊʌəɜ]")


def _normalize_field(name: str, value):
    if name in _LIST_FIELDS:
        symbols = split_multi_value(value)
        return unique_in_order(symbols) if name in _SET_FIELDS else symbols
    if name == "coordinates":
        lat, lon = value
        return (float(lat), float(lon))
    if name == "features":
        return int(value or 0)
    if name == "surface_mappings":
        return [m if isinstance(m, Mapping) else Mapping.from_dict(m) for m in value or []]
    return value


@dataclass
class ViewState:
    """Selection state of whoever is browsing the catalogue.

    Kept apart from the records so deleting a language can clear any
    selection pointing at it.
    """
    selected_language_id: Optional[int] = None
    selected_segment: Optional[str] = None
    selected_feature: Optional[str] = None
    feature_polarity: Polarity = Polarity.PLUS

    def select_language(self, language_id: Optional[int]) -> None:
        self.selected_language_id = language_id
        self.selected_segment = None
        self.selected_feature = None
        self.feature_polarity = Polarity.PLUS

    def toggle_segment(self, segment: str) -> None:
        self.selected_segment = None if self.selected_segment == segment else segment

    def click_feature(self, feature: str) -> None:
        """Cycle a feature highlight: plus -> minus -> off."""
        if self.selected_feature != feature:
            self.selected_feature = feature
            self.feature_polarity = Polarity.PLUS
        elif self.feature_polarity is Polarity.PLUS:
            self.feature_polarity = Polarity.MINUS
        else:
            self.selected_feature = None
            self.feature_polarity = Polarity.PLUS

    def clear_language(self, language_id: int) -> None:
        if self.selected_language_id == language_id:
            self.select_language(None)


def is_vowel(phoneme: str) -> bool:
    """Rough vowel test used to filter surface inventories."""
    clean = _DIACRITICS_RE.sub("", phoneme).lower()
    return any(v in clean for v in VOWELS) or bool(_VOWEL_START_RE.match(clean))


@dataclass
class OverviewStats:
    """Per-symbol usage counts across the whole catalogue."""
    language_count: int = 0
    surface_phonemes: Counter = field(default_factory=Counter)
    elementary_segments: Counter = field(default_factory=Counter)
    suprasegmentals: Counter = field(default_factory=Counter)

    @property
    def unique_suprasegmentals(self) -> list[str]:
        return list(self.suprasegmentals)

    def items(self, kind: str, search: str = "", category: str = "all") -> list[tuple[str, int]]:
        """Symbols of one kind with their language counts, sorted.

        Args:
            kind: "surface", "elementary" or "suprasegmentals"
            search: Case-insensitive substring filter
            category: "all", "vowels" or "consonants" (surface phonemes only)
        """
        counters = {
            "surface": self.surface_phonemes,
            "elementary": self.elementary_segments,
            "suprasegmentals": self.suprasegmentals,
        }
        if kind not in counters:
            raise ValueError(f"Unknown inventory kind: {kind!r}")
        if category not in ("all", "vowels", "consonants"):
            raise ValueError(f"Unknown category: {category!r}")

        items = list(counters[kind].items())
        if kind == "surface" and category != "all":
            want_vowels = category == "vowels"
            items = [(p, n) for p, n in items if is_vowel(p) == want_vowels]

        needle = search.lower()
        return sorted((s, n) for s, n in items if needle in s.lower())


class LanguageStore:
    """Ordered, mutable collection of LanguageRecords."""

    def __init__(
        self,
        records: Iterable[LanguageRecord] = (),
        on_change: Optional[ChangeListener] = None,
        last_id: int = 0,
    ):
        self._records: list[LanguageRecord] = list(records)
        self._listeners: list[ChangeListener] = [on_change] if on_change else []
        ids = [r.id for r in self._records]
        if len(ids) != len(set(ids)):
            raise ValueError("Language ids must be unique")
        # ids below the high-water mark are retired even if no record holds them
        self._last_id = max(last_id, max(ids, default=0))

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[LanguageRecord]:
        return iter(self._records)

    @property
    def records(self) -> list[LanguageRecord]:
        return list(self._records)

    @property
    def last_id(self) -> int:
        """Highest id ever assigned by (or loaded into) this store."""
        return self._last_id

    def subscribe(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def _changed(self) -> None:
        snapshot = self.records
        for listener in self._listeners:
            listener(snapshot)

    def next_id(self) -> int:
        return self._last_id + 1

    def get(self, language_id: int) -> LanguageRecord:
        for record in self._records:
            if record.id == language_id:
                return record
        raise KeyError(f"No language with id {language_id}")

    def find(self, name_or_id: str | int) -> Optional[LanguageRecord]:
        """Look a language up by numeric id or case-insensitive name."""
        key = str(name_or_id).strip()
        if key.isdigit():
            try:
                return self.get(int(key))
            except KeyError:
                pass
        for record in self._records:
            if record.name.lower() == key.lower():
                return record
        return None

    def add(
        self,
        name: str,
        family: str = "",
        coordinates: tuple[float, float] = (0.0, 0.0),
        surface_phonemes: TextOrSequence = "",
        elementary_segments: TextOrSequence = "",
        suprasegmentals: TextOrSequence = "",
        features: int = 0,
        surface_mappings: Iterable[Mapping] = (),
        dialect_notes: Optional[str] = None,
        iso_code: str = "",
        complexity: str = "",
    ) -> LanguageRecord:
        """Create a language with the next free id and append it."""
        if not name or not name.strip():
            raise ValueError("Language name is required")
        record = LanguageRecord(
            id=self.next_id(),
            name=name.strip(),
            family=family.strip(),
            coordinates=_normalize_field("coordinates", coordinates),
            surface_phonemes=_normalize_field("surface_phonemes", surface_phonemes),
            elementary_segments=_normalize_field("elementary_segments", elementary_segments),
            suprasegmentals=_normalize_field("suprasegmentals", suprasegmentals),
            features=_normalize_field("features", features),
            surface_mappings=_normalize_field("surface_mappings", surface_mappings),
            dialect_notes=dialect_notes,
            iso_code=iso_code.strip(),
            complexity=complexity,
        )
        self._records.append(record)
        self._last_id = record.id
        logger.info("Added language %s (id %d)", record.name, record.id)
        self._changed()
        return record

    def replace(self, record: LanguageRecord) -> None:
        """Swap in a new version of an existing record (matched by id)."""
        for index, existing in enumerate(self._records):
            if existing.id == record.id:
                self._records[index] = record
                logger.info("Updated language %s (id %d)", record.name, record.id)
                self._changed()
                return
        raise KeyError(f"No language with id {record.id}")

    def delete(self, language_id: int, view: Optional[ViewState] = None) -> LanguageRecord:
        """Remove a language and clear any selection referencing it."""
        record = self.get(language_id)
        self._records.remove(record)
        if view is not None:
            view.clear_language(language_id)
        logger.info("Deleted language %s (id %d)", record.name, record.id)
        self._changed()
        return record

    def edit(self, language_id: int) -> EditSession:
        return EditSession(self, self.get(language_id))

    def overview(self) -> OverviewStats:
        stats = OverviewStats(language_count=len(self._records))
        for record in self._records:
            stats.surface_phonemes.update(record.surface_phonemes or [])
            stats.elementary_segments.update(record.elementary_segments or [])
            stats.suprasegmentals.update(record.suprasegmentals or [])
        return stats


class EditSession:
    """Copy-on-write draft of one language.

    Changes go to the draft only. save() replaces the stored record,
    cancel() throws the draft away; either closes the session.
    """

    def __init__(self, store: LanguageStore, record: LanguageRecord):
        self._store = store
        self.draft = copy.deepcopy(record)
        self.closed = False

    def _ensure_open(self) -> None:
        if self.closed:
            raise RuntimeError("Edit session is closed")

    def update_field(self, name: str, value) -> None:
        self._ensure_open()
        if name == "id" or not hasattr(self.draft, name):
            raise ValueError(f"Cannot edit field {name!r}")
        setattr(self.draft, name, _normalize_field(name, value))

    def update_mapping(self, index: int, field_name: str, value: str) -> None:
        self._ensure_open()
        if field_name == "rule":
            field_name = "notes"
        if field_name not in _MAPPING_FIELDS:
            raise ValueError(f"Cannot edit mapping field {field_name!r}")
        mappings = self.draft.surface_mappings
        old = mappings[index]
        values = old.to_dict()
        values[field_name] = value
        mappings[index] = Mapping(**values)

    def add_mapping(self, surface: str, elementary: str, notes: str = "") -> Mapping:
        self._ensure_open()
        mapping = Mapping(surface, elementary, notes)
        self.draft.surface_mappings.append(mapping)
        return mapping

    def remove_mapping(self, index: int) -> Mapping:
        self._ensure_open()
        return self.draft.surface_mappings.pop(index)

    def save(self) -> LanguageRecord:
        self._ensure_open()
        self._store.replace(self.draft)
        self.closed = True
        return self.draft

    def cancel(self) -> None:
        self._ensure_open()
        self.closed = True
