"""
Core data models for phonemic analysis.

A LanguageRecord holds the surface inventory of one language, the smaller
elementary inventory it decomposes into, and the table of mappings that
spells every surface phoneme as a string of elementary segments.

Design Philosophy:
- Plain dataclasses: records are edited in place by the store, drafts are deep copies
- Serializable: every model converts to/from JSON for the local cache
- Forgiving on input: absent collections load as empty, text fields are split
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Iterable, Optional, Union

# Separators accepted in free-text inventory fields ("p t k", "p, t, k")
_SPLIT_RE = re.compile(r"[,\s]+")

# Original browser snapshots used camelCase keys
_LEGACY_KEYS = {
    "surfacePhonemes": "surface_phonemes",
    "elementarySegments": "elementary_segments",
    "surfaceMappings": "surface_mappings",
    "dialectNotes": "dialect_notes",
    "analyzedPhonemes": "analyzed_phonemes",
    "isoCode": "iso_code",
}

TextOrSequence = Union[str, Iterable[str], None]


def split_multi_value(value: TextOrSequence) -> list[str]:
    """Normalize a comma/whitespace separated field into a list of symbols.

    Strings are split on commas and whitespace; sequences are kept in order
    with each element stripped. Empty tokens are dropped, duplicates are kept.

    Example:
        >>> split_multi_value("p, t k")
        ['p', 't', 'k']
    """
    if value is None:
        return []
    if isinstance(value, str):
        return [token for token in _SPLIT_RE.split(value.strip()) if token]
    return [str(v).strip() for v in value if str(v).strip()]


def unique_in_order(symbols: Iterable[str]) -> list[str]:
    """Drop repeated symbols, keeping the first occurrence."""
    seen: set[str] = set()
    result = []
    for symbol in symbols:
        if symbol not in seen:
            seen.add(symbol)
            result.append(symbol)
    return result


@dataclass(frozen=True)
class Mapping:
    """Decomposition of one surface phoneme into elementary segments.

    Attributes:
        surface: Surface phoneme symbol (should appear in the owning record)
        elementary: Concatenated elementary symbols, ':' marks length
        notes: Free-text explanation of the decomposition
    """
    surface: str
    elementary: str
    notes: str = ""

    def to_dict(self) -> dict:
        return {"surface": self.surface, "elementary": self.elementary, "notes": self.notes}

    @classmethod
    def from_dict(cls, d: dict) -> Mapping:
        # older records carry the explanation under "rule"; null fields read as empty
        return cls(
            surface=d.get("surface") or "",
            elementary=d.get("elementary") or "",
            notes=d.get("notes") or d.get("rule") or "",
        )

    def __str__(self) -> str:
        return f"{self.surface}→{self.elementary}"


@dataclass
class LanguageRecord:
    """A single language in the catalogue.

    The record is the unit the validator and similarity engine work on:
    - surface_phonemes: ordered surface inventory (display order, duplicates kept)
    - elementary_segments: minimal underlying inventory (set semantics)
    - surface_mappings: surface -> elementary decompositions
    - suprasegmentals: features such as "length" or "stress"
    """
    id: int
    name: str
    family: str = ""
    coordinates: tuple[float, float] = (0.0, 0.0)
    surface_phonemes: list[str] = field(default_factory=list)
    elementary_segments: list[str] = field(default_factory=list)
    suprasegmentals: list[str] = field(default_factory=list)
    features: int = 0
    surface_mappings: list[Mapping] = field(default_factory=list)
    dialect_notes: Optional[str] = None
    iso_code: str = ""
    complexity: str = ""
    analyzed_phonemes: list[str] = field(default_factory=list)

    @property
    def surface_count(self) -> int:
        return len(self.surface_phonemes or [])

    @property
    def elementary_count(self) -> int:
        return len(self.elementary_segments or [])

    @property
    def segment_set(self) -> frozenset[str]:
        """Elementary inventory as a set (case-sensitive symbols)."""
        return frozenset(self.elementary_segments or [])

    @property
    def reduction_percent(self) -> float:
        """How much smaller the elementary inventory is than the surface one."""
        if not self.surface_count:
            return 0.0
        return round((1 - self.elementary_count / self.surface_count) * 100, 1)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "family": self.family,
            "coordinates": list(self.coordinates),
            "iso_code": self.iso_code,
            "surface_phonemes": list(self.surface_phonemes),
            "analyzed_phonemes": list(self.analyzed_phonemes),
            "elementary_segments": list(self.elementary_segments),
            "suprasegmentals": list(self.suprasegmentals),
            "features": self.features,
            "complexity": self.complexity,
            "surface_mappings": [m.to_dict() for m in self.surface_mappings],
            "dialect_notes": self.dialect_notes,
        }

    @classmethod
    def from_dict(cls, d: dict) -> LanguageRecord:
        d = {_LEGACY_KEYS.get(k, k): v for k, v in d.items()}
        lat, lon = d.get("coordinates") or (0.0, 0.0)
        return cls(
            id=int(d["id"]),
            name=d.get("name") or "",
            family=d.get("family") or "",
            coordinates=(float(lat), float(lon)),
            iso_code=d.get("iso_code") or "",
            surface_phonemes=split_multi_value(d.get("surface_phonemes")),
            analyzed_phonemes=split_multi_value(d.get("analyzed_phonemes")),
            elementary_segments=unique_in_order(split_multi_value(d.get("elementary_segments"))),
            suprasegmentals=unique_in_order(split_multi_value(d.get("suprasegmentals"))),
            features=int(d.get("features") or 0),
            complexity=d.get("complexity") or "",
            surface_mappings=[Mapping.from_dict(m) for m in d.get("surface_mappings") or []],
            dialect_notes=d.get("dialect_notes"),
        )

    def to_json(self, indent: int = 2) -> str:
        """Serialize record to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_json(cls, json_str: str) -> LanguageRecord:
        """Deserialize record from JSON string."""
        return cls.from_dict(json.loads(json_str))

    def summary(self) -> str:
        """Return a human-readable summary of the record."""
        lat, lon = self.coordinates
        return (
            f"{self.name} ({self.family or 'unclassified'})\n"
            f"  Coordinates: {lat:.1f}, {lon:.1f}\n"
            f"  Surface phonemes: {self.surface_count}\n"
            f"  Elementary segments: {self.elementary_count} ({', '.join(self.elementary_segments)})\n"
            f"  Reduction: -{self.reduction_percent}%\n"
            f"  Mappings: {len(self.surface_mappings)}"
        )
