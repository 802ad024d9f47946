"""
Distinctive-feature table for elementary segments.

Every elementary segment symbol has a row of feature states:
    '+'  present
    '-'  absent
    '±'  underspecified (either value)
    '0'  not applicable

The table is shared by all languages: a row is looked up by symbol alone.
It is an immutable, versioned snapshot. Editing a value returns a new
snapshot with the version bumped, so anything holding the old table keeps
a consistent view.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping

PLUS = "+"
MINUS = "-"
EITHER = "±"
NOT_APPLICABLE = "0"

FEATURE_STATES = (PLUS, MINUS, EITHER, NOT_APPLICABLE)

# All binary features shown in the segment/feature grid
BINARY_FEATURES = ("high", "low", "front", "voice", "occlusive", "nasal", "consonantal")


class Polarity(Enum):
    """Which value a feature highlight selects."""
    PLUS = PLUS
    MINUS = MINUS


def _freeze(rows: Mapping[str, Mapping[str, str]]) -> Mapping[str, Mapping[str, str]]:
    frozen = {}
    for segment, row in rows.items():
        for feature, state in row.items():
            if state not in FEATURE_STATES:
                raise ValueError(
                    f"Invalid state {state!r} for {segment}[{feature}]; "
                    f"expected one of {', '.join(FEATURE_STATES)}"
                )
        frozen[segment] = MappingProxyType(dict(row))
    return MappingProxyType(frozen)


@dataclass(frozen=True)
class SegmentFeatureTable:
    """Read-only snapshot of segment -> feature -> state.

    Attributes:
        rows: Feature rows keyed by elementary segment symbol
        version: Incremented by every edit made through with_value()
    """
    rows: Mapping[str, Mapping[str, str]] = field(default_factory=dict)
    version: int = 1

    def __post_init__(self):
        object.__setattr__(self, "rows", _freeze(self.rows))

    def __contains__(self, segment: str) -> bool:
        return segment in self.rows

    def __len__(self) -> int:
        return len(self.rows)

    def value(self, segment: str, feature: str) -> str:
        """State of one feature; unlisted segments and features read as '0'."""
        return self.rows.get(segment, {}).get(feature, NOT_APPLICABLE)

    def row(self, segment: str, features: Iterable[str] = BINARY_FEATURES) -> dict[str, str]:
        """Full feature row for a segment across the given features."""
        return {f: self.value(segment, f) for f in features}

    def highlight(
        self,
        segments: Iterable[str],
        feature: str,
        polarity: Polarity = Polarity.PLUS,
    ) -> list[str]:
        """Segments (in input order) whose value for feature matches polarity.

        '±' and '0' never match, whichever polarity is selected.
        """
        return [s for s in segments if self.value(s, feature) == polarity.value]

    def with_value(self, segment: str, feature: str, state: str) -> SegmentFeatureTable:
        """Return a new snapshot with one value changed."""
        rows = {s: dict(r) for s, r in self.rows.items()}
        rows.setdefault(segment, {})[feature] = state
        return SegmentFeatureTable(rows=rows, version=self.version + 1)

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "rows": {s: dict(r) for s, r in self.rows.items()},
        }

    @classmethod
    def from_dict(cls, d: dict) -> SegmentFeatureTable:
        return cls(rows=d.get("rows", {}), version=d.get("version", 1))
