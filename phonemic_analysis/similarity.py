"""
Cross-linguistic similarity of elementary segment inventories.

Two scores are computed for a pair of languages:
- jaccard: |A ∩ B| / |A ∪ B| as a percentage
- functional_jaccard: the same ratio after counting segments that are
  interchangeable under a functional equivalence relation (k ≈ ʔ by default)
  as shared

Both scores are 0.0 when neither language has any elementary segments.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Iterable, Mapping as MappingType, Optional

from phonemic_analysis.models import LanguageRecord


class FunctionalEquivalence:
    """Symmetric relation declaring segment symbols interchangeable.

    Built from pairs; every pair is stored in both directions so lookups
    never depend on which language is scanned first.
    """

    def __init__(self, pairs: Iterable[tuple[str, str]] = ()):
        self._relation: dict[str, set[str]] = {}
        for a, b in pairs:
            if a == b:
                continue
            self._relation.setdefault(a, set()).add(b)
            self._relation.setdefault(b, set()).add(a)

    @classmethod
    def from_mapping(cls, mapping: MappingType[str, Iterable[str]]) -> FunctionalEquivalence:
        """Build from symbol -> equivalents, closing the relation symmetrically."""
        return cls((a, b) for a, targets in mapping.items() for b in targets)

    def equivalents(self, symbol: str) -> frozenset[str]:
        return frozenset(self._relation.get(symbol, ()))

    def are_equivalent(self, a: str, b: str) -> bool:
        return b in self._relation.get(a, ())

    def pairs(self) -> list[tuple[str, str]]:
        """Each unordered pair once, sorted."""
        return sorted({tuple(sorted((a, b))) for a, bs in self._relation.items() for b in bs})

    def __len__(self) -> int:
        return len(self.pairs())

    def __repr__(self) -> str:
        inner = ", ".join(f"{a}≈{b}" for a, b in self.pairs())
        return f"FunctionalEquivalence({inner})"


DEFAULT_EQUIVALENCE = FunctionalEquivalence([("k", "ʔ")])


@dataclass(frozen=True)
class SimilarityReport:
    """Overlap between two elementary inventories.

    Attributes:
        jaccard: Raw set similarity (0-100, one decimal)
        functional_jaccard: Similarity counting equivalent segments as shared
        shared: Segments in both inventories, sorted
        unique1: Segments only in the first language, sorted
        unique2: Segments only in the second language, sorted
        functional_matches: (first, second) segment pairs matched by equivalence
        size_difference: Absolute difference of the inventory sizes
    """
    jaccard: float
    functional_jaccard: float
    shared: list[str] = field(default_factory=list)
    unique1: list[str] = field(default_factory=list)
    unique2: list[str] = field(default_factory=list)
    functional_matches: list[tuple[str, str]] = field(default_factory=list)
    size_difference: int = 0

    @property
    def functional_intersection(self) -> list[str]:
        """Shared segments plus first-language segments matched by equivalence."""
        return sorted(set(self.shared) | {a for a, _ in self.functional_matches})

    def to_dict(self) -> dict:
        return {
            "jaccard": self.jaccard,
            "functional_jaccard": self.functional_jaccard,
            "shared": list(self.shared),
            "unique1": list(self.unique1),
            "unique2": list(self.unique2),
            "functional_matches": [list(p) for p in self.functional_matches],
            "size_difference": self.size_difference,
        }


def _percentage(part: int, whole: int) -> float:
    if whole == 0:
        return 0.0
    return round(part / whole * 100, 1)


def _match_equivalents(
    left: list[str],
    right: list[str],
    equivalence: FunctionalEquivalence,
) -> list[tuple[str, str]]:
    """Maximum one-to-one matching between left and right under equivalence.

    Augmenting-path search over sorted inputs, so the result is
    deterministic and its size does not depend on argument order.
    """
    owner: dict[str, str] = {}  # right symbol -> matched left symbol

    def augment(symbol: str, visited: set[str]) -> bool:
        for candidate in right:
            if candidate in visited or not equivalence.are_equivalent(symbol, candidate):
                continue
            visited.add(candidate)
            if candidate not in owner or augment(owner[candidate], visited):
                owner[candidate] = symbol
                return True
        return False

    for symbol in left:
        augment(symbol, set())
    return sorted((a, b) for b, a in owner.items())


def compare_segments(
    segments1: Optional[Iterable[str]],
    segments2: Optional[Iterable[str]],
    equivalence: FunctionalEquivalence = DEFAULT_EQUIVALENCE,
) -> SimilarityReport:
    """Compare two elementary inventories given as symbol collections."""
    set1 = set(segments1 or [])
    set2 = set(segments2 or [])
    intersection = set1 & set2
    union = set1 | set2
    unique1 = sorted(set1 - set2)
    unique2 = sorted(set2 - set1)

    matches = _match_equivalents(unique1, unique2, equivalence)
    functional_size = len(intersection) + len(matches)

    return SimilarityReport(
        jaccard=_percentage(len(intersection), len(union)),
        functional_jaccard=_percentage(functional_size, len(union)),
        shared=sorted(intersection),
        unique1=unique1,
        unique2=unique2,
        functional_matches=matches,
        size_difference=abs(len(set1) - len(set2)),
    )


def compare_languages(
    first: LanguageRecord,
    second: LanguageRecord,
    equivalence: FunctionalEquivalence = DEFAULT_EQUIVALENCE,
) -> SimilarityReport:
    """Compare the elementary inventories of two languages."""
    return compare_segments(first.elementary_segments, second.elementary_segments, equivalence)


def compare_all_pairs(
    languages: Iterable[LanguageRecord],
    equivalence: FunctionalEquivalence = DEFAULT_EQUIVALENCE,
) -> dict[tuple[int, int], SimilarityReport]:
    """Compare every unordered pair of languages, keyed by (id1, id2)."""
    return {
        (a.id, b.id): compare_languages(a, b, equivalence)
        for a, b in itertools.combinations(list(languages), 2)
    }
