"""
Validation of a language's surface-to-elementary decomposition.

Three independent checks are run against one LanguageRecord:
- completeness: every surface phoneme has at least one mapping
- minimality: every elementary segment is used by some mapping
- complexity: no mapping spells a phoneme with more than six symbols

Design Philosophy:
- Pure functions: the record is never modified, nothing is cached
- Advisory results: failures are reported via passed=False, never raised
- Forgiving input: missing collections are treated as empty
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Optional

from phonemic_analysis.config import COMPLEX_MAX_LENGTH, OPTIMIZED_MAX_LENGTH
from phonemic_analysis.models import LanguageRecord, Mapping, unique_in_order

COMPLETENESS = "completeness"
MINIMALITY = "minimality"
COMPLEXITY = "complexity"

RULES = (COMPLETENESS, MINIMALITY, COMPLEXITY)


@dataclass(frozen=True)
class CheckResult:
    """Outcome of one validation rule.

    Attributes:
        passed: Whether the rule holds for the record
        message: Human-readable summary
        details: Rule-specific payload (unmapped phonemes, unused segments,
            or complexity bucket counts)
    """
    passed: bool
    message: str
    details: Any

    def to_dict(self) -> dict:
        return {"passed": self.passed, "message": self.message, "details": self.details}


@dataclass(frozen=True)
class ValidationReport:
    """The three checks for one language, iterated in rule order."""
    completeness: CheckResult
    minimality: CheckResult
    complexity: CheckResult

    @property
    def passed(self) -> bool:
        return all(result.passed for _, result in self.items())

    def items(self) -> Iterator[tuple[str, CheckResult]]:
        for rule in RULES:
            yield rule, getattr(self, rule)

    def __getitem__(self, rule: str) -> CheckResult:
        if rule not in RULES:
            raise KeyError(rule)
        return getattr(self, rule)

    def to_dict(self) -> dict:
        return {rule: result.to_dict() for rule, result in self.items()}

    def summary(self) -> str:
        lines = ["Validation Results:"]
        for rule, result in self.items():
            mark = "✓" if result.passed else "✗"
            lines.append(f"  {mark} {rule}: {result.message}")
        return "\n".join(lines)


def check_completeness(
    surface_phonemes: Optional[Iterable[str]],
    mappings: Optional[Iterable[Mapping]],
) -> CheckResult:
    """Find surface phonemes that no mapping covers.

    Order is preserved and repeated phonemes are reported each time they
    appear in the inventory.
    """
    mapped = {m.surface for m in mappings or []}
    unmapped = [p for p in surface_phonemes or [] if p not in mapped]

    if not unmapped:
        message = "All surface phonemes have elementary mappings"
    else:
        message = f"Unmapped phonemes: {', '.join(unmapped)}"
    return CheckResult(passed=not unmapped, message=message, details=unmapped)


def check_minimality(
    elementary_segments: Optional[Iterable[str]],
    mappings: Optional[Iterable[Mapping]],
) -> CheckResult:
    """Find elementary segments that no mapping uses.

    A segment counts as used when it occurs anywhere inside a mapping's
    elementary string (plain substring test, case-sensitive). A symbol that
    is itself part of a longer symbol is therefore always seen as used.
    """
    segments = unique_in_order(elementary_segments or [])
    mappings = list(mappings or [])
    used = {seg for seg in segments if any(seg in m.elementary for m in mappings)}
    unused = [seg for seg in segments if seg not in used]

    if not unused:
        message = "All elementary segments are utilized"
    else:
        message = f"Potentially unused segments: {', '.join(unused)}"
    return CheckResult(passed=not unused, message=message, details=unused)


def classify_mapping(mapping: Mapping) -> str:
    """Bucket a mapping by the length of its elementary string."""
    length = len(mapping.elementary)
    if length <= OPTIMIZED_MAX_LENGTH:
        return "optimized"
    if length <= COMPLEX_MAX_LENGTH:
        return "complex"
    return "invalid"


def check_complexity(mappings: Optional[Iterable[Mapping]]) -> CheckResult:
    """Count optimized (<= 3), complex (4-6) and invalid (> 6) mappings."""
    buckets: dict[str, list[Mapping]] = {"optimized": [], "complex": [], "invalid": []}
    for mapping in mappings or []:
        buckets[classify_mapping(mapping)].append(mapping)

    counts = {name: len(items) for name, items in buckets.items()}
    invalid = buckets["invalid"]
    if not invalid:
        message = f"{counts['optimized']} optimized, {counts['complex']} complex, {counts['invalid']} invalid"
    else:
        message = (
            f"Invalid mappings (>{COMPLEX_MAX_LENGTH} segments): "
            + ", ".join(str(m) for m in invalid)
        )
    return CheckResult(passed=not invalid, message=message, details=counts)


def validate_language(language: LanguageRecord) -> ValidationReport:
    """Run all three checks against one language."""
    return ValidationReport(
        completeness=check_completeness(language.surface_phonemes, language.surface_mappings),
        minimality=check_minimality(language.elementary_segments, language.surface_mappings),
        complexity=check_complexity(language.surface_mappings),
    )


def validate_all(languages: Iterable[LanguageRecord]) -> dict[int, ValidationReport]:
    """Validate every language, keyed by language id."""
    return {language.id: validate_language(language) for language in languages}
