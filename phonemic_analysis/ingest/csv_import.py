"""
CSV import of language inventories.

The importer is header driven: a column mapping says which CSV header feeds
which record field, so spreadsheets with their own column names can be
loaded after a mapping step. Files following the downloadable template need
no mapping at all.

Expected format (template):
    language_name,language_family,iso_code,latitude,longitude,
    surface_phonemes,elementary_segments,suprasegmentals,
    surface_count,elementary_count

Multi-value cells ("p t k", quoted) are split on whitespace and commas.
"""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from phonemic_analysis.models import LanguageRecord, split_multi_value
from phonemic_analysis.store import LanguageStore

logger = logging.getLogger(__name__)

# record field -> template header
DEFAULT_COLUMN_MAPPING = {
    "name": "language_name",
    "family": "language_family",
    "iso_code": "iso_code",
    "latitude": "latitude",
    "longitude": "longitude",
    "surface_phonemes": "surface_phonemes",
    "elementary_segments": "elementary_segments",
    "suprasegmentals": "suprasegmentals",
    "surface_count": "surface_count",
    "elementary_count": "elementary_count",
}

IMPORT_FIELDS = tuple(DEFAULT_COLUMN_MAPPING)


@dataclass
class CsvTable:
    """Parsed CSV: header names and one dict per data row."""
    headers: list[str] = field(default_factory=list)
    rows: list[dict[str, str]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)


def parse_csv_text(text: str) -> CsvTable:
    """Parse CSV text; blank rows are skipped and cells are stripped.

    Quoted cells may span lines, blank lines inside them included.
    """
    reader = csv.reader(io.StringIO(text, newline=""))
    records = [values for values in reader if any(v.strip() for v in values)]
    if not records:
        return CsvTable()

    headers = [h.strip() for h in records[0]]
    rows = []
    for values in records[1:]:
        row = {}
        for idx, header in enumerate(headers):
            row[header] = values[idx].strip() if idx < len(values) else ""
        rows.append(row)
    return CsvTable(headers=headers, rows=rows)


def read_csv(path: str | Path) -> CsvTable:
    """Read and parse a CSV file (UTF-8, optional BOM)."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"CSV file not found: {path}")
    return parse_csv_text(path.read_text(encoding="utf-8-sig"))


def guess_column_mapping(headers: list[str]) -> dict[str, str]:
    """Template mapping restricted to the headers actually present."""
    present = set(headers)
    return {f: h for f, h in DEFAULT_COLUMN_MAPPING.items() if h in present}


def _check_mapping(mapping: dict[str, str], headers: list[str]) -> None:
    unknown_fields = [f for f in mapping if f not in IMPORT_FIELDS]
    if unknown_fields:
        raise ValueError(f"Unknown record fields in column mapping: {', '.join(unknown_fields)}")
    missing = [h for h in mapping.values() if h not in headers]
    if missing:
        raise ValueError(f"Column mapping refers to missing headers: {', '.join(missing)}")
    if "name" not in mapping:
        raise ValueError("Column mapping must include the language name")


def _to_float(value: str, label: str, row_number: int) -> float:
    if not value:
        return 0.0
    try:
        return float(value)
    except ValueError:
        logger.warning("Row %d: invalid %s %r, using 0.0", row_number, label, value)
        return 0.0


def _check_count(declared: str, actual: int, label: str, name: str) -> None:
    if not declared:
        return
    try:
        expected = int(declared)
    except ValueError:
        logger.warning("%s: %s is not a number (%r)", name, label, declared)
        return
    if expected != actual:
        logger.warning("%s: %s says %d but %d symbols were listed", name, label, expected, actual)


def import_table(
    store: LanguageStore,
    table: CsvTable,
    mapping: Optional[dict[str, str]] = None,
) -> list[LanguageRecord]:
    """Add every usable row of a parsed CSV to the store.

    Args:
        store: Store that assigns ids and receives the new languages
        table: Parsed CSV
        mapping: record field -> CSV header (defaults to the template headers)

    Returns:
        The newly created records, in file order
    """
    mapping = dict(mapping) if mapping is not None else guess_column_mapping(table.headers)
    _check_mapping(mapping, table.headers)

    def cell(row: dict[str, str], name: str) -> str:
        header = mapping.get(name)
        return row.get(header, "") if header else ""

    created = []
    # row numbers count the header as line 1
    for row_number, row in enumerate(table.rows, start=2):
        name = cell(row, "name")
        if not name:
            logger.warning("Row %d: no language name, skipped", row_number)
            continue
        surface = split_multi_value(cell(row, "surface_phonemes"))
        elementary = split_multi_value(cell(row, "elementary_segments"))
        _check_count(cell(row, "surface_count"), len(surface), "surface_count", name)
        _check_count(cell(row, "elementary_count"), len(elementary), "elementary_count", name)

        record = store.add(
            name=name,
            family=cell(row, "family"),
            iso_code=cell(row, "iso_code"),
            coordinates=(
                _to_float(cell(row, "latitude"), "latitude", row_number),
                _to_float(cell(row, "longitude"), "longitude", row_number),
            ),
            surface_phonemes=surface,
            elementary_segments=elementary,
            suprasegmentals=cell(row, "suprasegmentals"),
        )
        created.append(record)

    logger.info("Imported %d of %d rows", len(created), len(table.rows))
    return created


def import_csv(
    store: LanguageStore,
    path: str | Path,
    mapping: Optional[dict[str, str]] = None,
) -> list[LanguageRecord]:
    """Read a CSV file and add its languages to the store."""
    return import_table(store, read_csv(path), mapping)
