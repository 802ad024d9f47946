"""
CSV template and record export.

TEMPLATE_CSV reproduces the downloadable example file exactly, including
its hand-written counts. export_records_csv() writes the same schema from
live records through csv.writer: text cells are quoted, numbers are not.
"""

from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import IO, Iterable

from phonemic_analysis.config import TEMPLATE_FILENAME
from phonemic_analysis.models import LanguageRecord

TEMPLATE_HEADER = (
    "language_name,language_family,iso_code,latitude,longitude,"
    "surface_phonemes,elementary_segments,suprasegmentals,surface_count,elementary_count"
)

TEMPLATE_CSV = "\n".join([
    TEMPLATE_HEADER,
    'Rotokas,North Bougainville,roo,-6.2,155.2,"p t k b d g m n ŋ a e i o u aː eː iː oː uː","a ə w j k",length,20,5',
    'Hawaiian,Austronesian,haw,21.3,-157.8,"m n l p t ʔ h w i iː u uː e eː a aː o oː iu ou oi eu ei au ai ao ae oːu eːi aːu aːi aːo aːe","a ə w j ʔ h",length,26,6',
    'English,Indo-European,en,52.0,-1.0,"æ æː ɑː ɒ ɒː ɔː ɪ ɛ ʌ ʊ eɪ əʊ iː uː aɪ ɔɪ aʊ ɜː ɪə ɛː ʊə ə ər i m n ŋ p t tʃ k ʔ b d dʒ g f θ s ʃ h v ð z ʒ l r j w","i e æ u o ɑ t θ ʔ w j l r n",length,42,14',
])


def record_to_row(record: LanguageRecord) -> list:
    """Template row for one record; counts are recomputed from the lists."""
    lat, lon = record.coordinates
    return [
        record.name,
        record.family,
        record.iso_code,
        float(lat),
        float(lon),
        " ".join(record.surface_phonemes),
        " ".join(record.elementary_segments),
        " ".join(record.suprasegmentals),
        record.surface_count,
        record.elementary_count,
    ]


def _write_rows(f: IO[str], records: Iterable[LanguageRecord]) -> None:
    f.write(TEMPLATE_HEADER + "\n")
    # text cells quoted, coordinates and counts left bare
    writer = csv.writer(f, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    for record in records:
        writer.writerow(record_to_row(record))


def export_records_csv(records: Iterable[LanguageRecord]) -> str:
    """CSV in template format; inventory cells are space separated and quoted."""
    buffer = io.StringIO()
    _write_rows(buffer, records)
    return buffer.getvalue()


def write_template(path: str | Path = TEMPLATE_FILENAME) -> Path:
    """Write the example template and return its path."""
    path = Path(path)
    path.write_text(TEMPLATE_CSV, encoding="utf-8")
    return path


def write_records(records: Iterable[LanguageRecord], path: str | Path) -> Path:
    path = Path(path)
    with path.open("w", newline="", encoding="utf-8") as f:
        _write_rows(f, records)
    return path
