"""
Ingestion module for language inventories.

This module provides:
- Header-driven CSV import with a column mapping step
- The downloadable CSV template
- Export of live records in the template format
"""

from phonemic_analysis.ingest.csv_import import (
    DEFAULT_COLUMN_MAPPING,
    CsvTable,
    guess_column_mapping,
    import_csv,
    import_table,
    parse_csv_text,
    read_csv,
)
from phonemic_analysis.ingest.template import (
    TEMPLATE_CSV,
    TEMPLATE_HEADER,
    export_records_csv,
    write_records,
    write_template,
)

__all__ = [
    "DEFAULT_COLUMN_MAPPING",
    "CsvTable",
    "guess_column_mapping",
    "import_csv",
    "import_table",
    "parse_csv_text",
    "read_csv",
    "TEMPLATE_CSV",
    "TEMPLATE_HEADER",
    "export_records_csv",
    "write_records",
    "write_template",
]
