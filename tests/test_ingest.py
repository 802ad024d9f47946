"""
Tests for CSV import, the template and record export.

Run with: pytest tests/test_ingest.py -v
"""

import logging

import pytest

from phonemic_analysis.ingest import (
    TEMPLATE_CSV,
    TEMPLATE_HEADER,
    export_records_csv,
    guess_column_mapping,
    import_csv,
    import_table,
    parse_csv_text,
    write_records,
    write_template,
)
from phonemic_analysis.seed import rotokas, seed_languages
from phonemic_analysis.store import LanguageStore


@pytest.fixture
def store():
    return LanguageStore(seed_languages())


@pytest.fixture
def empty_store():
    return LanguageStore()


class TestParsing:
    """Tests for CSV text parsing."""

    def test_headers_and_rows(self):
        """Quoted multi-value cells stay in one column."""
        table = parse_csv_text('name,segs\nFoo,"a b c"\n')

        assert table.headers == ["name", "segs"]
        assert table.rows == [{"name": "Foo", "segs": "a b c"}]

    def test_blank_lines_skipped(self):
        """Empty lines anywhere in the file are ignored."""
        table = parse_csv_text("\nname\n\nFoo\n   \nBar\n")

        assert [r["name"] for r in table.rows] == ["Foo", "Bar"]

    def test_quoted_cell_keeps_blank_line(self):
        """A blank line inside a quoted cell belongs to that cell."""
        table = parse_csv_text('language_name,surface_phonemes\nFoo,"p t\n\nk"\nBar,a\n')

        assert [r["language_name"] for r in table.rows] == ["Foo", "Bar"]
        assert table.rows[0]["surface_phonemes"] == "p t\n\nk"

    def test_short_rows_padded(self):
        """Missing trailing cells read as empty strings."""
        table = parse_csv_text("a,b,c\n1\n")

        assert table.rows[0] == {"a": "1", "b": "", "c": ""}

    def test_empty_text(self):
        """An empty file has no headers and no rows."""
        table = parse_csv_text("")

        assert table.headers == []
        assert len(table) == 0

    def test_template_parses(self):
        """The built-in template has three rows under the template header."""
        table = parse_csv_text(TEMPLATE_CSV)

        assert ",".join(table.headers) == TEMPLATE_HEADER
        assert [r["language_name"] for r in table.rows] == ["Rotokas", "Hawaiian", "English"]

    def test_guess_mapping(self):
        """Only template headers actually present are mapped."""
        mapping = guess_column_mapping(["language_name", "latitude", "other"])

        assert mapping == {"name": "language_name", "latitude": "latitude"}


class TestImport:
    """Tests for adding parsed rows to the store."""

    def test_template_import(self, store):
        """Importing the template appends three languages with new ids."""
        created = import_table(store, parse_csv_text(TEMPLATE_CSV))

        assert [r.id for r in created] == [4, 5, 6]
        assert created[0].name == "Rotokas"
        assert created[0].coordinates == (-6.2, 155.2)
        assert created[0].elementary_segments == ["a", "ə", "w", "j", "k"]
        assert created[1].elementary_segments == ["a", "ə", "w", "j", "ʔ", "h"]
        assert created[2].suprasegmentals == ["length"]
        assert len(store) == 6

    def test_custom_mapping(self, empty_store):
        """Arbitrary headers load through a column mapping."""
        text = "Lang,Lat,Lon,Phones,Segments\nPirahã,-7.0,-62.0,\"p t k\",\"a i\"\n"
        mapping = {
            "name": "Lang",
            "latitude": "Lat",
            "longitude": "Lon",
            "surface_phonemes": "Phones",
            "elementary_segments": "Segments",
        }
        [record] = import_table(empty_store, parse_csv_text(text), mapping)

        assert record.id == 1
        assert record.coordinates == (-7.0, -62.0)
        assert record.surface_phonemes == ["p", "t", "k"]
        assert record.elementary_segments == ["a", "i"]
        assert record.family == ""

    def test_rows_without_name_skipped(self, empty_store, caplog):
        """Rows with an empty name are skipped with a warning."""
        caplog.set_level(logging.WARNING)
        text = "language_name,surface_phonemes\n,p t\nFoo,p\n"
        created = import_table(empty_store, parse_csv_text(text))

        assert [r.name for r in created] == ["Foo"]
        assert "no language name" in caplog.text

    def test_bad_coordinates_fall_back(self, empty_store, caplog):
        """Unparseable coordinates become 0.0."""
        caplog.set_level(logging.WARNING)
        text = "language_name,latitude,longitude\nFoo,north,12.5\n"
        [record] = import_table(empty_store, parse_csv_text(text))

        assert record.coordinates == (0.0, 12.5)
        assert "invalid latitude" in caplog.text

    def test_count_mismatch_warns(self, empty_store, caplog):
        """Declared counts that disagree with the lists are only warned about."""
        caplog.set_level(logging.WARNING)
        created = import_table(empty_store, parse_csv_text(TEMPLATE_CSV))

        assert created[0].surface_count == 19
        assert "Rotokas: surface_count says 20 but 19 symbols were listed" in caplog.text

    def test_unknown_field_rejected(self, empty_store):
        """Mappings to fields that do not exist are errors."""
        table = parse_csv_text("Lang\nFoo\n")

        with pytest.raises(ValueError, match="Unknown record fields"):
            import_table(empty_store, table, {"name": "Lang", "colour": "Lang"})

    def test_missing_header_rejected(self, empty_store):
        """Mappings to headers absent from the file are errors."""
        table = parse_csv_text("Lang\nFoo\n")

        with pytest.raises(ValueError, match="missing headers"):
            import_table(empty_store, table, {"name": "Language"})

    def test_name_column_required(self, empty_store):
        """Without a name column nothing can be imported."""
        table = parse_csv_text("surface_phonemes\np t\n")

        with pytest.raises(ValueError, match="language name"):
            import_table(empty_store, table)

        assert len(empty_store) == 0

    def test_import_csv_file(self, empty_store, tmp_path):
        """Files are read as UTF-8, with or without a BOM."""
        path = tmp_path / "langs.csv"
        path.write_text("﻿language_name,elementary_segments\nFoo,\"ʔ h\"\n", encoding="utf-8")
        [record] = import_csv(empty_store, path)

        assert record.name == "Foo"
        assert record.elementary_segments == ["ʔ", "h"]

    def test_multi_line_cell_import(self, empty_store):
        """Inventories spread over several lines of one quoted cell are split."""
        text = "language_name,surface_phonemes\nFoo,\"p t\n\nk\"\n"
        [record] = import_table(empty_store, parse_csv_text(text))

        assert record.surface_phonemes == ["p", "t", "k"]

    def test_missing_file(self, empty_store, tmp_path):
        """A missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            import_csv(empty_store, tmp_path / "nope.csv")


class TestTemplateAndExport:
    """Tests for writing CSV files."""

    def test_write_template(self, tmp_path):
        """The template file holds the exact template text."""
        path = write_template(tmp_path / "template.csv")

        assert path.read_text(encoding="utf-8") == TEMPLATE_CSV

    def test_export_row(self):
        """Exported rows quote text cells and recount the symbols."""
        header, row = export_records_csv([rotokas()]).splitlines()

        assert header == TEMPLATE_HEADER
        assert row == (
            '"Rotokas","North Bougainville","roo",-6.2,155.2,'
            '"p t k b d g m n ŋ a e i o u aː eː iː oː uː","a ə w j k","length",19,5'
        )

    def test_export_quotes_commas(self, empty_store):
        """Names containing commas and quotes stay in one cell."""
        record = empty_store.add(name='Foo, "Bar"', family="Isolate")
        row = export_records_csv([record]).splitlines()[1]

        assert row == '"Foo, ""Bar""","Isolate","",0.0,0.0,"","","",0,0'
        assert parse_csv_text(export_records_csv([record])).rows[0]["language_name"] == 'Foo, "Bar"'

    def test_export_reimports(self, empty_store, tmp_path):
        """An exported file imports back to the same inventories."""
        path = write_records(seed_languages(), tmp_path / "export.csv")
        created = import_csv(empty_store, path)

        for original, copy in zip(seed_languages(), created):
            assert copy.name == original.name
            assert copy.surface_phonemes == original.surface_phonemes
            assert copy.elementary_segments == original.elementary_segments
            assert copy.coordinates == original.coordinates
