"""
Command-line tests.

Every test points the CLI at a cache file under tmp_path so the user's
catalogue is never touched.

Run with: pytest tests/test_cli.py -v
"""

import json

import pytest
from typer.testing import CliRunner

from phonemic_analysis import __version__
from phonemic_analysis.cache import LanguageCache
from phonemic_analysis.cli import app
from phonemic_analysis.config import CACHE_KEY

runner = CliRunner()


@pytest.fixture
def cache_path(tmp_path):
    return tmp_path / "languages.json"


@pytest.fixture
def invoke(cache_path):
    def _invoke(*args):
        return runner.invoke(app, ["--cache", str(cache_path), *args])
    return _invoke


class TestBrowsing:
    """Read-only commands."""

    def test_version(self):
        """--version prints the version and exits cleanly."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_overview(self, invoke):
        """The overview lists the built-in languages."""
        result = invoke("overview")

        assert result.exit_code == 0
        for name in ("Rotokas", "Hawaiian", "English"):
            assert name in result.output

    def test_show(self, invoke):
        """show prints the summary and the mapping table."""
        result = invoke("show", "rotokas")

        assert result.exit_code == 0
        assert "North Bougainville" in result.output
        assert "/wk/" in result.output

    def test_unknown_language(self, invoke):
        """Unknown languages exit with status 1."""
        result = invoke("show", "Klingon")

        assert result.exit_code == 1
        assert "Unknown language" in result.output

    def test_inventory_bad_kind(self, invoke):
        """Unknown inventory kinds are reported as errors."""
        result = invoke("inventory", "tones")

        assert result.exit_code == 1

    def test_features_highlight(self, invoke):
        """Feature highlighting is restricted to one language's segments."""
        result = invoke("features", "--feature", "high", "--lang", "Rotokas")

        assert result.exit_code == 0
        assert "ə" in result.output

    def test_features_unknown(self, invoke):
        """Unknown features are rejected."""
        result = invoke("features", "--feature", "round")

        assert result.exit_code == 1


class TestAnalysis:
    """Validation and comparison commands."""

    def test_compare_pair(self, invoke):
        """Rotokas vs Hawaiian shows raw and functional similarity."""
        result = invoke("compare", "Rotokas", "Hawaiian")

        assert result.exit_code == 0
        assert "57.1%" in result.output
        assert "71.4%" in result.output

    def test_compare_all_pairs(self, invoke):
        """With no arguments every pair is compared."""
        result = invoke("compare")

        assert result.exit_code == 0
        assert "Rotokas vs Hawaiian" in result.output
        assert "Hawaiian vs English" in result.output

    def test_compare_needs_two(self, invoke):
        """A single language is an error."""
        result = invoke("compare", "Rotokas")

        assert result.exit_code == 1

    def test_validate_one(self, invoke):
        """Rotokas passes every check."""
        result = invoke("validate", "Rotokas")

        assert result.exit_code == 0
        assert "Passed" in result.output
        assert "Failed" not in result.output

    def test_validate_all(self, invoke):
        """English fails completeness, the others pass."""
        result = invoke("validate", "--all")

        assert result.exit_code == 0
        assert "2 of 3 languages passed all checks" in result.output


class TestEditing:
    """Commands that change the cached catalogue."""

    def test_add_then_show(self, invoke, cache_path):
        """Added languages persist in the cache between invocations."""
        result = invoke("add", "--name", "Pirahã", "--family", "Mura", "--elementary", "a i p")

        assert result.exit_code == 0
        assert "id 4" in result.output

        shown = invoke("show", "Pirahã")
        assert shown.exit_code == 0
        assert "Mura" in shown.output
        assert LanguageCache(cache_path).load()[-1].elementary_segments == ["a", "i", "p"]

    def test_template_import(self, invoke, tmp_path):
        """The written template imports as three new languages."""
        template = tmp_path / "template.csv"
        assert invoke("template", "--output", str(template)).exit_code == 0

        result = invoke("import", str(template))

        assert result.exit_code == 0
        assert "Imported 3 languages" in result.output

    def test_import_with_mapping(self, invoke, tmp_path):
        """--map connects custom headers to record fields."""
        path = tmp_path / "custom.csv"
        path.write_text("Lang,Segs\nPirahã,\"a i\"\n", encoding="utf-8")

        result = invoke("import", str(path), "--map", "name=Lang", "--map", "elementary_segments=Segs")

        assert result.exit_code == 0
        assert "Pirahã (id 4)" in result.output

    def test_import_bad_mapping(self, invoke, tmp_path):
        """Mappings to missing headers fail without importing anything."""
        path = tmp_path / "custom.csv"
        path.write_text("Lang\nPirahã\n", encoding="utf-8")

        result = invoke("import", str(path), "--map", "name=Language")

        assert result.exit_code == 1
        assert "missing headers" in result.output

    def test_map_and_remove(self, invoke, cache_path):
        """Mappings can be added and removed from the command line."""
        assert invoke("map", "Rotokas", "ʔ", "k", "--notes", "glottal").exit_code == 0
        rotokas = LanguageCache(cache_path).load()[0]
        assert rotokas.surface_mappings[-1].surface == "ʔ"

        assert invoke("map", "Rotokas", "ʔ", "--remove").exit_code == 0
        rotokas = LanguageCache(cache_path).load()[0]
        assert all(m.surface != "ʔ" for m in rotokas.surface_mappings)

    def test_delete_and_reset(self, invoke):
        """Deleted languages stay gone until the cache is reset."""
        assert invoke("delete", "Rotokas").exit_code == 0
        assert invoke("show", "Rotokas").exit_code == 1

        assert invoke("reset").exit_code == 0
        assert invoke("show", "Rotokas").exit_code == 0

    def test_export(self, invoke, tmp_path):
        """Export writes the catalogue in template format."""
        out = tmp_path / "export.csv"
        result = invoke("export", "--output", str(out))

        assert result.exit_code == 0
        assert out.read_text(encoding="utf-8").startswith("language_name,language_family")

    def test_deleted_id_stays_retired(self, invoke):
        """Deleting the newest language and adding another never reuses its id."""
        assert invoke("delete", "English").exit_code == 0

        result = invoke("add", "--name", "Klingon")

        assert result.exit_code == 0
        assert "id 4" in result.output

    def test_map_requires_elementary(self, invoke, cache_path):
        """A mapping without a decomposition is rejected unless removing."""
        result = invoke("map", "Rotokas", "ʔ")

        assert result.exit_code == 1
        assert not cache_path.exists()

    def test_duplicate_ids_in_cache(self, invoke, cache_path):
        """A cache the store cannot load falls back to the built-in languages."""
        entry = {"id": 1, "name": "Twin"}
        cache_path.write_text(json.dumps({CACHE_KEY: [entry, entry]}), encoding="utf-8")

        result = invoke("overview")

        assert result.exit_code == 0
        assert "Rotokas" in result.output
