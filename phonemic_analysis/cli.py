"""
Command-line interface for Phonemic Analysis.

Provides commands for:
- Browsing the language catalogue and its overview statistics
- Validating surface-to-elementary mapping tables
- Comparing elementary inventories across languages
- Inspecting segment features
- Importing/exporting CSV and editing the catalogue

Usage:
    phonemic overview
    phonemic show Rotokas
    phonemic validate --all
    phonemic compare Rotokas Hawaiian
    phonemic features --feature high --lang English
    phonemic import languages.csv --map name=Language
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from phonemic_analysis import __version__
from phonemic_analysis.cache import LanguageCache, load_store
from phonemic_analysis.config import APP_NAME, CACHE_FILE, TEMPLATE_FILENAME
from phonemic_analysis.features import BINARY_FEATURES, Polarity
from phonemic_analysis.ingest import import_csv, write_records, write_template
from phonemic_analysis.models import LanguageRecord
from phonemic_analysis.seed import default_feature_table
from phonemic_analysis.similarity import compare_all_pairs, compare_languages
from phonemic_analysis.store import LanguageStore
from phonemic_analysis.validation import ValidationReport, validate_all, validate_language

app = typer.Typer(
    name="phonemic",
    help="Phonemic Analysis: decomposition, validation and comparison of phonemic inventories",
    add_completion=False,
)
console = Console()
logger = logging.getLogger("phonemic-cli")


def version_callback(value: bool):
    if value:
        console.print(f"{APP_NAME} v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v",
        help="Show debug logging",
    ),
    cache: Path = typer.Option(
        CACHE_FILE, "--cache",
        help="Language cache file",
    ),
):
    """Phonemic Analysis: elementary segment decomposition of phonemic inventories."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    ctx.obj = LanguageCache(cache)


def _store(ctx: typer.Context) -> LanguageStore:
    return load_store(ctx.obj)


def _resolve(store: LanguageStore, key: str) -> LanguageRecord:
    record = store.find(key)
    if record is None:
        console.print(f"[red]Error:[/] Unknown language: {key}")
        raise typer.Exit(1)
    return record


def _parse_mapping(pairs: List[str]) -> dict[str, str]:
    mapping = {}
    for pair in pairs:
        field_name, sep, header = pair.partition("=")
        if not sep or not field_name.strip() or not header.strip():
            console.print(f"[red]Error:[/] Column mapping must look like field=header, got {pair!r}")
            raise typer.Exit(1)
        mapping[field_name.strip()] = header.strip()
    return mapping


def _print_validation(record: LanguageRecord, report: ValidationReport) -> None:
    table = Table(title=f"Validation: {record.name}")
    table.add_column("Rule", style="cyan")
    table.add_column("Status")
    table.add_column("Message")
    for rule, result in report.items():
        status = "[green]✓ Passed[/]" if result.passed else "[red]✗ Failed[/]"
        table.add_row(rule.title(), status, result.message)
    console.print(table)


@app.command()
def overview(ctx: typer.Context):
    """Show catalogue statistics and the language inventory."""
    store = _store(ctx)
    stats = store.overview()

    console.print(f"[bold]{APP_NAME}[/]\n")
    console.print(f"  Languages analyzed:          [cyan]{stats.language_count}[/]")
    console.print(f"  Unique surface phonemes:     [green]{len(stats.surface_phonemes)}[/]")
    console.print(f"  Unique elementary segments:  [magenta]{len(stats.elementary_segments)}[/]")
    console.print(f"  Unique suprasegmentals:      [yellow]{len(stats.unique_suprasegmentals)}[/]\n")

    table = Table(title="Language Inventory")
    table.add_column("ID", style="dim")
    table.add_column("Language", style="cyan")
    table.add_column("Family")
    table.add_column("Surface", justify="right")
    table.add_column("Elementary", justify="right")
    table.add_column("Reduction", style="green", justify="right")
    for record in store:
        table.add_row(
            str(record.id),
            record.name,
            record.family,
            str(record.surface_count),
            str(record.elementary_count),
            f"-{record.reduction_percent}%",
        )
    console.print(table)


@app.command()
def inventory(
    ctx: typer.Context,
    kind: str = typer.Argument(
        "surface",
        help="surface, elementary or suprasegmentals",
    ),
    search: str = typer.Option("", "--search", "-s", help="Substring filter"),
    category: str = typer.Option(
        "all", "--category", "-c",
        help="all, vowels or consonants (surface phonemes only)",
    ),
):
    """List unique symbols across all languages with usage counts."""
    stats = _store(ctx).overview()
    try:
        items = stats.items(kind, search=search, category=category)
    except ValueError as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(1)

    table = Table(title=f"Unique {kind} ({len(items)} shown)")
    table.add_column("Symbol", style="cyan")
    table.add_column("Languages", justify="right")
    for symbol, count in items:
        table.add_row(symbol, str(count))
    console.print(table)


@app.command()
def show(
    ctx: typer.Context,
    language: str = typer.Argument(..., help="Language name or id"),
):
    """Show a language with its mapping table."""
    record = _resolve(_store(ctx), language)
    console.print(record.summary())
    if record.dialect_notes:
        console.print(f"  Dialect notes: {record.dialect_notes}")
    console.print(f"  Suprasegmentals: {', '.join(record.suprasegmentals) or 'None'}\n")

    table = Table(title=f"Surface → Elementary Mappings ({len(record.surface_mappings)})")
    table.add_column("Surface", style="cyan")
    table.add_column("Elementary", style="magenta")
    table.add_column("Notes", style="dim")
    for mapping in record.surface_mappings:
        table.add_row(f"/{mapping.surface}/", f"/{mapping.elementary}/", mapping.notes)
    console.print(table)


@app.command()
def validate(
    ctx: typer.Context,
    language: Optional[str] = typer.Argument(None, help="Language name or id"),
    all_languages: bool = typer.Option(False, "--all", "-a", help="Validate every language"),
):
    """Run completeness, minimality and complexity checks."""
    store = _store(ctx)
    if all_languages or language is None:
        reports = validate_all(store)
        for record in store:
            _print_validation(record, reports[record.id])
        failed = sum(1 for r in reports.values() if not r.passed)
        console.print(f"\n{len(reports) - failed} of {len(reports)} languages passed all checks")
        return

    record = _resolve(store, language)
    _print_validation(record, validate_language(record))


@app.command()
def compare(
    ctx: typer.Context,
    first: Optional[str] = typer.Argument(None, help="First language"),
    second: Optional[str] = typer.Argument(None, help="Second language"),
):
    """Compare elementary segment inventories (all pairs when no languages given)."""
    store = _store(ctx)
    if first is not None and second is not None:
        pairs = [(_resolve(store, first), _resolve(store, second))]
        reports = [compare_languages(*pairs[0])]
    elif first is None and second is None:
        results = compare_all_pairs(store)
        pairs = [(store.get(a), store.get(b)) for a, b in results]
        reports = list(results.values())
    else:
        console.print("[red]Error:[/] Give two languages, or none to compare every pair")
        raise typer.Exit(1)

    for (lang1, lang2), report in zip(pairs, reports):
        table = Table(title=f"{lang1.name} vs {lang2.name}")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="green")
        table.add_row("Segment Similarity", f"{report.jaccard}%")
        table.add_row("Functional Similarity", f"{report.functional_jaccard}%")
        table.add_row("Shared Segments", ", ".join(report.shared) or "None")
        table.add_row(f"Only in {lang1.name}", ", ".join(report.unique1) or "None")
        table.add_row(f"Only in {lang2.name}", ", ".join(report.unique2) or "None")
        table.add_row(
            "Functional Matches",
            ", ".join(f"{a}≈{b}" for a, b in report.functional_matches) or "None",
        )
        table.add_row("Size Difference", str(report.size_difference))
        console.print(table)


@app.command()
def features(
    ctx: typer.Context,
    segment: Optional[str] = typer.Argument(None, help="Show the feature row of one segment"),
    feature: Optional[str] = typer.Option(None, "--feature", "-f", help="Highlight segments by feature"),
    minus: bool = typer.Option(False, "--minus", "-m", help="Highlight '-' instead of '+'"),
    language: Optional[str] = typer.Option(None, "--lang", "-l", help="Restrict to one language"),
):
    """Inspect the segment feature table."""
    table_snapshot = default_feature_table()
    if language:
        segments = _resolve(_store(ctx), language).elementary_segments
    else:
        segments = list(table_snapshot.rows)

    if segment is not None:
        row = table_snapshot.row(segment)
        table = Table(title=f"Features of /{segment}/")
        table.add_column("Feature", style="cyan")
        table.add_column("Value", style="green")
        for name, state in row.items():
            table.add_row(name, state)
        console.print(table)
        return

    if feature is not None:
        if feature not in BINARY_FEATURES:
            console.print(f"[red]Error:[/] Unknown feature {feature!r}; choose from {', '.join(BINARY_FEATURES)}")
            raise typer.Exit(1)
        polarity = Polarity.MINUS if minus else Polarity.PLUS
        matches = table_snapshot.highlight(segments, feature, polarity)
        console.print(f"[bold][{polarity.value}{feature}][/]: {', '.join(matches) or 'None'}")
        return

    table = Table(title=f"Segment Features (v{table_snapshot.version})")
    table.add_column("Segment", style="cyan")
    for name in BINARY_FEATURES:
        table.add_column(name)
    for seg in segments:
        table.add_row(seg, *table_snapshot.row(seg).values())
    console.print(table)


@app.command()
def template(
    output: Path = typer.Option(
        Path(TEMPLATE_FILENAME), "--output", "-o",
        help="Where to write the CSV template",
    ),
):
    """Write the example CSV template."""
    path = write_template(output)
    console.print(f"[green]Saved template to:[/] {path}")


@app.command()
def export(
    ctx: typer.Context,
    output: Path = typer.Option(
        Path("languages.csv"), "--output", "-o",
        help="Where to write the CSV export",
    ),
):
    """Export all languages in the template CSV format."""
    path = write_records(_store(ctx), output)
    console.print(f"[green]Exported languages to:[/] {path}")


@app.command(name="import")
def import_(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="CSV file to import"),
    column: Optional[List[str]] = typer.Option(
        None, "--map", "-m",
        help="Column mapping as field=header (repeatable); defaults to template headers",
    ),
):
    """Import languages from a CSV file."""
    store = _store(ctx)
    mapping = _parse_mapping(column) if column else None
    try:
        created = import_csv(store, path, mapping)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(1)

    console.print(f"[green]✓[/] Imported {len(created)} languages")
    for record in created:
        console.print(f"  • {record.name} (id {record.id})")


@app.command()
def add(
    ctx: typer.Context,
    name: str = typer.Option(..., "--name", "-n", help="Language name"),
    family: str = typer.Option("", "--family", help="Language family"),
    iso_code: str = typer.Option("", "--iso", help="ISO 639-3 code"),
    latitude: float = typer.Option(0.0, "--lat", help="Latitude"),
    longitude: float = typer.Option(0.0, "--lon", help="Longitude"),
    surface: str = typer.Option("", "--surface", "-s", help="Surface phonemes (comma/space separated)"),
    elementary: str = typer.Option("", "--elementary", "-e", help="Elementary segments (comma/space separated)"),
    suprasegmentals: str = typer.Option("", "--supra", help="Suprasegmentals (comma/space separated)"),
    feature_count: int = typer.Option(0, "--features", help="Number of binary features"),
):
    """Add a new language."""
    store = _store(ctx)
    try:
        record = store.add(
            name=name,
            family=family,
            iso_code=iso_code,
            coordinates=(latitude, longitude),
            surface_phonemes=surface,
            elementary_segments=elementary,
            suprasegmentals=suprasegmentals,
            features=feature_count,
        )
    except ValueError as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(1)
    console.print(f"[green]✓[/] Added {record.name} (id {record.id})")


@app.command(name="map")
def map_(
    ctx: typer.Context,
    language: str = typer.Argument(..., help="Language name or id"),
    surface: str = typer.Argument(..., help="Surface phoneme"),
    elementary: str = typer.Argument("", help="Elementary decomposition (omit with --remove)"),
    notes: str = typer.Option("", "--notes", help="Explanation of the mapping"),
    remove: bool = typer.Option(False, "--remove", "-r", help="Remove the mapping for this surface phoneme"),
):
    """Add, change or remove a surface → elementary mapping."""
    store = _store(ctx)
    record = _resolve(store, language)
    if not remove and not elementary.strip():
        console.print("[red]Error:[/] Give the elementary decomposition, or --remove to delete the mapping")
        raise typer.Exit(1)
    session = store.edit(record.id)
    existing = [i for i, m in enumerate(session.draft.surface_mappings) if m.surface == surface]

    if remove:
        if not existing:
            session.cancel()
            console.print(f"[yellow]No mapping for /{surface}/ in {record.name}[/]")
            raise typer.Exit(1)
        for index in reversed(existing):
            session.remove_mapping(index)
    elif existing:
        session.update_mapping(existing[0], "elementary", elementary)
        if notes:
            session.update_mapping(existing[0], "notes", notes)
    else:
        session.add_mapping(surface, elementary, notes)

    saved = session.save()
    if remove:
        console.print(f"[green]✓[/] Removed /{surface}/ from {saved.name}")
    else:
        console.print(f"[green]✓[/] Saved /{surface}/ → /{elementary}/ for {saved.name}")


@app.command()
def delete(
    ctx: typer.Context,
    language: str = typer.Argument(..., help="Language name or id"),
):
    """Delete a language."""
    store = _store(ctx)
    record = _resolve(store, language)
    store.delete(record.id)
    console.print(f"[green]✓[/] Deleted {record.name}")


@app.command()
def reset(ctx: typer.Context):
    """Discard cached edits and go back to the built-in languages."""
    cache: LanguageCache = ctx.obj
    cache.clear()
    console.print("[green]✓[/] Cache cleared; built-in languages restored")


if __name__ == "__main__":
    app()
