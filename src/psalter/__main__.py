"""CLI entry point for Czech Psalter."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from psalter import __version__
from psalter.analysis import (
    compute_profiles,
    enumerate_pairs,
    extract_clusters,
    most_conservative,
    most_innovative,
    overall_distribution,
    summarize_pairs,
)
from psalter.comparison import (
    DEFAULT_PSALTERS,
    select_manuscripts,
    verse_comparison,
    word_table,
)
from psalter.config import Settings, load_settings
from psalter.ingest.loader import DataLoader, LoaderError, PsalterData

console = Console()

KIND_STYLES = {
    "identical": "white",
    "autosemantic": "bold green",
    "synsemantic": "italic yellow",
    "unknown": "dim",
}


def _load(settings: Settings) -> PsalterData:
    """Load session data or exit with the load error."""
    try:
        return DataLoader.from_settings(settings).load_sync()
    except LoaderError as e:
        console.print(f"[red]Error loading data: {escape(str(e))}[/red]")
        sys.exit(1)


def _dump(result: dict | list, output: str | None) -> None:
    text = json.dumps(result, indent=2, ensure_ascii=False)
    if output:
        Path(output).write_text(text, encoding="utf-8")
        console.print(f"[green]✓ Output written to {output}[/green]")
    else:
        click.echo(text)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="YAML settings file",
)
@click.option("--data-dir", type=click.Path(file_okay=False), help="Local data directory")
@click.option("--base-url", help="Base URL serving the JSON resources")
@click.option("--log-level", default=None, help="Logging level (default: INFO)")
@click.pass_context
def cli(ctx, config_path, data_dir, base_url, log_level):
    """Czech Psalter - compare medieval Czech psalter manuscripts."""
    try:
        settings = load_settings(config_path)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--config")

    if data_dir:
        settings.data_dir = Path(data_dir)
    if base_url:
        settings.base_url = base_url
    if log_level:
        settings.log_level = log_level.upper()

    logging.basicConfig(
        level=settings.log_level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    ctx.obj = settings


@cli.command()
@click.pass_obj
def sheets(settings: Settings):
    """List psalm sheets and their manuscripts."""
    data = _load(settings)

    table = Table(title="Sheets")
    table.add_column("Sheet", style="cyan")
    table.add_column("Words", justify="right")
    table.add_column("Manuscripts")
    for name, words in data.sheets.items():
        manuscripts = data.manuscripts(name)
        table.add_row(name, str(len(words)), f"{len(manuscripts)}: {', '.join(manuscripts)}")
    console.print(table)


@cli.command()
@click.option("--sheet", default=None, help="Sheet to profile (default: aggregate sheet)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--output", "-o", type=click.Path(), help="Output JSON to file")
@click.pass_obj
def stats(settings: Settings, sheet: str | None, as_json: bool, output: str | None):
    """Per-manuscript variation profiles and rankings."""
    data = _load(settings)
    sheet = sheet or settings.aggregate_sheet
    if sheet not in data.sheets:
        console.print(f"[red]Error: unknown sheet {sheet!r}[/red]")
        sys.exit(1)

    profiles = compute_profiles(data.words(sheet), data.manuscripts(sheet))
    innovative = most_innovative(profiles, settings.ranking_size)
    conservative = most_conservative(profiles, settings.ranking_size)
    distribution = overall_distribution(profiles)

    if as_json or output:
        _dump(
            {
                "sheet": sheet,
                "profiles": [p.to_dict() for p in profiles],
                "most_innovative": [p.name for p in innovative],
                "most_conservative": [p.name for p in conservative],
                "distribution": distribution.to_dict(),
            },
            output,
        )
        return

    table = Table(title=f"Manuscript Profiles ({sheet})")
    table.add_column("Abbreviation", style="bold")
    table.add_column("Full Name")
    table.add_column("Date")
    table.add_column("Variation Rate", justify="right")
    table.add_column("Autosemantic", justify="right")
    table.add_column("Synsemantic", justify="right")
    table.add_column("Identical", justify="right")
    for p in most_innovative(profiles, limit=len(profiles)):
        info = data.catalog.get(p.name)
        table.add_row(
            p.name,
            info.full_name if info and info.full_name else "-",
            info.date if info and info.date else "-",
            f"{p.variation_rate:.2f}%",
            str(p.autosemantic_count),
            str(p.synsemantic_count),
            str(p.identical_count),
        )
    console.print(table)

    console.print(
        f"\n[bold red]Most innovative:[/bold red] {', '.join(p.name for p in innovative)}"
    )
    console.print(
        f"[bold blue]Most conservative:[/bold blue] {', '.join(p.name for p in conservative)}"
    )
    console.print("\n[bold]Overall change distribution[/bold]")
    for item in distribution.as_series():
        console.print(f"  {item['name']}: {item['value']}")


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def similarity(settings: Settings, as_json: bool):
    """Pairwise similarity summary."""
    data = _load(settings)
    sim = data.similarity
    summary = summarize_pairs(
        enumerate_pairs(sim.manuscripts, sim.similarity_matrix),
        top=settings.ranking_size,
    )

    if as_json:
        _dump(summary.to_dict(), None)
        return

    console.print(
        Panel(
            f"Pairs: {summary.pair_count}\n"
            f"Average: {summary.average_similarity:.2f}%  "
            f"Min: {summary.min_similarity:.2f}%  Max: {summary.max_similarity:.2f}%\n"
            f"≥95%: {summary.pairs_at_least_95}  ≥90%: {summary.pairs_at_least_90}  "
            f"<80%: {summary.pairs_below_80}",
            title=f"Similarity ({len(sim.manuscripts)} manuscripts)",
        )
    )
    for title, pairs in (
        ("Most similar", summary.most_similar),
        ("Least similar", summary.least_similar),
    ):
        table = Table(title=title)
        table.add_column("Manuscript A", style="cyan")
        table.add_column("Manuscript B", style="cyan")
        table.add_column("Similarity", justify="right")
        for p in pairs:
            table.add_row(p.manuscript_a, p.manuscript_b, f"{p.similarity:.2f}%")
        console.print(table)


@cli.command()
@click.option("--threshold", type=float, default=None, help="Similarity threshold (%)")
@click.pass_obj
def clusters(settings: Settings, threshold: float | None):
    """Groups of near-identical manuscripts."""
    data = _load(settings)
    threshold = settings.cluster_threshold if threshold is None else threshold
    sim = data.similarity
    groups = extract_clusters(
        enumerate_pairs(sim.manuscripts, sim.similarity_matrix), threshold=threshold
    )

    if not groups:
        console.print(f"[yellow]No manuscript pairs at or above {threshold}%[/yellow]")
        return
    console.print(f"[bold]Clusters at ≥{threshold}%[/bold]")
    for i, group in enumerate(groups, 1):
        console.print(f"  {i}. {', '.join(group)}")


@cli.command()
@click.argument("sheet")
@click.option(
    "--manuscript",
    "-m",
    "manuscripts",
    multiple=True,
    required=True,
    help="Manuscript to compare (repeatable)",
)
@click.option("--search", "-s", default="", help="Filter on Latin or BiblPad")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def words(
    settings: Settings,
    sheet: str,
    manuscripts: tuple[str, ...],
    search: str,
    as_json: bool,
):
    """Word-by-word comparison of selected manuscripts.

    Example: psalter words Všechny -m Witt -m Klem --search deus
    """
    data = _load(settings)
    if sheet not in data.sheets:
        console.print(f"[red]Error: unknown sheet {sheet!r}[/red]")
        sys.exit(1)

    available = data.manuscripts(sheet)
    unknown = [ms for ms in manuscripts if ms not in available]
    if unknown:
        console.print(f"[red]Error: unknown manuscripts {', '.join(unknown)}[/red]")
        sys.exit(1)

    selected = select_manuscripts(
        manuscripts, available, limit=settings.max_compared_manuscripts
    )
    result = word_table(
        data.words(sheet), selected, search=search, row_limit=settings.word_row_limit
    )

    if as_json:
        _dump(result.to_dict(), None)
        return

    table = Table(title=f"{sheet}: word by word")
    table.add_column("Latina", style="bold")
    table.add_column("BiblPad", style="cyan")
    for ms in selected:
        table.add_column(ms)
    for row in result.rows:
        cells = []
        for ms in selected:
            cell = row.cells[ms]
            if cell is None or not cell["text"]:
                cells.append("-")
            else:
                style = KIND_STYLES.get(cell["kind"], "white")
                cells.append(f"[{style}]{cell['text']}[/{style}]")
        table.add_row(row.latin, row.reference_form, *cells)
    console.print(table)

    if result.truncated:
        console.print(
            f"[dim]Showing first {len(result.rows)} of {result.total} words. "
            f"Use --search to filter.[/dim]"
        )


@cli.command()
@click.argument("verse_id")
@click.option(
    "--psalter",
    "-p",
    "psalters",
    multiple=True,
    help=f"Older psalter to show (default: {', '.join(DEFAULT_PSALTERS)})",
)
@click.pass_obj
def verse(settings: Settings, verse_id: str, psalters: tuple[str, ...]):
    """Compare one verse across the older Czech psalters.

    Example: psalter verse "Ps 6,2" -p Witt -p Klem
    """
    data = _load(settings)
    try:
        comparison = verse_comparison(data.verses, verse_id, list(psalters) or None)
    except KeyError:
        console.print(f"[red]Error: unknown verse {verse_id!r}[/red]")
        sys.exit(1)

    console.print(Panel(comparison.latin, title=f"{verse_id} - Latina (Vulgáta)"))
    for t in comparison.translations:
        label = t["abbreviation"]
        if t.get("name"):
            label += f" - {t['name']} ({t['period']})"
        console.print(f"[bold cyan]{label}[/bold cyan]\n  {t['text']}")


@cli.command()
@click.option("--host", default=None, help="Bind address")
@click.option("--port", type=int, default=None, help="Port")
@click.pass_obj
def serve(settings: Settings, host: str | None, port: int | None):
    """Start the API server."""
    import uvicorn

    from psalter.api.main import create_app

    app = create_app(settings=settings)
    uvicorn.run(app, host=host or settings.host, port=port or settings.port)


def main():
    cli()


if __name__ == "__main__":
    main()
