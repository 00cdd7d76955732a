"""CLI commands for tag and category hygiene."""

from __future__ import annotations

import json as json_module

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()

TAXONOMY_CHOICE = click.Choice(["tags", "categories", "both"])


def _selected(choice: str) -> tuple[str, ...]:
    return ("tags", "categories") if choice == "both" else (choice,)


def _pages(paths: list[str], shown: int = 3) -> str:
    more = f" (+{len(paths) - shown})" if len(paths) > shown else ""
    return escape(", ".join(paths[:shown])) + more


@click.group(name="taxonomy")
def taxonomy() -> None:
    """Tag and category hygiene: near-duplicates, orphans, stats."""
    pass


@taxonomy.command(name="audit")
@click.option("--taxonomy", "choice", type=TAXONOMY_CHOICE, default="both", help="Which taxonomy to audit")
@click.option("--include-drafts", is_flag=True, help="Include draft content")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def audit_terms(choice: str, include_drafts: bool, as_json: bool) -> None:
    """Find terms that differ only in case, separators or plural form.

    \b
    Examples:
        folio taxonomy audit
        folio taxonomy audit --taxonomy categories --json
    """
    from folio.taxonomy.analyzer import TaxonomyAnalyzer

    analyzer = TaxonomyAnalyzer()
    data = analyzer.collect(include_drafts=include_drafts)
    pairs = [p for name in _selected(choice) for p in analyzer.find_duplicates(data, taxonomy=name)]

    if as_json:
        click.echo(json_module.dumps(pairs, indent=2))
        return

    if not pairs:
        console.print("[green]No near-duplicate terms found.[/green]")
        return

    table = Table(title=f"Near-duplicate terms ({len(pairs)})")
    table.add_column("Taxonomy", style="dim")
    table.add_column("Terms", style="cyan")
    table.add_column("Reason", style="yellow")
    table.add_column("Used by", style="dim")

    for pair in pairs:
        terms = " / ".join(f"{escape(t)} ({pair['counts'][t]})" for t in pair["terms"])
        pages = [p for t in pair["terms"] for p in pair["documents"][t]]
        table.add_row(pair["taxonomy"], terms, pair["reason"], _pages(pages))

    console.print(table)


@taxonomy.command(name="orphans")
@click.option("--min-count", default=2, type=int, help="Terms used by fewer documents are orphans (default: 2)")
@click.option("--include-drafts", is_flag=True, help="Include draft content")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def orphan_terms(min_count: int, include_drafts: bool, as_json: bool) -> None:
    """List terms used by fewer than --min-count documents."""
    from folio.taxonomy.analyzer import TaxonomyAnalyzer

    analyzer = TaxonomyAnalyzer()
    orphans = analyzer.find_orphans(analyzer.collect(include_drafts=include_drafts), min_count=min_count)

    if as_json:
        click.echo(json_module.dumps(orphans, indent=2))
        return

    for name, entries in orphans.items():
        if not entries:
            console.print(f"[green]No orphan {name} (min count {min_count}).[/green]")
            continue

        table = Table(title=f"Orphan {name} ({len(entries)})")
        table.add_column("Term", style="cyan")
        table.add_column("Count", justify="right")
        table.add_column("Used by", style="dim")
        for entry in entries:
            table.add_row(escape(entry["term"]), str(entry["count"]), _pages(entry["documents"]))
        console.print(table)


@taxonomy.command(name="stats")
@click.option("--limit", default=20, type=int, help="Max terms to show (0=all)")
@click.option("--include-drafts", is_flag=True, help="Include draft content")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def term_stats(limit: int, include_drafts: bool, as_json: bool) -> None:
    """Show term frequencies and the most common tag pairs."""
    from folio.taxonomy.analyzer import TaxonomyAnalyzer

    analyzer = TaxonomyAnalyzer()
    stats = analyzer.get_stats(analyzer.collect(include_drafts=include_drafts), limit=limit)

    if as_json:
        output = {
            "tags": [{"tag": term, "count": count} for term, count in stats["tags"]],
            "categories": [{"category": term, "count": count} for term, count in stats["categories"]],
            "co_occurrences": {f"{a}+{b}": count for (a, b), count in stats["co_occurrences"]},
            **stats["totals"],
        }
        click.echo(json_module.dumps(output, indent=2))
        return

    totals = stats["totals"]
    console.print(
        f"[bold]{totals['total_tags']}[/bold] tags used {totals['total_tag_usages']} times, "
        f"[bold]{totals['total_categories']}[/bold] categories"
    )

    frequency = Table(title="Term frequency")
    frequency.add_column("Taxonomy", style="dim")
    frequency.add_column("Term", style="cyan")
    frequency.add_column("Documents", justify="right")
    for name in ("tags", "categories"):
        for term, count in stats[name]:
            frequency.add_row(name, escape(term), str(count))
    if frequency.row_count:
        console.print(frequency)

    if stats["co_occurrences"]:
        pairs = Table(title="Tags used together")
        pairs.add_column("Tags", style="cyan")
        pairs.add_column("Documents", justify="right")
        for (a, b), count in stats["co_occurrences"][:10]:
            pairs.add_row(f"{escape(a)} + {escape(b)}", str(count))
        console.print(pairs)
