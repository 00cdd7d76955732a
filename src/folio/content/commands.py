"""CLI commands for listing, inspecting and auditing content documents."""

from __future__ import annotations

import json as json_module
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from folio.content.auditor import AuditIssue, AuditResult

console = Console()


@click.group(name="content")
def content() -> None:
    """Inspect and audit Hugo content documents."""
    pass


@content.command(name="list")
@click.option("-t", "--type", "content_types", multiple=True, help="Content kinds to list (default: all)")
@click.option("--include-drafts", is_flag=True, help="Include draft content")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_content(content_types: tuple[str, ...], include_drafts: bool, as_json: bool) -> None:
    """List content documents.

    \b
    Examples:
        folio content list
        folio content list --type post --include-drafts
        folio content list --json
    """
    from folio.content.scanner import ContentScanner

    scanner = ContentScanner()
    kinds = content_types or tuple(scanner.sections)

    docs = []
    for kind in kinds:
        docs.extend(scanner.scan_type(kind, include_drafts=include_drafts))

    if as_json:
        click.echo(json_module.dumps([d.to_dict() for d in docs], indent=2))
        return

    if not docs:
        console.print("[yellow]No content found.[/yellow]")
        return

    table = Table(title=f"Content ({len(docs)})")
    table.add_column("Kind", style="cyan")
    table.add_column("Slug")
    table.add_column("Title")
    table.add_column("Date", style="dim")
    table.add_column("Format", style="dim")

    for doc in docs:
        date = doc.date
        title = escape(doc.title) if doc.is_valid else f"[red]{escape(doc.title)} (unparseable)[/red]"
        if doc.is_draft:
            title += " [yellow](draft)[/yellow]"
        fmt = doc.source_format
        if doc.variants:
            fmt += " + " + ", ".join(v.source_format for v in doc.variants)
        table.add_row(
            doc.kind,
            escape(doc.slug),
            title,
            date.strftime("%Y-%m-%d") if date else "-",
            fmt,
        )

    console.print(table)


@content.command(name="show")
@click.argument("ref")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def show_content(ref: str, as_json: bool) -> None:
    """Show one document by path, slug or Hugo path.

    \b
    Examples:
        folio content show content/post/my-post/index.Rmd
        folio content show /project/my-project/
        folio content show admin
    """
    from folio.content.scanner import ContentScanner

    scanner = ContentScanner()
    doc = scanner.find(ref)

    if doc is None:
        console.print(f"[red]No content found for: {escape(ref)}[/red]")
        raise SystemExit(1)

    if as_json:
        data = doc.to_dict()
        data["front_matter"] = doc.front_matter
        click.echo(json_module.dumps(data, indent=2, default=str))
        return

    console.print(f"[bold]{escape(doc.title)}[/bold]")
    console.print(f"  [dim]{escape(str(doc.path))}[/dim]")
    console.print(f"  Kind: {doc.kind}    Format: {doc.source_format}    URL: {escape(doc.hugo_path)}")
    if doc.error:
        console.print(f"  [red]Error: {escape(doc.error)}[/red]")
        return

    date = doc.date
    if date:
        console.print(f"  Date: {date.isoformat()}")
    if doc.authors:
        console.print(f"  Authors: {escape(', '.join(doc.authors))}")
    if doc.tags:
        console.print(f"  Tags: {escape(', '.join(doc.tags))}")
    if doc.categories:
        console.print(f"  Categories: {escape(', '.join(doc.categories))}")
    if doc.summary:
        console.print(f"  Summary: {escape(doc.summary)}")
    for variant in doc.variants:
        console.print(f"  [dim]Rendered: {escape(variant.path.name)}[/dim]")
    for dup in doc.duplicate_keys:
        console.print(f"  [red]Duplicate key '{escape(dup.key)}' on line {dup.line}[/red]")
    console.print(f"  Body: {len(doc.body.splitlines())} lines")


@content.command(name="stats")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def content_stats(as_json: bool) -> None:
    """Show content statistics."""
    from folio.content.scanner import ContentScanner

    stats = ContentScanner().stats()

    if as_json:
        click.echo(json_module.dumps(stats, indent=2))
        return

    table = Table(title="Content Statistics", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Total documents:", str(stats["total"]))
    for kind, count in sorted(stats["by_kind"].items()):
        table.add_row(f"  {kind}:", str(count))
    table.add_row("Published:", str(stats["published"]))
    table.add_row("Drafts:", str(stats["drafts"]))
    table.add_row("Rendered variants:", str(stats["rendered_variants"]))
    if stats["parse_failures"]:
        table.add_row("Parse failures:", f"[red]{stats['parse_failures']}[/red]")

    console.print(table)


@content.command(name="audit")
@click.option(
    "-t",
    "--type",
    "content_types",
    multiple=True,
    help="Content kinds to audit (default: all)",
)
@click.option("--include-drafts", is_flag=True, help="Include draft content in audit")
@click.option(
    "--check",
    "check_names",
    help="Comma-separated list of checks to run (e.g., author_refs,date_format)",
)
@click.option(
    "--severity",
    type=click.Choice(["error", "warning", "info"]),
    default=None,
    help="Minimum severity level to report",
)
@click.option("--list-checks", is_flag=True, help="List available audit checks and exit")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("-v", "--verbose", is_flag=True, help="Show warnings and info in detail")
@click.option("--summary-only", is_flag=True, help="Only show statistics")
def audit_content(
    content_types: tuple[str, ...],
    include_drafts: bool,
    check_names: str | None,
    severity: str | None,
    list_checks: bool,
    as_json: bool,
    verbose: bool,
    summary_only: bool,
) -> None:
    """Audit content front matter and references.

    Exits with status 1 when error-level issues are found.

    \b
    Examples:
        folio content audit                    # All checks, all content
        folio content audit --type post        # Only audit posts
        folio content audit --json             # Machine-readable output
        folio content audit --list-checks      # Show available checks
        folio content audit --check author_refs,date_format
        folio content audit --severity warning # Min severity level
    """
    from folio.content.auditor import ContentAuditor

    if list_checks:
        from folio.content.audit_checks import list_checks as get_checks

        table = Table(title="Available Audit Checks")
        table.add_column("Name", style="cyan")
        table.add_column("Severity", style="yellow")
        table.add_column("Description")

        for check in get_checks():
            table.add_row(check["name"], check["severity"], check["description"])

        console.print(table)
        return

    auditor = ContentAuditor()
    parsed_checks = [c for c in check_names.split(",") if c.strip()] if check_names else None

    result = auditor.run_checks(
        content_types=content_types or None,
        include_drafts=include_drafts,
        check_names=parsed_checks,
        min_severity=severity,
    )

    if as_json:
        click.echo(result.to_json())
    else:
        _display_audit_result(result, verbose, summary_only)

    if result.has_errors:
        raise SystemExit(1)


def _display_issues(issues: list[AuditIssue], verbose: bool) -> None:
    for issue in issues:
        console.print(f"  [bold]• {escape(issue.title)}[/bold] \\[{issue.check_name}]")
        console.print(f"    [dim]{escape(str(issue.path))}[/dim]")
        console.print(f"    {escape(issue.message)}")
        if verbose and issue.field_name:
            console.print(f"    [dim]Field: {issue.field_name}[/dim]")
        console.print()


def _display_audit_result(result: AuditResult, verbose: bool, summary_only: bool) -> None:
    """Display audit result."""
    table = Table(title="Audit Summary", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Content checked:", str(result.content_checked))
    table.add_row("Content with issues:", str(result.content_with_issues))
    table.add_row("Total issues:", str(len(result.issues)))

    by_sev = result.group_by_severity()
    if by_sev.get("error", 0):
        table.add_row("Errors:", f"[red]{by_sev['error']}[/red]")
    if by_sev.get("warning", 0):
        table.add_row("Warnings:", f"[yellow]{by_sev['warning']}[/yellow]")
    if by_sev.get("info", 0):
        table.add_row("Info:", f"[blue]{by_sev['info']}[/blue]")

    console.print()
    console.print(table)

    if summary_only:
        return

    by_check = result.group_by_check()
    if by_check and verbose:
        console.print()
        check_table = Table(title="Issues by Check")
        check_table.add_column("Check", style="cyan")
        check_table.add_column("Count", style="white")
        for check_name, count in sorted(by_check.items()):
            check_table.add_row(check_name, str(count))
        console.print(check_table)

    errors = result.errors()
    warnings = result.warnings()
    infos = result.infos()

    if errors:
        console.print()
        console.print(f"[red]Errors ({len(errors)}):[/red]")
        _display_issues(errors, verbose)

    if warnings:
        console.print()
        console.print(f"[yellow]Warnings ({len(warnings)}):[/yellow]")
        if verbose:
            _display_issues(warnings, verbose)
        else:
            console.print("  [dim]Use --verbose to see details[/dim]")

    if infos and verbose:
        console.print()
        console.print(f"[blue]Info ({len(infos)}):[/blue]")
        _display_issues(infos, verbose)

    console.print()
    if result.has_errors:
        console.print("[red]Audit found errors.[/red]")
    elif result.has_warnings:
        console.print("[yellow]Audit passed with warnings.[/yellow]")
    else:
        console.print("[green]Audit passed. No issues found.[/green]")
