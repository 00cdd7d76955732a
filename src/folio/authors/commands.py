"""CLI commands for author profiles."""

from __future__ import annotations

import json as json_module

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()


@click.group(name="authors")
def authors() -> None:
    """Author profiles and the content that references them."""
    pass


@authors.command(name="list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_authors(as_json: bool) -> None:
    """List author profiles with the number of documents citing each."""
    from folio.authors.registry import AuthorRegistry
    from folio.content.scanner import ContentScanner

    scanner = ContentScanner()
    registry = AuthorRegistry.from_site(scanner=scanner)
    refs = registry.references(scanner.scan_all(include_drafts=False))

    if as_json:
        output = [
            {**profile.to_dict(), "documents": len(refs.get(profile.identifier, []))}
            for profile in registry.profiles()
        ]
        click.echo(json_module.dumps(output, indent=2))
        return

    if not len(registry):
        console.print("[yellow]No author profiles found in content/authors/.[/yellow]")
        return

    table = Table(title="Authors")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Role", style="dim")
    table.add_column("Documents", justify="right", style="green")

    for profile in registry.profiles():
        name = escape(profile.name) + (" [yellow](superuser)[/yellow]" if profile.superuser else "")
        count = len(refs.get(profile.identifier, []))
        table.add_row(escape(profile.identifier), name, escape(profile.role or "-"), str(count) if count else "-")

    console.print(table)


@authors.command(name="show")
@click.argument("author_id")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def show_author(author_id: str, as_json: bool) -> None:
    """Show an author profile and the documents that reference it.

    \b
    Examples:
        folio authors show admin
        folio authors show "Jane Doe" --json
    """
    from folio.authors.registry import AuthorRegistry
    from folio.content.scanner import ContentScanner

    scanner = ContentScanner()
    registry = AuthorRegistry.from_site(scanner=scanner)
    profile = registry.resolve(author_id)

    if profile is None:
        console.print(f"[red]No author profile for: {escape(author_id)}[/red]")
        raise SystemExit(1)

    docs = registry.references(scanner.scan_all(include_drafts=False))[profile.identifier]

    if as_json:
        output = profile.to_dict()
        output["documents"] = [{"title": d.title, "path": str(d.path)} for d in docs]
        click.echo(json_module.dumps(output, indent=2))
        return

    console.print(f"[bold]{escape(profile.name)}[/bold] [dim]({escape(profile.identifier)})[/dim]")
    if profile.role:
        console.print(f"  {escape(profile.role)}")
    if profile.email:
        console.print(f"  Email: {escape(profile.email)}")
    for org in profile.organizations:
        console.print(f"  Organization: {escape(org.name)}" + (f" [dim]{escape(org.url)}[/dim]" if org.url else ""))
    if profile.interests:
        console.print(f"  Interests: {escape(', '.join(profile.interests))}")
    for course in profile.courses:
        year = f", {course.year}" if course.year else ""
        console.print(f"  Education: {escape(course.course)}, {escape(course.institution)}{year}")
    for link in profile.social:
        console.print(f"  [dim]{escape(link.icon)}: {escape(link.link)}[/dim]")

    console.print()
    if not docs:
        console.print("[yellow]No content references this author.[/yellow]")
        return
    console.print(f"[green]Referenced by {len(docs)} document(s):[/green]")
    for doc in docs:
        console.print(f"  • {escape(doc.title)}")
        console.print(f"    [dim]{escape(doc.hugo_path)}[/dim]")
