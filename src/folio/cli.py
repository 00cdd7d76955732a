"""
Main CLI dispatcher for folio.

Usage:
    folio init                           # Create .folio/config.yaml
    folio content [list|show|stats|audit]
    folio authors [list|show]
    folio taxonomy [audit|orphans|stats]
"""

import logging
from pathlib import Path

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from folio import __version__

console = Console()


class FolioGroup(click.Group):
    """Command group that reports a missing site root instead of a traceback."""

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except FileNotFoundError as e:
            console.print(f"[red]{escape(str(e))}[/red]")
            raise SystemExit(1) from e


def setup_logging(verbose: bool) -> None:
    """Route library logging through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group(cls=FolioGroup)
@click.version_option(version=__version__, prog_name="folio")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """Content model and linter for Hugo academic sites.

    Parses front matter, resolves author references and audits content
    documents of the site.
    """
    setup_logging(verbose)
    ctx.ensure_object(dict)["verbose"] = verbose


def default_site_config() -> dict:
    """Settings written by folio init."""
    from folio.core.config import DEFAULT_REQUIRED_FIELDS

    return {"disabled_checks": [], "required_fields": DEFAULT_REQUIRED_FIELDS}


@main.command()
@click.option("--force", "-f", is_flag=True, help="Overwrite existing .folio/config.yaml")
def init(force: bool) -> None:
    """Initialize .folio/ in the site root.

    Uses the detected Hugo site root, or the current directory.
    """
    from folio.core.config import get_paths, get_site_root

    try:
        site_root = get_site_root()
    except FileNotFoundError:
        site_root = Path.cwd()

    paths = get_paths(site_root)

    if paths.config_file.exists() and not force:
        console.print(f"[yellow]{escape(str(paths.config_file))} already exists[/yellow]")
        console.print("[dim]Use --force to overwrite.[/dim]")
        return

    paths.folio_dir.mkdir(parents=True, exist_ok=True)
    paths.config_file.write_text(
        yaml.safe_dump(default_site_config(), sort_keys=False),
        encoding="utf-8",
    )
    console.print(f"[green]Created[/green] {escape(str(paths.config_file.relative_to(site_root)))}")


# Import and register command groups (imports after main definition intentional)
from folio.authors.commands import authors  # noqa: E402
from folio.content.commands import content  # noqa: E402
from folio.taxonomy.commands import taxonomy  # noqa: E402

main.add_command(content)
main.add_command(authors)
main.add_command(taxonomy)


if __name__ == "__main__":
    main()
