"""readpub CLI application using Typer."""

import asyncio
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from readpub import __version__
from readpub.config import settings
from readpub.core.ingestion.ebook_generator import EbookGenerator
from readpub.core.ingestion.fetcher import (
    BrowserProfileStrategy,
    DirectFetchStrategy,
    FetchStrategy,
)
from readpub.core.ingestion.pipeline import BatchResult, DocumentStatus, PipelineDriver
from readpub.core.ingestion.workspace import Workspace
from readpub.utils.exceptions import ConversionError
from readpub.utils.logging import configure_logging
from readpub.utils.profile_locator import get_profile_locator

app = typer.Typer(
    name="readpub",
    help="readpub - turn web articles into reader-optimized e-books",
    add_completion=False,
)
console = Console()

_STATUS_STYLES = {
    DocumentStatus.COMPLETED: "green",
    DocumentStatus.SKIPPED: "yellow",
    DocumentStatus.FAILED: "red",
}


def version_callback(value: bool) -> None:
    """Display version and exit."""
    if value:
        console.print(f"[bold cyan]readpub[/bold cyan] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Override LOG_LEVEL (DEBUG, INFO, WARNING, ...)"),
    ] = None,
) -> None:
    """readpub - turn web articles into reader-optimized e-books."""
    try:
        configure_logging(
            log_level=log_level or settings.log_level,
            environment=settings.environment,
        )
    except ValueError as e:
        console.print("\n[bold red]❌ Configuration Error:[/bold red]")
        console.print(f"  {e}")
        raise typer.Exit(code=1) from None


def read_urls(stream: Iterable[str]) -> list[str]:
    """Read newline-delimited URLs, ignoring blank lines."""
    return [line.strip() for line in stream if line.strip()]


def build_strategy(
    browser: bool,
    profile: str | None,
    profile_path: Path | None,
    headless: bool | None,
) -> FetchStrategy:
    """
    Select the fetch strategy for this run.

    With --browser, an explicit --profile-path wins over --profile, which is
    resolved through the platform's profile locator.
    """
    if not browser:
        if profile or profile_path:
            console.print("[dim]Profile options are ignored without --browser[/dim]")
        return DirectFetchStrategy()

    resolved: str | None = None
    if profile_path:
        resolved = str(profile_path)
    elif profile:
        locator = get_profile_locator()
        resolved = locator.find(profile)
        if resolved is None:
            console.print(
                f"[yellow]⚠ No browser profile matching {profile!r} "
                f"under {locator.profiles_root}[/yellow]"
            )

    if resolved is None:
        console.print(
            "[yellow]⚠ Browser fetching has no profile; "
            "URLs without cached content will fail[/yellow]"
        )
    else:
        console.print(f"  Profile: {resolved}")

    return BrowserProfileStrategy(resolved, headless=headless)


def print_summary(batch: BatchResult) -> None:
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("URL")
    table.add_column("Status")
    table.add_column("Output / Error")

    for result in batch.results:
        style = _STATUS_STYLES[result.status]
        detail = result.error or (str(result.output_path) if result.output_path else "-")
        table.add_row(result.url, f"[{style}]{result.status.value}[/{style}]", detail)

    console.print(table)
    console.print(
        f"\n[green]{batch.completed} completed[/green], "
        f"[yellow]{batch.skipped} skipped[/yellow], "
        f"[red]{batch.failed} failed[/red]"
    )


@app.command()
def convert(
    url: Annotated[
        str | None,
        typer.Argument(help="Article URL (omit to read newline-separated URLs from stdin)"),
    ] = None,
    browser: Annotated[
        bool,
        typer.Option("--browser", "-b", help="Fetch pages with a browser running on your profile"),
    ] = False,
    profile: Annotated[
        str | None,
        typer.Option("--profile", "-p", help="Browser profile name to look up (with --browser)"),
    ] = None,
    profile_path: Annotated[
        Path | None,
        typer.Option("--profile-path", help="Explicit browser profile directory (with --browser)"),
    ] = None,
    output_format: Annotated[
        str | None,
        typer.Option("--format", "-f", help="Output format (default: OUTPUT_FORMAT or epub2)"),
    ] = None,
    css: Annotated[
        Path | None,
        typer.Option("--css", help="Stylesheet for the e-book (default: bundled e-ink CSS)"),
    ] = None,
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", "-o", help="Directory for generated e-books"),
    ] = None,
    workspace_dir: Annotated[
        Path | None,
        typer.Option("--workspace-dir", "-w", help="Directory for per-document workspaces"),
    ] = None,
    headless: Annotated[
        bool | None,
        typer.Option("--headless/--headed", help="Show or hide the browser window"),
    ] = None,
) -> None:
    """
    Convert one or more web articles into e-books.

    Each URL gets a workspace holding the raw page, the extracted article and
    its metadata. Raw pages are cached: running again on the same URL skips
    the download and only regenerates the e-book.

    Examples:
        readpub convert https://example.com/articles/foo-bar

        cat urls.txt | readpub convert --format epub3

        readpub convert https://example.com/paywalled --browser --profile default-release
    """
    urls = [url] if url else read_urls(sys.stdin)
    if not urls:
        console.print("[red]❌ No URLs given (pass one as argument or pipe them on stdin)[/red]")
        raise typer.Exit(code=1)

    workspace = Workspace(workspaces_dir=workspace_dir, output_dir=output_dir)
    try:
        generator = EbookGenerator(workspace, output_format=output_format, stylesheet=css)
        generator.check_installed()
    except (ValueError, ConversionError) as e:
        console.print("\n[bold red]❌ Configuration Error:[/bold red]")
        console.print(f"  {e}")
        raise typer.Exit(code=1) from None

    console.print(
        Panel.fit(
            "[bold cyan]readpub[/bold cyan] - article to e-book\n"
            f"Version {__version__}",
            border_style="cyan",
        )
    )
    console.print("\n[bold]Configuration:[/bold]")
    console.print(f"  URLs: {len(urls)}")
    console.print(f"  Format: {generator.output_format}")
    console.print(f"  Output: {workspace.output_dir}")
    console.print(f"  Workspaces: {workspace.workspaces_dir}")

    strategy = build_strategy(browser, profile, profile_path, headless)
    driver = PipelineDriver(strategy, workspace=workspace, generator=generator)

    try:
        batch = asyncio.run(driver.run_batch(urls))
    except KeyboardInterrupt:
        console.print("\n\n[yellow]⚠ Conversion cancelled by user (Ctrl+C)[/yellow]")
        raise typer.Exit(code=130) from None

    console.print()
    print_summary(batch)


@app.command()
def profiles() -> None:
    """
    List the browser profiles found for this platform.

    Any name shown here (or a unique suffix of it) can be passed to
    ``convert --browser --profile``.
    """
    locator = get_profile_locator()
    found = locator.list_profiles()

    console.print(f"\n[bold]Browser profiles ({locator.family.value}):[/bold]\n")
    if not found:
        console.print(f"[dim]No profiles found under {locator.profiles_root}[/dim]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Name")
    table.add_column("Path")
    table.add_column("Modified")

    for info in found:
        modified = info.modified_at.strftime("%Y-%m-%d %H:%M:%S") if info.modified_at else "-"
        table.add_row(info.name, str(info.path), modified)

    console.print(table)
    console.print(f"\nProfile directory: {locator.profiles_root}")


if __name__ == "__main__":
    app()
