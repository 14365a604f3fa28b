"""Command-line interface for dotty."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import ConfigError, load_settings
from .errors import ConflictError, DestinationOccupiedError, DottyError, NetworkError, ScanError
from .log import configure_logging
from .manager import DottyManager, LinkReport
from .models import InfoReport, LinkOutcome, LinkState, SkippedEntry, UnlinkReport

app = typer.Typer(help="Link a git-hosted dotfiles repository into your home directory")
console = Console()

CONFIG_OPTION = typer.Option(None, "--config", "-c", help="Path to dotty.toml")
USER_OPTION = typer.Option(None, "--user", "-u", help="Whose dotfiles to manage (selects the cache directory)")
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Show debug logging")


def _load_manager(config: Path | None, user: str | None) -> DottyManager:
    settings = load_settings(config)
    return DottyManager(settings, user)


def _handle_error(exc: Exception) -> None:
    if isinstance(exc, PermissionError):
        console.print("[red]Permission denied.[/red] Check that you can write to your home and cache directories.")
        raise typer.Exit(code=1)
    if isinstance(exc, ConfigError):
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1)
    if isinstance(exc, ConflictError):
        console.print(f"[red]Conflicting dotfiles:[/red] {escape(str(exc))}")
        console.print("[yellow]Nothing was linked. Rename one of the files in your dotfiles repository.[/yellow]")
        raise typer.Exit(code=1)
    if isinstance(exc, NetworkError):
        console.print(f"[red]{escape(str(exc))}[/red]")
        console.print("[yellow]Check your network connection and the repository address.[/yellow]")
        raise typer.Exit(code=1)
    if isinstance(exc, ScanError):
        console.print(f"[red]{escape(str(exc))}[/red]")
        console.print("[yellow]Run 'dotty update' or 'dotty setup <source>' to fetch the repository again.[/yellow]")
        raise typer.Exit(code=1)
    if isinstance(exc, DottyError):
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1)
    raise exc


def _format_skipped(entries: Iterable[SkippedEntry]) -> None:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Entry")
    table.add_column("Reason")
    table.add_column("Details", overflow="fold")

    for entry in entries:
        table.add_row(entry.relative_path.as_posix(), entry.reason.value, entry.details or "")

    console.print(table)


def _format_failures(failures: Iterable[DestinationOccupiedError]) -> None:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Destination")
    table.add_column("Reason", overflow="fold")

    for failure in failures:
        table.add_row(str(failure.destination), failure.reason)

    console.print(table)


def _format_info(report: InfoReport) -> None:
    console.print(f"[bold]User:[/bold] {report.user}")
    console.print(f"[bold]Source:[/bold] {report.source} ({report.url})")
    console.print(f"[bold]Cache:[/bold] {report.cache_path}")
    if report.revision:
        console.print(f"[bold]Revision:[/bold] {report.revision}")

    state_styles = {
        LinkState.LINKED: "green",
        LinkState.MISSING: "yellow",
        LinkState.STALE: "yellow",
        LinkState.OCCUPIED: "red",
    }

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Source")
    table.add_column("Destination")
    table.add_column("State")

    for entry in report.entries:
        style = state_styles.get(entry.state, "white")
        table.add_row(
            entry.action.source.relative_to(report.cache_path).as_posix(),
            str(entry.action.destination),
            f"[{style}]{entry.state.value}[/{style}]",
        )

    console.print(table)

    if report.skipped:
        _format_skipped(report.skipped)


def _report_link(report: LinkReport) -> None:
    applied = report.applied
    console.print(
        f"[green]Linked {len(report.plan.actions) - len(applied.failures)} file(s)[/green] "
        f"({applied.count(LinkOutcome.CREATED)} created, "
        f"{applied.count(LinkOutcome.REPLACED)} replaced, "
        f"{applied.count(LinkOutcome.UNCHANGED)} unchanged)."
    )

    if report.plan.errors:
        console.print("[red]Some dotfiles have invalid feature flags and were not linked:[/red]")
        _format_skipped(report.plan.errors)
    if applied.failures:
        console.print("[red]Some destinations are occupied by files dotty does not manage:[/red]")
        _format_failures(applied.failures)

    if not report.ok:
        raise typer.Exit(code=1)


def _report_unlink(report: UnlinkReport) -> None:
    console.print(f"[green]Removed {report.count} link(s).[/green]")


@app.command()
def setup(
    source: str = typer.Argument(..., help="Dotfiles source, e.g. github:<user> or github:<user>/<repo>"),
    config: Path | None = CONFIG_OPTION,
    user: str | None = USER_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Fetch a dotfiles repository and link it into the home directory."""

    configure_logging(verbose)
    try:
        manager = _load_manager(config, user)
        report = manager.setup(source)
    except Exception as exc:  # noqa: BLE001
        _handle_error(exc)
        return
    _report_link(report)


@app.command()
def grab(
    source: str = typer.Argument(..., help="Dotfiles source, e.g. github:<user> or github:<user>/<repo>"),
    config: Path | None = CONFIG_OPTION,
    user: str | None = USER_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Fetch a dotfiles repository into the cache without linking it."""

    configure_logging(verbose)
    try:
        manager = _load_manager(config, user)
        manager.grab(source)
    except Exception as exc:  # noqa: BLE001
        _handle_error(exc)
        return
    console.print(f"[green]Fetched dotfiles for '{manager.user}' into '{manager.user_cache.dotfiles_path}'.[/green]")


@app.command()
def link(
    config: Path | None = CONFIG_OPTION,
    user: str | None = USER_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Create (or refresh) the symlinks for the cached dotfiles."""

    configure_logging(verbose)
    try:
        manager = _load_manager(config, user)
        report = manager.link()
    except Exception as exc:  # noqa: BLE001
        _handle_error(exc)
        return
    _report_link(report)


@app.command()
def update(
    config: Path | None = CONFIG_OPTION,
    user: str | None = USER_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Pull the latest dotfiles and relink them."""

    configure_logging(verbose)
    try:
        manager = _load_manager(config, user)
        report = manager.update()
    except Exception as exc:  # noqa: BLE001
        _handle_error(exc)
        return
    _report_link(report)


@app.command()
def unlink(
    config: Path | None = CONFIG_OPTION,
    user: str | None = USER_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Remove the symlinks dotty created, keeping the cached repository."""

    configure_logging(verbose)
    try:
        manager = _load_manager(config, user)
        report = manager.unlink()
    except Exception as exc:  # noqa: BLE001
        _handle_error(exc)
        return
    _report_unlink(report)


@app.command()
def clean(
    config: Path | None = CONFIG_OPTION,
    user: str | None = USER_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Alias for 'unlink'."""

    unlink(config=config, user=user, verbose=verbose)


@app.command()
def forget(
    config: Path | None = CONFIG_OPTION,
    user: str | None = USER_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Remove the symlinks and delete the cached repository."""

    configure_logging(verbose)
    try:
        manager = _load_manager(config, user)
        report = manager.forget()
    except Exception as exc:  # noqa: BLE001
        _handle_error(exc)
        return
    _report_unlink(report)
    console.print(f"[green]Forgot dotfiles for '{manager.user}'.[/green]")


@app.command()
def info(
    config: Path | None = CONFIG_OPTION,
    user: str | None = USER_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Show the recorded source and the state of every planned link."""

    configure_logging(verbose)
    try:
        manager = _load_manager(config, user)
        report = manager.info()
    except Exception as exc:  # noqa: BLE001
        _handle_error(exc)
        return
    _format_info(report)


def run() -> None:
    """Entry point used for console_script bindings."""

    app()
