"""Manage XDG autostart entries from the command line."""

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from usm.config import ConfigError, Settings, load_settings
from usm.domain.listing import visible_indices
from usm.manager import StartupManager
from usm.models import Entry, EntryDraft, Field, FilterConfig, Result, SortOrder

app = typer.Typer(
    help="Manage XDG autostart entries from the command line",
    no_args_is_help=True,
)

_NAME_HELP = "File name (without .desktop) or display name of the entry"


def setup_logging(verbose: bool) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
    )


def _settings() -> Settings:
    try:
        return load_settings()
    except ConfigError as exc:
        typer.echo(f"Warning: using default settings: {exc}", err=True)
        return Settings()


def _manager(ctx: typer.Context) -> StartupManager:
    return ctx.obj


def _find(manager: StartupManager, name: str) -> Entry:
    """Resolve NAME to an entry: exact file stem first, then display name (case-insensitive)."""
    entries = manager.load().entries
    for entry in entries:
        if entry.path is not None and entry.path.stem == name:
            return entry
    for entry in entries:
        if entry.name.lower() == name.lower():
            return entry
    typer.echo(f"Error: no autostart entry named '{name}'", err=True)
    raise typer.Exit(code=1)


def _report(result: Result, message: str) -> None:
    if not result.ok:
        typer.echo(f"Error: {result.error}", err=True)
        raise typer.Exit(code=1)
    for warning in result.warnings:
        typer.echo(f"Warning: {warning}", err=True)
    typer.echo(message)


@app.callback()
def main(
    ctx: typer.Context,
    user_dir: Path = typer.Option(  # noqa: B008
        None, "--user-dir", help="User autostart directory (default from settings)"
    ),
    system_dir: Path = typer.Option(  # noqa: B008
        None, "--system-dir", help="System autostart directory (default from settings)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Manage XDG autostart entries from the command line."""
    setup_logging(verbose)
    settings = _settings()
    ctx.obj = StartupManager(user_dir or settings.user_dir, system_dir or settings.system_dir)


@app.command("list")
def list_entries(
    ctx: typer.Context,
    user: bool = typer.Option(False, "--user", help="Only user entries"),
    system: bool = typer.Option(False, "--system", help="Only system entries"),
    enabled: bool = typer.Option(False, "--enabled", help="Only enabled entries"),
    disabled: bool = typer.Option(False, "--disabled", help="Only disabled entries"),
    sort: SortOrder = typer.Option(SortOrder.NAME_ASC, "--sort", help="Sort order"),  # noqa: B008
) -> None:
    """List autostart entries."""
    report = _manager(ctx).load()
    for failure in report.failures:
        typer.echo(f"Warning: skipped {failure.path}: {failure.error}", err=True)

    config = FilterConfig(
        show_enabled=enabled or not disabled,
        show_disabled=disabled or not enabled,
        show_user=user or not system,
        show_system=system or not user,
    )
    indices = visible_indices(report.entries, config, sort)
    if not indices:
        typer.echo("No entries to show")
        return
    for index in indices:
        entry = report.entries[index]
        typer.echo(
            f"{entry.status_label:<9} {entry.source.label:<7} {entry.file_name:<32} "
            f"{entry.name} — {entry.command}"
        )


@app.command()
def show(ctx: typer.Context, name: str = typer.Argument(..., help=_NAME_HELP)) -> None:
    """Show every managed field of one entry."""
    entry = _find(_manager(ctx), name)
    typer.echo(f"Name:    {entry.name}")
    typer.echo(f"Command: {entry.command}")
    typer.echo(f"Source:  {entry.source.label}")
    typer.echo(f"Status:  {entry.status_label}")
    typer.echo(f"File:    {entry.path}")
    if entry.comment:
        typer.echo(f"Comment: {entry.comment}")
    if entry.icon:
        typer.echo(f"Icon:    {entry.icon}")
    for locale, localized in sorted(entry.localized_names.items()):
        typer.echo(f"Name[{locale}]: {localized}")


@app.command()
def add(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Display name of the new entry"),
    command: str = typer.Argument(..., help="Command line to run at login"),
    comment: str = typer.Option("", "--comment", "-c", help="Description"),
) -> None:
    """Create a new user autostart entry."""
    result = _manager(ctx).create(EntryDraft(name=name, command=command, comment=comment))
    _report(result, f"Added {result.entry.path if result.entry else name}")


@app.command()
def enable(ctx: typer.Context, name: str = typer.Argument(..., help=_NAME_HELP)) -> None:
    """Enable an entry."""
    manager = _manager(ctx)
    entry = _find(manager, name)
    _report(manager.update(entry, Field.ENABLED, True), f"Enabled {entry.name}")


@app.command()
def disable(ctx: typer.Context, name: str = typer.Argument(..., help=_NAME_HELP)) -> None:
    """Disable an entry without deleting it."""
    manager = _manager(ctx)
    entry = _find(manager, name)
    _report(manager.update(entry, Field.ENABLED, False), f"Disabled {entry.name}")


@app.command()
def rename(
    ctx: typer.Context,
    name: str = typer.Argument(..., help=_NAME_HELP),
    new_name: str = typer.Argument(..., help="New display name"),
) -> None:
    """Change an entry's display name (its file follows the new name)."""
    manager = _manager(ctx)
    entry = _find(manager, name)
    result = manager.update(entry, Field.NAME, new_name)
    _report(result, f"Renamed {entry.name} to {new_name}")


@app.command("set-command")
def set_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help=_NAME_HELP),
    command: str = typer.Argument(..., help="New command line"),
) -> None:
    """Change the command an entry runs."""
    manager = _manager(ctx)
    entry = _find(manager, name)
    _report(manager.update(entry, Field.COMMAND, command), f"Updated {entry.name}")


@app.command()
def remove(
    ctx: typer.Context,
    name: str = typer.Argument(..., help=_NAME_HELP),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Delete a user autostart entry."""
    manager = _manager(ctx)
    entry = _find(manager, name)
    if not yes:
        typer.confirm(f"Delete {entry.name} ({entry.path})?", abort=True)
    _report(manager.delete(entry), f"Deleted {entry.name}")
