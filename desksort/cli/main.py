"""Command line interface for DeskSort."""

import click
import json
import logging
from pathlib import Path
from rich.console import Console
from rich.table import Table
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TaskProgressColumn

from ..core.api import load_or_create_settings, load_settings, save_settings, scan_and_sort
from ..core.exceptions import (
    DeskSortError, ConfigurationError, ScanError, SettingsError, SettingsCorruptError,
    SettingsNotFoundError, ValidationError
)
from ..core.models import CATEGORY_TABLE, SortResult, category_names
from ..core.settings import SettingsStore, default_settings

console = Console()


@click.group()
@click.version_option(version="0.1.0")
@click.option('--config', '-c', type=click.Path(path_type=Path),
              help='Configuration file path')
@click.option('--log-level', type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR']),
              help='Set logging level (overrides config)')
@click.option('--log-file', type=click.Path(path_type=Path),
              help='Log file path (overrides config)')
@click.pass_context
def cli(ctx, config, log_level, log_file):
    """DeskSort - Sort desktop files into category folders."""
    from ..core.config import setup_config, LoggingConfig
    from ..core.logging_config import setup_logging

    config_manager = setup_config(config)
    app_config = config_manager.get_config()

    if log_level or log_file:
        logging_config = LoggingConfig(
            level=log_level or app_config.logging.level,
            file_path=log_file or app_config.logging.file_path,
            file_enabled=app_config.logging.file_enabled or bool(log_file),
            console_enabled=app_config.logging.console_enabled,
            format=app_config.logging.format,
            file_max_size_mb=app_config.logging.file_max_size_mb,
            file_backup_count=app_config.logging.file_backup_count
        )
        app_config.logging = logging_config

    setup_logging(app_config.logging)

    ctx.ensure_object(dict)
    ctx.obj['config'] = app_config
    ctx.obj['store'] = SettingsStore(app_config.paths.settings_file)


@cli.command()
@click.option("--source", "-s", type=click.Path(path_type=Path, file_okay=False),
              help="Directory to sort (default: configured source or the desktop)")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.option("--verbose", "-v", is_flag=True, help="Show progress and every moved entry")
@click.pass_context
def sort(ctx, source: Path, as_json: bool, verbose: bool):
    """Sort the desktop into category folders."""
    app_config = ctx.obj['config']
    store = ctx.obj['store']

    try:
        load_or_create_settings(store, app_config)
    except (SettingsError, ValidationError) as e:
        handle_cli_error(e, "loading settings")
        raise click.Abort()

    try:
        if verbose and not as_json:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                TaskProgressColumn(),
                console=console
            ) as progress:
                sort_task = progress.add_task("Sorting...", total=None)

                def on_progress(processed, total):
                    progress.update(sort_task, total=total, completed=processed)

                result = scan_and_sort(source, store, app_config, progress_callback=on_progress)
                progress.update(sort_task, description="Sort complete")
        else:
            result = scan_and_sort(source, store, app_config)
    except (ScanError, SettingsError, ConfigurationError) as e:
        handle_cli_error(e, "sort")
        raise click.Abort()

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _display_sort_result(result, verbose)

    if result.errors:
        ctx.exit(1)


@cli.command()
def categories():
    """List categories and the extensions they match."""
    table = Table(title="Categories")
    table.add_column("Category", style="bold cyan")
    table.add_column("Extensions")
    for category in CATEGORY_TABLE:
        table.add_row(category.name, ", ".join(category.extensions))
    console.print(table)


@cli.group()
def settings():
    """Show and edit category destinations."""
    pass


@settings.command("show")
@click.option("--json", "as_json", is_flag=True, help="Print the mapping as JSON")
@click.pass_context
def settings_show(ctx, as_json: bool):
    """Show the destination configured for each category."""
    store = ctx.obj['store']
    try:
        mapping = load_settings(store)
    except SettingsNotFoundError:
        console.print(f"[yellow]No settings saved yet at {store.path}.[/yellow]")
        console.print("Run [bold]desksort settings reset[/bold] to create the defaults.")
        return
    except SettingsError as e:
        handle_cli_error(e, "loading settings")
        raise click.Abort()

    if as_json:
        click.echo(json.dumps(mapping, indent=2))
        return

    table = Table(title="Destinations")
    table.add_column("Category", style="bold cyan")
    table.add_column("Extensions", style="dim")
    table.add_column("Destination")
    for category in CATEGORY_TABLE:
        destination = mapping.get(category.name) or "[dim]not configured[/dim]"
        table.add_row(category.name, ", ".join(category.extensions), destination)
    console.print(table)


@settings.command("set")
@click.argument("category", type=click.Choice(category_names()))
@click.argument("destination", type=click.Path(path_type=Path))
@click.pass_context
def settings_set(ctx, category: str, destination: Path):
    """Set the destination folder for CATEGORY."""
    _edit_settings(ctx, category, str(destination.expanduser().absolute()))


@settings.command("unset")
@click.argument("category", type=click.Choice(category_names()))
@click.pass_context
def settings_unset(ctx, category: str):
    """Stop sorting CATEGORY; its entries stay where they are."""
    _edit_settings(ctx, category, None)


@settings.command("reset")
@click.option("--yes", "-y", is_flag=True, help="Overwrite existing settings without asking")
@click.pass_context
def settings_reset(ctx, yes: bool):
    """Replace all destinations with the defaults."""
    app_config = ctx.obj['config']
    store = ctx.obj['store']

    if store.exists() and not yes:
        click.confirm(f"Overwrite the settings in {store.path}?", abort=True)

    mapping = default_settings(app_config.paths.sorted_root)
    try:
        save_settings(mapping, store)
    except (SettingsError, ValidationError) as e:
        handle_cli_error(e, "saving settings")
        raise click.Abort()
    console.print(f"[bold green]✓ Default settings written[/bold green] to {store.path}")


@settings.command("path")
@click.pass_context
def settings_path(ctx):
    """Print the location of the settings document."""
    click.echo(str(ctx.obj['store'].path))


def _edit_settings(ctx, category: str, destination):
    app_config = ctx.obj['config']
    store = ctx.obj['store']
    try:
        mapping = load_or_create_settings(store, app_config)
        if destination is None:
            mapping.pop(category, None)
        else:
            mapping[category] = destination
        save_settings(mapping, store)
    except (SettingsError, ValidationError) as e:
        handle_cli_error(e, "saving settings")
        raise click.Abort()

    if destination is None:
        console.print(f"[bold green]✓[/bold green] {category} is no longer sorted")
    else:
        console.print(f"[bold green]✓[/bold green] {category} -> {destination}")


def _display_sort_result(result: SortResult, verbose: bool) -> None:
    """Render a sort result."""
    if result.errors:
        console.print(f"\n[bold yellow]Sorting completed with {result.error_count} errors[/bold yellow]")
    else:
        console.print(f"\n[bold green]✓ Successfully moved {result.moved_count} items[/bold green]"
                      f" in {result.duration:.2f} seconds")

    if result.moved:
        table = Table(title=f"Moved {result.moved_count} items")
        table.add_column("Name", style="bold")
        table.add_column("Category", style="cyan")
        table.add_column("Destination")
        shown = result.moved if verbose else result.moved[:20]
        for entry in shown:
            table.add_row(entry.name, entry.category, str(entry.destination))
        console.print(table)
        if len(result.moved) > len(shown):
            console.print(f"  [dim]... and {len(result.moved) - len(shown)} more (use --verbose)[/dim]")

    if result.errors:
        table = Table(title=f"Encountered {result.error_count} errors")
        table.add_column("Name", style="bold")
        table.add_column("Reason", style="red")
        for error in result.errors:
            table.add_row(error.name, error.reason)
        console.print(table)


def handle_cli_error(error: Exception, operation: str = "operation") -> None:
    """
    Handle CLI errors with appropriate user feedback.

    Args:
        error: The exception that occurred
        operation: Description of the operation that failed
    """
    if isinstance(error, SettingsCorruptError):
        console.print(f"[bold red]Settings Error:[/bold red] {error}")
        console.print("[yellow]Fix the file by hand, or run 'desksort settings reset' to replace it with defaults.[/yellow]")
    elif isinstance(error, SettingsNotFoundError):
        console.print(f"[bold red]Settings Error:[/bold red] {error}")
        console.print("[yellow]Run 'desksort settings reset' to create the default settings.[/yellow]")
    elif isinstance(error, SettingsError):
        console.print(f"[bold red]Settings Error:[/bold red] {error}")
        console.print("[yellow]Please check that the settings directory is readable and writable.[/yellow]")
    elif isinstance(error, ScanError):
        console.print(f"[bold red]Scan Error:[/bold red] {error}")
        console.print("[yellow]Please check that the source directory exists and is readable.[/yellow]")
    elif isinstance(error, ValidationError):
        console.print(f"[bold red]Invalid Settings:[/bold red] {error}")
    elif isinstance(error, DeskSortError):
        console.print(f"[bold red]Error:[/bold red] {error}")
    else:
        console.print(f"[bold red]Unexpected Error:[/bold red] {error}")
        console.print("[yellow]An unexpected error occurred. Please check the logs for more details.[/yellow]")

    logging.getLogger(__name__).error(f"CLI error in {operation}: {error}", exc_info=True)


if __name__ == "__main__":
    cli()
