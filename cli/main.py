"""MCI CLI - Minecraft server instance manager command line interface."""
import logging
import sys
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.logging import RichHandler

from mci_core import api
from mci_core.config import get_config, get_config_manager, get_servers_dir
from mci_core.exceptions import MCIError, ValidationError
from mci_core.models import ServerType
from mci_core.properties import ServerProperties
from mci_core.utils import format_memory, parse_memory

logger = logging.getLogger("mci")

# Rich console for pretty output
console = Console()

# CLI app
app = typer.Typer(
    name="mci",
    help="MCI - Minecraft server instance manager",
    no_args_is_help=True,
)

# Sub-commands
server_app = typer.Typer(help="Server instance commands")
app.add_typer(server_app, name="server")

props_app = typer.Typer(help="server.properties commands")
app.add_typer(props_app, name="props")

ops_app = typer.Typer(help="Operator roster commands")
app.add_typer(ops_app, name="ops")

config_app = typer.Typer(help="Configuration commands")
app.add_typer(config_app, name="config")


@app.callback()
def setup_logging(
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Enable debug logging"),
):
    """MCI - Minecraft server instance manager."""
    level = logging.DEBUG if verbose else get_config().log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


def handle_error(e: Exception) -> None:
    """Handle and display errors nicely."""
    if isinstance(e, MCIError):
        console.print(f"[red]Error:[/red] {e}")
    else:
        console.print(f"[red]Unexpected error:[/red] {e}")
        logger.exception("Unexpected error")
    raise typer.Exit(1)


def _parse_assignment(assignment: str) -> tuple:
    if "=" not in assignment:
        raise ValidationError("property", f"Expected KEY=VALUE, got '{assignment}'")
    key, value = assignment.split("=", 1)
    return key.strip(), value.strip()


# ============================================================================
# Server Commands
# ============================================================================

@server_app.command("types")
def types_cmd():
    """List supported server types."""
    for server_type in ServerType.all_variants():
        console.print(f"  • {server_type.display_name()}")


@server_app.command("create")
def create_server_cmd(
    name: str = typer.Option(..., "--name", "-n", help="Server name"),
    server_type: str = typer.Option("paper", "--type", "-t", help="Server type (see 'mci server types')"),
    version: Optional[str] = typer.Option(None, "--version", "-v", help="Minecraft version"),
    memory: Optional[str] = typer.Option(None, "--memory", "-m", help="Memory allocation (e.g., 2G, 4096M)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Server port"),
):
    """Create a new server instance."""
    try:
        memory_mb = parse_memory(memory) if memory else None
        with console.status(f"Creating instance '{name}'..."):
            server = api.create_instance(name, server_type, version, port, memory_mb)

        console.print(f"[green]✓[/green] Instance '[bold]{server.name}[/bold]' created!")
        console.print(f"  ID: {server.id}")
        console.print(f"  Type: {server.server_type.display_name()}")
        console.print(f"  Version: {server.version}")
        console.print(f"  Memory: {format_memory(server.memory_mb)}")
        console.print(f"  Port: {server.port}")

    except Exception as e:
        handle_error(e)


@server_app.command("list")
def list_servers_cmd():
    """List all server instances."""
    try:
        servers = api.list_instances()

        if not servers:
            console.print("No instances found. Create one with: [cyan]mci server create --name my-server[/cyan]")
            return

        table = Table(title="Minecraft Server Instances")
        table.add_column("ID", style="dim")
        table.add_column("Name", style="cyan")
        table.add_column("Type", style="magenta")
        table.add_column("Version")
        table.add_column("Port")
        table.add_column("Memory")
        table.add_column("Status")

        for s in servers:
            table.add_row(
                s.id[:8],
                s.name,
                s.server_type.display_name(),
                s.version,
                str(s.port),
                format_memory(s.memory_mb),
                api.get_status(s.id).describe(),
            )

        console.print(table)

    except Exception as e:
        handle_error(e)


@server_app.command("info")
def info_server_cmd(instance: str = typer.Argument(..., help="Instance id, id prefix or name")):
    """Show the full record of an instance."""
    try:
        server = api.resolve_instance(instance)

        console.print(f"\n[bold]Instance: {server.name}[/bold]")
        console.print(f"  ID: {server.id}")
        console.print(f"  Type: {server.server_type.display_name()}")
        console.print(f"  Version: {server.version}")
        console.print(f"  Port: {server.port}")
        console.print(f"  Memory: {format_memory(server.memory_mb)}")
        console.print(f"  Jar: {server.jar_file}")
        console.print(f"  Path: {server.path}")
        console.print(f"  Status: {api.get_status(server.id).describe()}")

    except Exception as e:
        handle_error(e)


@server_app.command("status")
def status_server_cmd(instance: str = typer.Argument(..., help="Instance id, id prefix or name")):
    """Show the status of an instance."""
    try:
        server = api.resolve_instance(instance)
        console.print(f"{server.name}: {api.get_status(server.id).describe()}")

    except Exception as e:
        handle_error(e)


@server_app.command("rename")
def rename_server_cmd(
    instance: str = typer.Argument(..., help="Instance id, id prefix or name"),
    new_name: str = typer.Argument(..., help="New display name"),
):
    """Rename an instance."""
    try:
        server = api.resolve_instance(instance)
        server = api.update_instance(server.id, name=new_name)
        console.print(f"[green]✓[/green] Renamed to '[bold]{server.name}[/bold]'.")

    except Exception as e:
        handle_error(e)


@server_app.command("set")
def set_server_cmd(
    instance: str = typer.Argument(..., help="Instance id, id prefix or name"),
    version: Optional[str] = typer.Option(None, "--version", "-v", help="Minecraft version"),
    memory: Optional[str] = typer.Option(None, "--memory", "-m", help="Memory allocation"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Server port"),
    jar_file: Optional[str] = typer.Option(None, "--jar", help="Launch jar file name"),
):
    """Reconfigure an instance."""
    try:
        server = api.resolve_instance(instance)
        memory_mb = parse_memory(memory) if memory else None
        server = api.update_instance(
            server.id, version=version, port=port, memory_mb=memory_mb, jar_file=jar_file
        )
        console.print(f"[green]✓[/green] Instance '[bold]{server.name}[/bold]' updated.")

    except Exception as e:
        handle_error(e)


@server_app.command("delete")
def delete_server_cmd(
    instance: str = typer.Argument(..., help="Instance id, id prefix or name"),
    keep_files: bool = typer.Option(False, "--keep-files", "-k", help="Keep instance files on disk"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
):
    """Delete an instance and its directory."""
    try:
        server = api.resolve_instance(instance)
    except Exception as e:
        handle_error(e)

    if not force:
        confirm = typer.confirm(f"Are you sure you want to delete instance '{server.name}' ({server.id})?")
        if not confirm:
            console.print("Cancelled.")
            raise typer.Exit(0)

    try:
        api.delete_instance(server.id, keep_files=keep_files)
        console.print(f"[green]✓[/green] Instance '[bold]{server.name}[/bold]' deleted.")
        if keep_files:
            console.print(f"  Files kept at: {server.path}")

    except Exception as e:
        handle_error(e)


# ============================================================================
# Properties Commands
# ============================================================================

@props_app.command("show")
def props_show_cmd(instance: str = typer.Argument(..., help="Instance id, id prefix or name")):
    """Show the server.properties of an instance."""
    try:
        server = api.resolve_instance(instance)
        properties = api.get_properties(server.id)

        if not len(properties):
            console.print(f"No server.properties for '{server.name}' yet.")
            return

        table = Table(title=f"server.properties - {server.name}")
        table.add_column("Key", style="cyan")
        table.add_column("Value")
        for key in properties.keys():
            table.add_row(key, properties.get(key))
        console.print(table)

    except Exception as e:
        handle_error(e)


@props_app.command("get")
def props_get_cmd(
    instance: str = typer.Argument(..., help="Instance id, id prefix or name"),
    key: str = typer.Argument(..., help="Property key"),
):
    """Print one property value."""
    try:
        server = api.resolve_instance(instance)
        value = api.get_properties(server.id).get(key)
        if value is None:
            console.print(f"[yellow]{key} is not set[/yellow]")
            raise typer.Exit(1)
        console.print(value)

    except typer.Exit:
        raise
    except Exception as e:
        handle_error(e)


@props_app.command("set")
def props_set_cmd(
    instance: str = typer.Argument(..., help="Instance id, id prefix or name"),
    assignments: List[str] = typer.Argument(..., help="KEY=VALUE pairs"),
    no_validate: bool = typer.Option(False, "--no-validate", help="Skip schema validation"),
):
    """Set properties and save server.properties."""
    try:
        server = api.resolve_instance(instance)
        updates = dict(_parse_assignment(a) for a in assignments)
        api.update_properties(server.id, updates, validate=not no_validate)
        for key, value in updates.items():
            console.print(f"[green]✓[/green] {key}={value}")

    except Exception as e:
        handle_error(e)


@props_app.command("defaults")
def props_defaults_cmd():
    """Show the default values seeded into new instances."""
    table = Table(title="Common server.properties defaults")
    table.add_column("Key", style="cyan")
    table.add_column("Default")
    for key, value in ServerProperties.common_defaults():
        table.add_row(key, value)
    console.print(table)


# ============================================================================
# Ops Commands
# ============================================================================

@ops_app.command("list")
def ops_list_cmd(instance: str = typer.Argument(..., help="Instance id, id prefix or name")):
    """List the operators of an instance."""
    try:
        server = api.resolve_instance(instance)
        ops = api.get_ops(server.id)

        if not ops:
            console.print(f"No operators for '{server.name}'.")
            return

        table = Table(title=f"Operators - {server.name}")
        table.add_column("Name", style="cyan")
        table.add_column("UUID", style="dim")
        table.add_column("Level")
        table.add_column("Bypasses limit")
        for op in ops:
            table.add_row(op.name, op.uuid, str(op.level), "yes" if op.bypasses_player_limit else "no")
        console.print(table)

    except Exception as e:
        handle_error(e)


# ============================================================================
# Config Commands
# ============================================================================

@config_app.command("show")
def show_config_cmd():
    """Show current configuration."""
    config = get_config()
    console.print("\n[bold]MCI Configuration:[/bold]")
    for key, value in config.model_dump().items():
        console.print(f"  {key}: {value}")
    console.print(f"  (servers root: {get_servers_dir()})")


@config_app.command("path")
def config_path_cmd():
    """Show configuration file path."""
    manager = get_config_manager()
    console.print(f"Config file: {manager.config_path}")


# ============================================================================
# Root Commands
# ============================================================================

@app.command("version")
def version_cmd():
    """Show MCI version."""
    from mci_core import __version__
    console.print(f"MCI (Minecraft server instance manager) v{__version__}")


@app.command("info")
def info_cmd():
    """Show system information."""
    import platform
    from platform_adapters import get_adapter

    info = get_adapter().system_info()

    console.print("\n[bold]System Information:[/bold]")
    console.print(f"  Platform: {platform.system()} {platform.release()}")
    console.print(f"  Python: {platform.python_version()}")
    console.print(f"  CPU Cores: {info['cpu_count']}")
    console.print(f"  Memory: {info['memory_total_mb'] / 1024:.1f} GB ({info['memory_available_mb']} MB available)")
    console.print(f"  Servers Root: {get_servers_dir()}")


def main():
    """Main entry point."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[dim]Interrupted[/dim]")
        sys.exit(0)


if __name__ == "__main__":
    main()
