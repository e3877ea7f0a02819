"""
CLI interface for Keel
"""
import json
import sys

import click
from rich import box
from rich.console import Console
from rich.table import Table

from ..core.bootstrap import CliBootstrap
from ..core.config import Config
from ..core.errors import KeelError

console = Console()


def _jsonable(value):
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return str(value)


def _bootstrap(services, config_path, local_config_path):
    """Run the CLI bootstrap, exiting with status 1 on failure"""
    bootstrap = CliBootstrap(
        list(services) if services is not None else None,
        config_path=config_path,
        local_config_path=local_config_path
    )
    try:
        return bootstrap.run()
    except KeelError as e:
        console.print(f"[bold red]Bootstrap failed:[/bold red] {e}")
        sys.exit(1)


@click.group()
def cli():
    """Keel - application bootstrap and service container"""
    pass


@cli.command()
@click.option('--host', default=None, help='Host to bind to')
@click.option('--port', default=None, type=int, help='Port to run the API server on')
def serve(host, port):
    """Run the HTTP server"""
    import uvicorn

    if not Config.validate():
        click.echo("Configuration validation failed. Check KEEL_CONFIG_PATH and KEEL_LOCAL_CONFIG_PATH.")
        sys.exit(1)

    host = host or Config.API_HOST
    port = port or Config.API_PORT
    click.echo(f"Starting Keel on {host}:{port} ({Config.ENV})")
    uvicorn.run("keel.api.server:app", host=host, port=port)


@cli.command()
@click.option('--service', 'services', multiple=True, help='Service to initialize (repeatable, keeps order)')
@click.option('--config', 'config_path', default=None, help='Base config file')
@click.option('--local-config', 'local_config_path', default=None, help='Local override config file')
@click.option('--resolve', is_flag=True, help='Resolve every service after bootstrapping')
def services(services, config_path, local_config_path, resolve):
    """Bootstrap and list the registered services"""
    container = _bootstrap(services or None, config_path, local_config_path)

    failed = False
    if resolve:
        for name in container.names():
            try:
                container.resolve(name)
            except KeelError as e:
                failed = True
                console.print(f"[red]{name}[/red]: {e}")

    table = Table(box=box.ROUNDED, title="Services")
    table.add_column("Name", style="cyan")
    table.add_column("Lifetime")
    table.add_column("Resolved")
    for name in container.names():
        entry = container.entry(name)
        table.add_row(name, entry.lifetime.value, "yes" if entry.resolved else "no")
    console.print(table)

    if failed:
        sys.exit(1)


@cli.command(name="config")
@click.argument('path', required=False)
@click.option('--config', 'config_path', default=None, help='Base config file')
@click.option('--local-config', 'local_config_path', default=None, help='Local override config file')
def show_config(path, config_path, local_config_path):
    """Print the merged config, or one value by dotted PATH"""
    container = _bootstrap([], config_path, local_config_path)
    config = container.resolve("config")

    missing = object()
    value = config.path(path, missing) if path else config
    if value is missing:
        click.echo(f"No config value at '{path}'", err=True)
        sys.exit(1)
    click.echo(json.dumps(value, indent=2, default=_jsonable))


if __name__ == '__main__':
    cli()
