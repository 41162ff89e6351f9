"""CLI entry point for p4-bridge."""

import json
import logging
import os
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from p4_bridge import __version__
from p4_bridge.api import BridgeError, operations
from p4_bridge.api.context import BridgeContext
from p4_bridge.config.settings import Settings
from p4_bridge.utils.console import (
    log_error,
    log_info,
    log_success,
    log_warning,
)
from p4_bridge.utils.debug import DebugLogger

console = Console(stderr=True)


def configure_logging(settings: Settings) -> None:
    """Log to stderr, and additionally to a per-process file in debug mode."""
    log_level = logging.DEBUG if settings.debug else logging.INFO
    handlers = [logging.StreamHandler(sys.stderr)]

    if settings.debug:
        log_dir = settings.debug_log_dir
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / f"server-{os.getpid()}.log", mode='w', encoding='utf-8')
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))
        handlers.append(file_handler)

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True,
    )


def _settings(ctx: click.Context, **overrides) -> Settings:
    settings_kwargs = {k: v for k, v in overrides.items() if v is not None}
    if ctx.obj.get('debug'):
        settings_kwargs['debug'] = True
    if ctx.obj.get('data_dir'):
        settings_kwargs['data_dir'] = ctx.obj['data_dir']
    return Settings(**settings_kwargs)


@click.group()
@click.option('--debug', is_flag=True, help='Enable debug logging and JSON traces of every p4 invocation')
@click.option('--data-dir', type=click.Path(path_type=Path), help='Base directory for saved credentials and logs (default: ~/.p4-bridge)')
@click.version_option(version=__version__)
@click.pass_context
def main(ctx, debug: bool, data_dir: Optional[Path]) -> None:
    """p4-bridge - HTTP API for browsing a Perforce server from the browser.

    Lists workspaces, submitted changes, pending files and users by driving
    the p4 command-line client, and keeps one default login ticket so the
    dashboard does not need the password on every request.
    """
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug
    ctx.obj['data_dir'] = data_dir.expanduser().resolve() if data_dir else None


@main.command()
@click.option("--host", type=str, default=None, help="Interface to listen on (default: 0.0.0.0)")
@click.option("--port", type=int, default=None, help="Port to listen on (default: 4444)")
@click.pass_context
def serve(ctx, host: Optional[str], port: Optional[int]) -> None:
    """Run the HTTP API and the browser UI.

    Examples:

        \b
        $ p4-bridge serve
        $ p4-bridge --debug serve --port 8080
    """
    from p4_bridge.server.app import create_app

    settings = _settings(ctx, host=host, port=port)
    configure_logging(settings)
    if settings.debug:
        DebugLogger.configure(enabled=True, log_dir=settings.debug_log_dir)

    app = create_app(settings=settings)
    log_success(f"Server on http://localhost:{settings.port}")
    app.run(host=settings.host, port=settings.port, debug=False, threaded=True)


@main.command()
@click.argument("server", type=str)
@click.argument("user", type=str)
@click.option("--password", prompt=True, hide_input=True, help="Perforce password (prompted when omitted)")
@click.pass_context
def login(ctx, server: str, user: str, password: str) -> None:
    """Log in to SERVER as USER and save the ticket as the default credential.

    SERVER: Perforce server address, e.g. ssl:perforce.example.com:1666

    USER: Perforce user name
    """
    settings = _settings(ctx)
    configure_logging(settings)
    bridge = BridgeContext(settings=settings)

    log_info(f"Logging in to {server} as {user}...")
    try:
        operations.save_credentials(bridge, {"server": server, "user": user, "password": password})
    except BridgeError as e:
        log_error(f"Login failed: {e}")
        sys.exit(1)
    log_success(f"Saved credentials to {settings.credentials_path}")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Print the status as JSON on stdout")
@click.pass_context
def creds(ctx, as_json: bool) -> None:
    """Show the saved default credential (never the ticket itself)."""
    bridge = BridgeContext(settings=_settings(ctx))
    status = operations.get_credentials_status(bridge)

    if as_json:
        click.echo(json.dumps(status, indent=2))
        return

    if not status["saved"]:
        log_warning("No saved credentials. Use 'p4-bridge login SERVER USER' to save some.")
        return

    table = Table(title="Saved credentials")
    table.add_column("Server", style="cyan")
    table.add_column("User", style="green")
    table.add_column("Ticket", justify="center")
    table.add_column("Saved at", style="dim")
    table.add_row(
        status["server"],
        status["user"],
        "yes" if status["hasTicket"] else "no",
        status["savedAt"] or "-",
    )
    console.print(table)


@main.command(name="clear-creds")
@click.pass_context
def clear_creds(ctx) -> None:
    """Forget the saved default credential."""
    bridge = BridgeContext(settings=_settings(ctx))
    operations.clear_credentials(bridge)
    log_success("Cleared saved credentials")


if __name__ == "__main__":
    main()
