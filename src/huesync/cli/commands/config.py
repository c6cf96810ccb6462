"""Configuration commands.

Commands:
    - config path        # Print the configuration file location
    - config show        # Display the effective configuration
    - config validate    # Validate the configuration file
"""

import json
import sys
from pathlib import Path

import click

from huesync.exceptions import HueSyncError, format_error_for_display
from huesync.model_manager import PydanticPersistence
from huesync.models import AppConfig
from huesync.models.config import default_config_path


def _config_path(ctx: click.Context) -> Path:
    return (ctx.obj or {}).get("config_file") or default_config_path()


def _fail(error: Exception) -> None:
    user_message, recovery_hint = format_error_for_display(error)
    click.echo(f"ERROR: {user_message}", err=True)
    if recovery_hint:
        click.echo(f"\n{recovery_hint}", err=True)
    sys.exit(1)


@click.group(name="config")
def config():
    """Inspect huesync configuration."""
    pass


@config.command(name="path")
@click.pass_context
def config_path(ctx):
    """Print the configuration file location."""
    click.echo(str(_config_path(ctx)))


@config.command(name="show")
@click.option("--hide-credentials/--show-credentials", default=True, help="Mask bridge credentials (default: masked)")
@click.pass_context
def show(ctx, hide_credentials: bool):
    """Display the effective configuration (defaults when no file exists)."""
    path = _config_path(ctx)
    try:
        app_config = AppConfig.load_or_default(path)
    except HueSyncError as e:
        _fail(e)

    data = app_config.model_dump(mode="json")
    if hide_credentials:
        for bridge in data["bridges"]:
            if bridge.get("credential"):
                bridge["credential"] = "********"

    source = str(path) if path.exists() else f"{path} (not found, showing defaults)"
    click.echo(f"# {source}")
    click.echo(json.dumps(data, indent=2))


@config.command(name="validate")
@click.pass_context
def validate(ctx):
    """Validate the configuration file."""
    path = _config_path(ctx)
    if not path.exists():
        click.echo(f"No configuration file at {path}; defaults will be used.")
        return

    try:
        app_config = PydanticPersistence.load_json(path, AppConfig)
    except HueSyncError as e:
        _fail(e)

    enabled = len(app_config.enabled_bridges)
    click.echo(f"Configuration is valid: {len(app_config.bridges)} bridge(s), {enabled} enabled")
