"""Main CLI entry point."""

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

import click

from huesync import __version__

from .commands import color, config, parse

logger = logging.getLogger(__name__)


def default_log_path() -> Path:
    from huesync.models.config import config_dir

    return config_dir() / "logs" / "huesync.log"


def configured_log_level(config_file: Optional[Path]) -> str:
    """Log level from the configuration file, WARNING when it is missing or invalid."""
    from huesync.exceptions import HueSyncError
    from huesync.models import AppConfig

    try:
        return AppConfig.load_or_default(config_file).log_level
    except HueSyncError:
        # Reported by the command that needs the configuration
        return "WARNING"


def setup_logging(
    verbose: int,
    debug: bool,
    log_file: Optional[Path],
    log_level: Optional[str],
    default_level: str = "WARNING",
) -> Path:
    """
    Configure logging for the application.

    Args:
        verbose: Verbosity count (0 = WARNING, 1 = INFO, 2+ = DEBUG)
        debug: If True, log at DEBUG to ./huesync-debug.log
        log_file: Custom log file path (optional)
        log_level: Explicit log level (DEBUG/INFO/WARNING/ERROR), overrides the verbosity flags
        default_level: Level used when neither flags nor `log_level` are given

    Returns:
        Path of the log file in use
    """
    if debug or verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = getattr(logging, default_level.upper())

    if log_level:
        level = getattr(logging, log_level.upper())

    if debug and not log_file:
        log_path = Path.cwd() / "huesync-debug.log"
    elif log_file:
        log_path = log_file
    else:
        log_path = default_log_path()

    log_path.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Keeps the last 5 files, 10MB each
    file_handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(file_handler)

    logger.info(f"Logging configured: level={logging.getLevelName(level)}, file={log_path}")
    return log_path


@click.group()
@click.pass_context
@click.version_option(version=__version__, prog_name="huesync")
@click.option(
    "--config-file",
    "-c",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Configuration file (default: $XDG_CONFIG_HOME/huesync/config.json)",
)
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v: INFO, -vv: DEBUG)")
@click.option("--debug", is_flag=True, help="Enable debug mode (DEBUG level, logs to ./huesync-debug.log)")
@click.option("--log-file", type=click.Path(path_type=Path), default=None, help="Custom log file path")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level (default: log_level from the configuration file)",
)
def cli(
    ctx,
    config_file: Optional[Path],
    verbose: int,
    debug: bool,
    log_file: Optional[Path],
    log_level: Optional[str],
):
    """
    huesync - smart-light state parsing, color math and bridge configuration.

    \b
    Examples:
      # See what a phrase turns into
      huesync parse "dim the bedroom to stormy dusk slowly"

      # Look up a named color or color temperature
      huesync color sunset
      huesync color "warm white"

      # Inspect configuration
      huesync config show
      huesync config validate
    """
    ctx.ensure_object(dict)
    ctx.obj["config_file"] = config_file
    ctx.obj["log_path"] = setup_logging(
        verbose, debug, log_file, log_level, default_level=configured_log_level(config_file)
    )


cli.add_command(parse)
cli.add_command(color)
cli.add_command(config)

if __name__ == "__main__":
    cli()
