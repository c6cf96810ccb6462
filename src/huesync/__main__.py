"""Allow running as ``python -m huesync``."""

from huesync.cli.main import cli

if __name__ == "__main__":
    cli()
