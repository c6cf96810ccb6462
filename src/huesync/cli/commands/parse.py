"""Parse command implementation."""

import json

import click

from huesync.parsing import is_atmospheric
from huesync.parsing import parse as parse_phrase


@click.command(name="parse")
@click.argument("text")
def parse(text: str):
    """Show the device state a phrase describes and the payload a bridge would receive."""
    state = parse_phrase(text)
    payload = state.resolve_for_write()

    result = {
        "state": state.model_dump(mode="json", exclude_none=True),
        "payload": payload.model_dump(mode="json", exclude_none=True),
        "atmospheric": is_atmospheric(text),
    }
    click.echo(json.dumps(result, indent=2))

    if state.is_empty():
        click.echo("No light state recognized in that phrase.", err=True)
