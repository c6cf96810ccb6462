"""Color lookup command implementation."""

import click

from huesync.colors import (
    hsv_to_rgb,
    mireds_to_kelvin,
    parse_named_color,
    parse_named_color_temp,
    rgb_to_xy,
)


@click.command(name="color")
@click.argument("name")
def color(name: str):
    """Look up a named color or color temperature."""
    hsv = parse_named_color(name)
    mireds = parse_named_color_temp(name)

    if hsv is None and mireds is None:
        raise click.ClickException(f"Unknown color or color temperature: {name!r}")

    if hsv is not None:
        rgb = hsv_to_rgb(hsv.h, hsv.s, hsv.v)
        xy = rgb_to_xy(rgb)
        click.echo(f"Color: {name}")
        click.echo(f"  HSV: h={hsv.h:g} s={hsv.s:g} v={hsv.v:g}")
        click.echo(f"  RGB: {rgb.r}, {rgb.g}, {rgb.b} ({rgb.to_hex()})")
        click.echo(f"  xy:  {xy.x:.4f}, {xy.y:.4f}")

    if mireds is not None:
        click.echo(f"Color temperature: {name}")
        click.echo(f"  {mireds} mireds ({mireds_to_kelvin(mireds)}K)")
