"""Pasteboard commands: text, image, url."""

from __future__ import annotations

import click

from ..output import output_error, output_json
from . import get_session


@click.group()
def pasteboard():
    """Set the device pasteboard."""
    pass


@pasteboard.command()
@click.argument("content")
@click.pass_context
def text(ctx, content: str):
    """Copy plain text to the pasteboard."""
    get_session(ctx).set_pasteboard_for_plaintext(content)
    output_json({"action": "pasteboard_set", "type": "plaintext", "status": "ok"})


@pasteboard.command()
@click.argument("path")
@click.pass_context
def image(ctx, path: str):
    """Copy an image file to the pasteboard."""
    try:
        get_session(ctx).set_pasteboard_for_image(path)
    except OSError as e:
        output_error(f"Cannot read image {path}: {e.strerror or e}")
    output_json({"action": "pasteboard_set", "type": "image", "path": path, "status": "ok"})


@pasteboard.command()
@click.argument("url")
@click.pass_context
def url(ctx, url: str):
    """Copy a URL to the pasteboard."""
    get_session(ctx).set_pasteboard_for_url(url)
    output_json({"action": "pasteboard_set", "type": "url", "status": "ok"})
