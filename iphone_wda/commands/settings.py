"""Appium settings commands: get, set."""

from __future__ import annotations

import json

import click

from ..output import output_json
from . import get_session


@click.group()
def settings():
    """Read or change Appium settings of the session."""
    pass


@settings.command()
@click.pass_context
def get(ctx):
    """Show all settings."""
    output_json(get_session(ctx).get_appium_settings())


@settings.command(name="set")
@click.argument("key")
@click.argument("value")
@click.pass_context
def set_setting(ctx, key: str, value: str):
    """Change one setting. VALUE is parsed as JSON when possible.

        iphone-wda settings set snapshotMaxDepth 10
        iphone-wda settings set useFirstMatch true
    """
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError:
        parsed = value
    output_json(get_session(ctx).set_appium_setting(key, parsed))
