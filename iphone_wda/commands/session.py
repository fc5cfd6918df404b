"""Session commands: create, info, delete."""

from __future__ import annotations

import click

from ..output import output_json, to_dict
from . import get_session, get_wda


@click.group()
def session():
    """Manage WDA sessions."""
    pass


@session.command()
@click.option("--bundle-id", "-b", default=None, help="App to launch with the session")
@click.pass_context
def create(ctx, bundle_id: str | None):
    """Create a session and print its id.

    Export it to reuse the session in later commands:
        export WDA_SESSION_ID=$(iphone-wda session create | jq -r .session_id)
    """
    s = get_wda(ctx).new_session(bundle_id=bundle_id)
    output_json({"session_id": s.session_id, "url": s.url})


@session.command()
@click.pass_context
def info(ctx):
    """Describe the session: app, device kind, SDK version."""
    output_json(to_dict(get_session(ctx).get_active_session()))


@session.command()
@click.pass_context
def delete(ctx):
    """Delete the session and terminate its app."""
    s = get_session(ctx)
    s.delete_session()
    output_json({"action": "delete_session", "session_id": s.session_id, "status": "ok"})
