"""CLI command groups and the helpers they share."""

from __future__ import annotations

import click

from ..core import Session, WDAClient


def get_wda(ctx: click.Context) -> WDAClient:
    """WDA client for the URL given on the command line, closed with the context."""
    obj = ctx.find_root().obj
    if "wda" not in obj:
        wda = WDAClient(url=obj["wda_url"], timeout=obj["timeout"])
        ctx.find_root().call_on_close(wda.close)
        obj["wda"] = wda
    return obj["wda"]


def get_session(ctx: click.Context) -> Session:
    """Session named by --session-id, or the one WDA reports as active."""
    wda = get_wda(ctx)
    session_id = ctx.find_root().obj.get("session_id")
    if session_id:
        return wda.session(session_id)
    return wda.active_session()
