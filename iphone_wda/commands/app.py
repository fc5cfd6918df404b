"""App commands: launch, terminate, activate, deactivate, state, active, list."""

from __future__ import annotations

import click

from ..core import AppLaunchOption
from ..output import output_json, to_dict
from . import get_session


def _parse_env(pairs: tuple[str, ...]) -> dict[str, str]:
    env = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {pair!r}", param_hint="--env")
        env[key] = value
    return env


@click.group()
def app():
    """Launch and inspect applications."""
    pass


@app.command()
@click.argument("bundle_id")
@click.option("--wait/--no-wait", default=True, help="Wait for the app to become idle (default: wait)")
@click.option("--arg", "args", multiple=True, help="Launch argument (repeatable)")
@click.option("--env", "env", multiple=True, help="Environment variable KEY=VALUE (repeatable)")
@click.pass_context
def launch(ctx, bundle_id: str, wait: bool, args: tuple[str, ...], env: tuple[str, ...]):
    """Launch an app by bundle ID."""
    option = AppLaunchOption().set_should_wait_for_quiescence(wait)
    if args:
        option.set_arguments(list(args))
    if env:
        option.set_environment(_parse_env(env))
    get_session(ctx).app_launch(bundle_id, option)
    output_json({"action": "launch", "bundle_id": bundle_id, "status": "ok"})


@app.command()
@click.argument("bundle_id")
@click.pass_context
def terminate(ctx, bundle_id: str):
    """Terminate an app by bundle ID."""
    terminated = get_session(ctx).app_terminate(bundle_id)
    output_json({"action": "terminate", "bundle_id": bundle_id, "terminated": terminated})


@app.command()
@click.argument("bundle_id")
@click.pass_context
def activate(ctx, bundle_id: str):
    """Bring a backgrounded app to the foreground."""
    get_session(ctx).app_activate(bundle_id)
    output_json({"action": "activate", "bundle_id": bundle_id, "status": "ok"})


@app.command()
@click.option("--duration", "-d", type=float, default=None, help="Seconds to stay in the background")
@click.pass_context
def deactivate(ctx, duration: float | None):
    """Send the active app to the background, then bring it back."""
    get_session(ctx).app_deactivate(duration)
    output_json({"action": "deactivate", "duration": duration, "status": "ok"})


@app.command()
@click.argument("bundle_id")
@click.pass_context
def state(ctx, bundle_id: str):
    """Show whether an app is running."""
    run_state = get_session(ctx).app_state(bundle_id)
    output_json({"bundle_id": bundle_id, "state": run_state.value, "description": str(run_state)})


@app.command()
@click.pass_context
def active(ctx):
    """Show the currently active app."""
    output_json(to_dict(get_session(ctx).active_app_info()))


@app.command(name="list")
@click.pass_context
def list_apps(ctx):
    """List the apps currently on screen."""
    output_json([to_dict(a) for a in get_session(ctx).active_apps_list()])
