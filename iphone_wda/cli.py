"""CLI entry point for iphone-wda.

Usage:
    iphone-wda status
    iphone-wda session create [--bundle-id ID]
    iphone-wda tap <x> <y>
    iphone-wda long-press <x> <y> [--duration 1.0]
    iphone-wda type <text>
    iphone-wda key <button>
    iphone-wda find <using> <value> [--all]
    iphone-wda app launch <bundle_id>
    iphone-wda battery
    iphone-wda pasteboard text <content>
    iphone-wda settings set <key> <value>

Commands that need a session use --session-id / WDA_SESSION_ID, or the
session WDA currently reports as active.
"""

from __future__ import annotations

import logging

import click

from .commands import get_session, get_wda
from .commands.app import app
from .commands.pasteboard import pasteboard
from .commands.session import session
from .commands.settings import settings
from .core import DEFAULT_WDA_URL, NoSuchElement, SourceOption, WDAError
from .core.transport import DEFAULT_TIMEOUT
from .output import err_console, output_error, output_json, to_dict


class WDAGroup(click.Group):
    """Reports client errors as JSON instead of a traceback."""

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except WDAError as e:
            output_error(str(e))


def _setup_logging(verbose: bool):
    if not verbose:
        return
    from rich.logging import RichHandler

    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


@click.group(cls=WDAGroup)
@click.option("--wda-url", envvar="WDA_URL", default=DEFAULT_WDA_URL, help="WDA server URL")
@click.option("--session-id", envvar="WDA_SESSION_ID", default=None, help="WDA session id (default: active session)")
@click.option("--timeout", envvar="WDA_TIMEOUT", type=float, default=DEFAULT_TIMEOUT, help="HTTP timeout in seconds")
@click.option("--verbose", "-v", is_flag=True, help="Log every WDA request to stderr")
@click.pass_context
def main(ctx, wda_url: str, session_id: str | None, timeout: float, verbose: bool):
    """iphone-wda: drive an iPhone through WebDriverAgent."""
    _setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["wda_url"] = wda_url
    ctx.obj["session_id"] = session_id
    ctx.obj["timeout"] = timeout


main.add_command(app)
main.add_command(pasteboard)
main.add_command(session)
main.add_command(settings)


@main.command()
@click.pass_context
def status(ctx):
    """Check WDA server status."""
    output_json(get_wda(ctx).status())


# ------------------------------------------------------------------
# Touch actions
# ------------------------------------------------------------------

@main.command()
@click.argument("x", type=int)
@click.argument("y", type=int)
@click.pass_context
def tap(ctx, x: int, y: int):
    """Tap at coordinates."""
    get_session(ctx).tap(x, y)
    output_json({"action": "tap", "x": x, "y": y, "status": "ok"})


@main.command(name="double-tap")
@click.argument("x", type=int)
@click.argument("y", type=int)
@click.pass_context
def double_tap(ctx, x: int, y: int):
    """Double tap at coordinates."""
    get_session(ctx).double_tap(x, y)
    output_json({"action": "double_tap", "x": x, "y": y, "status": "ok"})


@main.command(name="long-press")
@click.argument("x", type=int)
@click.argument("y", type=int)
@click.option("--duration", "-d", type=float, default=1.0)
@click.pass_context
def long_press(ctx, x: int, y: int, duration: float):
    """Touch and hold at coordinates."""
    get_session(ctx).touch_and_hold(x, y, duration)
    output_json({"action": "long_press", "x": x, "y": y, "duration": duration, "status": "ok"})


@main.command(name="type")
@click.argument("text")
@click.pass_context
def type_text(ctx, text: str):
    """Type text into the focused field."""
    get_session(ctx).send_keys(text)
    output_json({"action": "type", "text": text, "status": "ok"})


@main.command()
@click.argument("button", type=click.Choice(["home", "volume_up", "volume_down"]))
@click.pass_context
def key(ctx, button: str):
    """Press a hardware button."""
    s = get_session(ctx)
    match button:
        case "home": s.press_home_button()
        case "volume_up": s.press_volume_up_button()
        case "volume_down": s.press_volume_down_button()
    output_json({"action": "key", "button": button, "status": "ok"})


# ------------------------------------------------------------------
# UI elements
# ------------------------------------------------------------------

@main.command()
@click.argument("using")
@click.argument("value")
@click.option("--all", "find_all", is_flag=True, help="Return every match, not just the first")
@click.pass_context
def find(ctx, using: str, value: str, find_all: bool):
    """Find elements by locator.

    Strategies:
        - "name": accessibility id
        - "class name": element type (e.g., XCUIElementTypeButton)
        - "predicate string": NSPredicate
        - "class chain": XCUITest class chain
        - "xpath": XPath expression
    """
    s = get_session(ctx)
    try:
        if find_all:
            found = s.find_elements(using, value)
        else:
            found = [s.find_element(using, value)]
    except NoSuchElement:
        output_json({"using": using, "value": value, "matches": []})
        return
    output_json({"using": using, "value": value, "matches": [e.to_dict() for e in found]})


@main.command()
@click.option("--format", "fmt", type=click.Choice(["xml", "json", "description"]), default=None)
@click.option("--scope", default=None, help="Root element name (xml only)")
@click.option("--exclude", multiple=True, help="Attribute to leave out (xml only, repeatable)")
@click.pass_context
def source(ctx, fmt: str | None, scope: str | None, exclude: tuple[str, ...]):
    """Print the UI tree of the active app."""
    option = SourceOption()
    if fmt:
        option.set_format(fmt)
    if scope:
        option.set_scope(scope)
    if exclude:
        option.set_excluded_attributes(list(exclude))
    click.echo(get_session(ctx).source(option))


@main.command(name="accessible-source")
@click.pass_context
def accessible_source(ctx):
    """Print the accessibility tree of the main window."""
    click.echo(get_session(ctx).accessible_source())


# ------------------------------------------------------------------
# Device state
# ------------------------------------------------------------------

@main.command(name="device-info")
@click.pass_context
def device_info(ctx):
    """Show device information."""
    output_json(to_dict(get_session(ctx).device_info()))


@main.command()
@click.pass_context
def battery(ctx):
    """Show battery level and charging state."""
    output_json(to_dict(get_session(ctx).battery_info()))


@main.command(name="window-size")
@click.pass_context
def window_size(ctx):
    """Show the active window size in points."""
    output_json(to_dict(get_session(ctx).window_size()))


@main.command()
@click.pass_context
def screen(ctx):
    """Show screen scale and status bar size."""
    output_json(to_dict(get_session(ctx).screen()))


@main.command()
@click.pass_context
def locked(ctx):
    """Show whether the screen is locked."""
    output_json({"locked": get_wda(ctx).is_locked()})


@main.command()
@click.pass_context
def lock(ctx):
    """Lock the device."""
    get_wda(ctx).lock()
    output_json({"action": "lock", "status": "ok"})


@main.command()
@click.pass_context
def unlock(ctx):
    """Unlock the device."""
    get_wda(ctx).unlock()
    output_json({"action": "unlock", "status": "ok"})


# ------------------------------------------------------------------
# Siri
# ------------------------------------------------------------------

@main.command()
@click.argument("text")
@click.pass_context
def siri(ctx, text: str):
    """Ask Siri something."""
    get_session(ctx).siri_activate(text)
    output_json({"action": "siri", "text": text, "status": "ok"})


@main.command(name="open-url")
@click.argument("url")
@click.pass_context
def open_url(ctx, url: str):
    """Open a URL through Siri."""
    get_session(ctx).siri_open_url(url)
    output_json({"url": url, "status": "opened"})


if __name__ == "__main__":
    main()
