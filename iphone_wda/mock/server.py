"""Mock WebDriverAgent HTTP server.

Serves realistic canned replies for every endpoint the client speaks, so the
CLI and the test-suite can run without an iPhone. Every reply can be replaced
per route, and every request is recorded for inspection.

Usage:
    python -m iphone_wda.mock [--port 8100]
"""

from __future__ import annotations

import json
import signal
import sys
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Callable, Union
from urllib.parse import parse_qs, urlparse

DEFAULT_PORT = 8100
SESSION_ID = "8BF16568-832F-4A14-A137-FD0CA566FC64"
ELEMENT_IDS = ["0D000000-0000-0000-4B08-000000000000", "0E000000-0000-0000-4B08-000000000000"]
W3C_ELEMENT_KEY = "element-6066-11e4-a52e-4f735466cecf"

# A route answers with (status, payload) or with a callable taking the
# request body and returning (status, payload).
Reply = Union[tuple[int, Any], Callable[[dict], tuple[int, Any]]]


def _ok(value: Any = None) -> tuple[int, dict]:
    return 200, {"value": value, "sessionId": SESSION_ID}


def _error(error: str, message: str, status: int = 404) -> tuple[int, dict]:
    return status, {"value": {"error": error, "message": message, "traceback": ""}, "sessionId": SESSION_ID}


def _element_ref(element_id: str) -> dict:
    return {"ELEMENT": element_id, W3C_ELEMENT_KEY: element_id}


# ------------------------------------------------------------------
# Sample data
# ------------------------------------------------------------------

def _capabilities() -> dict:
    return {
        "device": "iphone",
        "browserName": "Settings",
        "sdkVersion": "17.4",
        "CFBundleIdentifier": "com.apple.Preferences",
    }


def _status() -> dict:
    return {
        "value": {
            "message": "WebDriverAgent is ready to accept commands",
            "state": "success",
            "os": {"name": "iOS", "version": "17.4", "sdkVersion": "17.4"},
            "ios": {"ip": "192.168.1.20"},
            "ready": True,
            "build": {"productBundleIdentifier": "com.facebook.WebDriverAgentRunner"},
        },
        "sessionId": SESSION_ID,
    }


def _device_info() -> dict:
    return {
        "timeZone": "GMT+0800",
        "currentLocale": "en_US",
        "model": "iPhone",
        "uuid": "6A1E1F9B-5C2E-4E1D-9C55-8A3C0B7E2D11",
        "userInterfaceIdiom": 0,
        "userInterfaceStyle": "light",
        "name": "Mock iPhone",
        "isSimulator": False,
    }


def _active_app() -> dict:
    return {
        "pid": 3573,
        "bundleId": "com.apple.Preferences",
        "name": "",
        "processArguments": {"env": {}, "args": []},
    }


def _source_xml() -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<XCUIElementTypeApplication type="XCUIElementTypeApplication" name="Settings" label="Settings">'
        '<XCUIElementTypeButton type="XCUIElementTypeButton" name="General" label="General"/>'
        "</XCUIElementTypeApplication>"
    )


def _accessible_source() -> dict:
    return {
        "type": "Application",
        "label": "Settings",
        "children": [{"type": "Button", "label": "General", "name": "General"}],
    }


def default_routes(session_id: str = SESSION_ID) -> dict[tuple[str, str], Reply]:
    """Replies for every endpoint the client uses."""
    s = f"/session/{session_id}"
    e = f"{s}/element/{ELEMENT_IDS[0]}"
    routes: dict[tuple[str, str], Reply] = {
        ("GET", "/status"): (200, _status()),
        ("POST", "/session"): (200, {"value": {"sessionId": session_id, "capabilities": _capabilities()}, "sessionId": session_id}),
        ("GET", s): _ok({"sessionId": session_id, "capabilities": _capabilities()}),
        ("DELETE", s): _ok(None),
        # apps
        ("POST", f"{s}/wda/apps/launch"): _ok(None),
        ("POST", f"{s}/wda/apps/terminate"): _ok(True),
        ("POST", f"{s}/wda/apps/activate"): _ok(None),
        ("POST", f"{s}/wda/apps/state"): _ok(4),
        ("POST", f"{s}/wda/deactivateApp"): _ok(None),
        ("GET", f"{s}/wda/apps/list"): _ok([{"pid": 3573, "bundleId": "com.apple.Preferences"}]),
        # touch & keys
        ("POST", f"{s}/wda/tap/0"): _ok(None),
        ("POST", f"{s}/wda/doubleTap"): _ok(None),
        ("POST", f"{s}/wda/touchAndHold"): _ok(None),
        ("POST", f"{s}/wda/keys"): _ok(None),
        # elements
        ("POST", f"{s}/element"): _ok(_element_ref(ELEMENT_IDS[0])),
        ("POST", f"{s}/elements"): _ok([_element_ref(eid) for eid in ELEMENT_IDS]),
        ("POST", f"{e}/click"): _ok(None),
        ("POST", f"{e}/clear"): _ok(None),
        ("POST", f"{e}/value"): _ok(None),
        ("GET", f"{e}/text"): _ok("General"),
        ("GET", f"{e}/rect"): _ok({"x": 0, "y": 120, "width": 375, "height": 44}),
        ("GET", f"{e}/attribute/label"): _ok("General"),
        ("GET", f"{e}/displayed"): _ok(True),
        ("GET", f"{e}/enabled"): _ok(True),
        # device
        ("GET", f"{s}/wda/device/info"): _ok(_device_info()),
        ("GET", f"{s}/wda/batteryInfo"): _ok({"level": 0.92000001668930054, "state": 2}),
        ("GET", f"{s}/window/size"): _ok({"width": 375, "height": 812}),
        ("GET", f"{s}/wda/screen"): _ok({"statusBarSize": {"width": 375, "height": 44}, "scale": 3}),
        # pasteboard, buttons, siri
        ("POST", f"{s}/wda/setPasteboard"): _ok(None),
        ("POST", f"{s}/wda/pressButton"): _ok(None),
        ("POST", f"{s}/wda/siri/activate"): _ok(None),
        ("POST", f"{s}/url"): _ok(None),
        # settings
        ("GET", f"{s}/appium/settings"): _ok({"snapshotMaxDepth": 50, "useFirstMatch": False}),
    }
    # endpoints served both at the root and inside a session
    for prefix in ("", s):
        routes[("GET", f"{prefix}/wda/locked")] = _ok(False)
        routes[("POST", f"{prefix}/wda/lock")] = _ok(None)
        routes[("POST", f"{prefix}/wda/unlock")] = _ok(None)
        routes[("GET", f"{prefix}/source")] = _ok(_source_xml())
        routes[("GET", f"{prefix}/wda/accessibleSource")] = _ok(_accessible_source())
        routes[("GET", f"{prefix}/wda/activeAppInfo")] = _ok(_active_app())
    return routes


# ------------------------------------------------------------------
# Server
# ------------------------------------------------------------------

class MockWDAServer(ThreadingHTTPServer):
    """HTTP server holding the route table and a log of received requests."""

    daemon_threads = True

    def __init__(self, address: tuple[str, int], session_id: str = SESSION_ID, quiet: bool = True):
        super().__init__(address, MockHandler)
        self.session_id = session_id
        self.quiet = quiet
        self.routes = default_routes(session_id)
        self.requests: list[dict] = []
        self.settings: dict = {"snapshotMaxDepth": 50, "useFirstMatch": False}
        self.routes[("GET", f"/session/{session_id}/appium/settings")] = lambda body: _ok(dict(self.settings))
        self.routes[("POST", f"/session/{session_id}/appium/settings")] = self._update_settings

    @property
    def url(self) -> str:
        host, port = self.server_address[:2]
        return f"http://{host}:{port}"

    @property
    def session_url(self) -> str:
        return f"{self.url}/session/{self.session_id}"

    def set_reply(self, method: str, path: str, status: int, payload: Any) -> None:
        """Replace the whole JSON document returned for a route."""
        self.routes[(method, path)] = (status, payload)

    def set_value(self, method: str, path: str, value: Any) -> None:
        """Replace the ``value`` returned for a route, keeping the envelope."""
        self.routes[(method, path)] = _ok(value)

    def set_error(self, method: str, path: str, error: str, message: str = "", status: int = 500) -> None:
        self.routes[(method, path)] = _error(error, message, status)

    def last_request(self, method: str | None = None, path: str | None = None) -> dict:
        for req in reversed(self.requests):
            if method in (None, req["method"]) and path in (None, req["path"]):
                return req
        raise LookupError(f"no request recorded for {method} {path}")

    def _update_settings(self, body: dict) -> tuple[int, dict]:
        self.settings.update(body.get("settings") or {})
        return _ok(dict(self.settings))


class MockHandler(BaseHTTPRequestHandler):
    """Answers from the route table of its ``MockWDAServer``."""

    server: MockWDAServer

    def do_GET(self):
        self._dispatch("GET")

    def do_POST(self):
        self._dispatch("POST")

    def do_DELETE(self):
        self._dispatch("DELETE")

    def _dispatch(self, method: str):
        parsed = urlparse(self.path)
        path = parsed.path.rstrip("/") or "/"

        content_length = int(self.headers.get("Content-Length", 0))
        body: Any = {}
        if content_length > 0:
            raw = self.rfile.read(content_length)
            try:
                body = json.loads(raw)
            except json.JSONDecodeError:
                body = {}

        self.server.requests.append({
            "method": method,
            "path": path,
            "query": {k: v[0] for k, v in parse_qs(parsed.query).items()},
            "body": body,
        })

        reply = self.server.routes.get((method, path))
        if reply is None:
            status, payload = _error("unknown command", f"Unhandled endpoint: {path}")
        elif callable(reply):
            status, payload = reply(body)
        else:
            status, payload = reply
        self._json_response(payload, status=status)

    # --- Helpers ---

    def _json_response(self, data, status=200):
        if isinstance(data, bytes):
            body = data
        else:
            body = json.dumps(data, default=str).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        """Override to prefix with [mock]."""
        if not self.server.quiet:
            sys.stderr.write(f"[mock] {format % args}\n")


# ------------------------------------------------------------------
# Main
# ------------------------------------------------------------------

def main():
    import argparse

    parser = argparse.ArgumentParser(description="Mock WebDriverAgent server for iphone-wda")
    parser.add_argument("--host", default="127.0.0.1", help="Address to bind (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help=f"Port to listen on (default: {DEFAULT_PORT})")
    args = parser.parse_args()

    server = MockWDAServer((args.host, args.port), quiet=False)
    print(f"[mock] WDA server listening on {server.url}")
    print(f"[mock] Session: {server.session_id}")
    print("[mock] Press Ctrl+C to stop")

    def shutdown(sig, frame):
        print("\n[mock] Shutting down...")
        server.server_close()
        sys.exit(0)

    signal.signal(signal.SIGINT, shutdown)
    signal.signal(signal.SIGTERM, shutdown)

    try:
        server.serve_forever()
    except KeyboardInterrupt:
        shutdown(None, None)


if __name__ == "__main__":
    main()
