"""WebDriverAgent client for UI automation.

WDA runs as an app on the iPhone and exposes a REST API for:
- Launching and terminating apps
- Tapping and typing
- Reading device, battery and screen state
- Finding UI elements

The WDA server is typically at http://localhost:8100 after port-forwarding
via usbmuxd. ``WDAClient`` talks to the server root; everything that needs a
session goes through the ``Session`` it hands out.
"""

from __future__ import annotations

import logging
from typing import Optional

from . import helpers
from .body import AppLaunchOption, SourceOption
from .errors import DecodeError, NoSuchElement
from .session import Session
from .transport import DEFAULT_TIMEOUT, Transport, url_join
from .types import ActiveAppInfo


logger = logging.getLogger(__name__)

DEFAULT_WDA_URL = "http://localhost:8100"


class WDAClient:
    """Client for the WebDriverAgent REST API root."""

    def __init__(self, url: str = DEFAULT_WDA_URL, timeout: float = DEFAULT_TIMEOUT):
        self.url = url.rstrip("/")
        self.timeout = timeout
        self.transport = Transport(timeout=timeout)

    def __enter__(self) -> WDAClient:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        """Release pooled connections. Sessions created here stop working."""
        self.transport.close()

    # ------------------------------------------------------------------
    # Server
    # ------------------------------------------------------------------

    def status(self) -> dict:
        """Check WDA server status."""
        r = self.transport.get("Status", url_join(self.url, "/status"))
        return r.data

    # ------------------------------------------------------------------
    # Session management
    # ------------------------------------------------------------------

    def new_session(
        self,
        bundle_id: Optional[str] = None,
        option: Optional[AppLaunchOption] = None,
    ) -> Session:
        """Create a session, optionally launching ``bundle_id`` with it.

        ``option`` is sent as session capabilities with or without a bundle
        id. With a bundle id and no option the launch waits for quiescence.
        """
        caps: dict = {}
        if bundle_id:
            caps["bundleId"] = bundle_id
            if option is None:
                option = AppLaunchOption.default()
        if option is not None:
            caps.update(option)
        r = self.transport.post(
            "NewSession", url_join(self.url, "/session"), {"capabilities": {"alwaysMatch": caps}}
        )
        session_id = r.session_id
        if not session_id and isinstance(r.value, dict):
            session_id = r.value.get("sessionId")
        if not session_id:
            raise DecodeError("NewSession: WDA did not return a session id", raw=r.raw)
        logger.info("Created WDA session %s", session_id)
        return self.session(session_id)

    def session(self, session_id: str) -> Session:
        """Attach to an existing session without contacting the server."""
        return Session(self.transport, url_join(self.url, "session", session_id))

    def active_session(self) -> Session:
        """Attach to the session WDA reports as current in ``/status``."""
        session_id = self.status().get("sessionId")
        if not session_id:
            raise NoSuchElement("WDA has no active session")
        return self.session(session_id)

    # ------------------------------------------------------------------
    # Sessionless endpoints
    # ------------------------------------------------------------------

    def is_locked(self) -> bool:
        return helpers.is_locked(self.transport, self.url)

    def lock(self) -> None:
        helpers.lock(self.transport, self.url)

    def unlock(self) -> None:
        helpers.unlock(self.transport, self.url)

    def source(self, option: Optional[SourceOption] = None) -> str:
        return helpers.source(self.transport, self.url, option)

    def accessible_source(self) -> str:
        return helpers.accessible_source(self.transport, self.url)

    def active_app_info(self) -> ActiveAppInfo:
        return helpers.active_app_info(self.transport, self.url)
