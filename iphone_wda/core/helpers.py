"""Endpoints available both at the WDA root and inside a session.

``WDAClient`` and ``Session`` forward to these with their own base URL.
"""

from __future__ import annotations

from typing import Optional

from .body import SourceOption
from .errors import DecodeError
from .transport import Transport, url_join
from .types import ActiveAppInfo


def is_locked(transport: Transport, base_url: str) -> bool:
    """Check whether the screen is locked."""
    r = transport.get("IsLocked", url_join(base_url, "/wda/locked"))
    if not isinstance(r.value, bool):
        raise DecodeError(f"IsLocked: expected a boolean, got {r.value_text()}", raw=r.raw)
    return r.value


def lock(transport: Transport, base_url: str) -> None:
    """Switch the device to the lock screen.

    Returns immediately if it is already locked; WDA reports an error if the
    screen is still unlocked after its timeout.
    """
    transport.post("Lock", url_join(base_url, "/wda/lock"))


def unlock(transport: Transport, base_url: str) -> None:
    """Unlock the device. Same idempotency and timeout rules as ``lock``."""
    transport.post("Unlock", url_join(base_url, "/wda/unlock"))


def source(transport: Transport, base_url: str, option: Optional[SourceOption] = None) -> str:
    """Dump the UI tree of the active application.

    The text is passed through as returned: xml by default, a JSON document
    for ``format=json``, or a plain text description.
    """
    r = transport.get("Source", url_join(base_url, "/source"), params=dict(option or {}))
    return r.value_text()


def accessible_source(transport: Transport, base_url: str) -> str:
    """Accessibility tree of the main window, as JSON text."""
    r = transport.get("AccessibleSource", url_join(base_url, "/wda/accessibleSource"))
    return r.value_text()


def active_app_info(transport: Transport, base_url: str) -> ActiveAppInfo:
    r = transport.get("ActiveAppInfo", url_join(base_url, "/wda/activeAppInfo"))
    return ActiveAppInfo.from_value(r.value, r.value_text())
