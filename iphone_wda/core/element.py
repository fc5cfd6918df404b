"""Handle to a UI element returned by a locator query."""

from __future__ import annotations

from typing import Any

from .body import WDABody
from .errors import DecodeError
from .transport import Transport, url_join
from .types import Rect


# W3C WebDriver key for element references; older WDA builds use "ELEMENT"
W3C_ELEMENT_KEY = "element-6066-11e4-a52e-4f735466cecf"


def element_id_of(value: Any) -> str:
    """Extract the element id from a ``{"ELEMENT": id}`` reference ("" if absent)."""
    if not isinstance(value, dict):
        return ""
    eid = value.get("ELEMENT") or value.get(W3C_ELEMENT_KEY) or ""
    return str(eid)


class Element:
    """A UI element, addressed by ``<session url>/element/<id>``.

    The handle becomes invalid when its session ends or the element leaves
    the UI tree; WDA then answers with a ``stale element reference`` error.
    """

    def __init__(self, transport: Transport, session_url: str, element_id: str):
        self._transport = transport
        self._id = element_id
        self._url = url_join(session_url, "element", element_id)

    @property
    def id(self) -> str:
        return self._id

    @property
    def url(self) -> str:
        return self._url

    def __repr__(self) -> str:
        return f"Element({self._url!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Element) and other._url == self._url

    def __hash__(self) -> int:
        return hash(self._url)

    def to_dict(self) -> dict:
        return {"id": self._id, "url": self._url}

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def click(self) -> None:
        self._transport.post("ElementClick", url_join(self._url, "click"))

    def clear(self) -> None:
        self._transport.post("ElementClear", url_join(self._url, "clear"))

    def send_keys(self, text: str) -> None:
        """Type text into the element, focusing it first."""
        body = WDABody().set_send_keys(text)
        self._transport.post("ElementSendKeys", url_join(self._url, "value"), body)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def text(self) -> str:
        r = self._transport.get("ElementText", url_join(self._url, "text"))
        return r.value if isinstance(r.value, str) else r.value_text()

    def rect(self) -> Rect:
        r = self._transport.get("ElementRect", url_join(self._url, "rect"))
        return Rect.from_value(r.value, r.value_text())

    def attribute(self, name: str) -> Any:
        """Raw value of an attribute such as ``label``, ``name`` or ``visible``."""
        r = self._transport.get("ElementAttribute", url_join(self._url, "attribute", name))
        return r.value

    def is_displayed(self) -> bool:
        return self._bool("ElementDisplayed", "displayed")

    def is_enabled(self) -> bool:
        return self._bool("ElementEnabled", "enabled")

    def _bool(self, name: str, path: str) -> bool:
        r = self._transport.get(name, url_join(self._url, path))
        if not isinstance(r.value, bool):
            raise DecodeError(f"{name}: expected a boolean, got {r.value_text()}", raw=r.raw)
        return r.value
