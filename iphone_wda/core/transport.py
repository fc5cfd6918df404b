"""HTTP transport shared by the WDA client and its sessions.

Every WDA reply is a JSON object shaped like::

    {"value": <payload or error object>, "sessionId": "...", "status": 0}

``Transport`` issues the request and hands back a ``WDAResponse``. Failures
are translated once here so callers only ever see ``WDAError`` subclasses:

- connection problems become ``TransportError``
- bodies that are not a JSON object become ``DecodeError``
- an error embedded in the reply becomes ``ServerError``
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import requests

from .errors import DecodeError, ServerError, TransportError


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30

# longest string value a debug log line shows in full
LOG_VALUE_LIMIT = 200


def url_join(base: str, *parts: Any) -> str:
    """Append path segments to ``base`` with exactly one slash between them."""
    url = base.rstrip("/")
    for part in parts:
        part = str(part).strip("/")
        if part:
            url = f"{url}/{part}"
    return url


def to_json_text(value: Any) -> str:
    """Render a decoded payload back to text. Strings pass through unquoted."""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def summarize_body(body: Any) -> Any:
    """Copy of a request body for logging, with long strings cut short.

    Pasteboard bodies carry whole base64-encoded files.
    """
    if isinstance(body, dict):
        return {k: summarize_body(v) for k, v in body.items()}
    if isinstance(body, list):
        return [summarize_body(v) for v in body]
    if isinstance(body, str) and len(body) > LOG_VALUE_LIMIT:
        return f"{body[:LOG_VALUE_LIMIT]}...({len(body)} chars)"
    return body


class WDAResponse:
    """Decoded reply from WDA."""

    def __init__(self, raw: str, data: dict, status_code: int = 200):
        self.raw = raw
        self.data = data
        self.status_code = status_code

    def __repr__(self) -> str:
        return f"WDAResponse(status_code={self.status_code}, raw={self.raw!r})"

    @property
    def value(self) -> Any:
        return self.data.get("value")

    @property
    def session_id(self) -> str | None:
        return self.data.get("sessionId")

    def value_text(self) -> str:
        """JSON text of the ``value`` payload."""
        return to_json_text(self.value)

    @property
    def error(self) -> str | None:
        """Embedded error type, or None when the reply reports success."""
        value = self.value
        if isinstance(value, dict) and value.get("error"):
            return str(value["error"])
        status = self.data.get("status")
        if status not in (None, 0, "0"):
            return f"status {status}"
        return None

    @property
    def message(self) -> str | None:
        value = self.value
        if isinstance(value, dict):
            return value.get("message") or None
        if self.error and isinstance(value, str):
            return value or None
        return None

    def raise_for_error(self, name: str = "WDA") -> None:
        """Raise ``ServerError`` if the reply carries an embedded error."""
        error = self.error
        if error is None:
            return
        text = f"{name}: {error}"
        if self.message:
            text = f"{text}: {self.message}"
        raise ServerError(text, error=error, status_code=self.status_code, raw=self.raw)


class Transport:
    """Thin wrapper around ``requests.Session`` speaking the WDA envelope."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session or requests.Session()

    def close(self) -> None:
        self.session.close()

    def get(self, name: str, url: str, params: dict | None = None) -> WDAResponse:
        return self._request("GET", name, url, params=params)

    def post(self, name: str, url: str, body: dict | None = None) -> WDAResponse:
        return self._request("POST", name, url, body=body if body is not None else {})

    def delete(self, name: str, url: str) -> WDAResponse:
        return self._request("DELETE", name, url)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _request(
        self,
        method: str,
        name: str,
        url: str,
        params: dict | None = None,
        body: dict | None = None,
    ) -> WDAResponse:
        logger.debug("%s: %s %s body=%s", name, method, url, summarize_body(body))
        try:
            r = self.session.request(
                method, url, params=params, json=body, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise TransportError(f"{name}: cannot reach WDA at {url}: {e}") from e

        raw = r.text
        logger.debug("%s: status=%s response=%s", name, r.status_code, raw)

        if not raw.strip():
            data: Any = {}
        else:
            try:
                data = json.loads(raw)
            except ValueError as e:
                if r.status_code >= 400:
                    raise ServerError(
                        f"{name}: HTTP {r.status_code}: {raw}",
                        status_code=r.status_code,
                        raw=raw,
                    ) from e
                raise DecodeError(f"{name}: response is not JSON", raw=raw) from e

        if not isinstance(data, dict):
            raise DecodeError(f"{name}: response is not a JSON object", raw=raw)

        resp = WDAResponse(raw, data, status_code=r.status_code)
        try:
            resp.raise_for_error(name)
        except ServerError:
            logger.warning("%s: server reported an error: %s", name, raw)
            raise
        if r.status_code >= 400:
            logger.warning("%s: HTTP %s: %s", name, r.status_code, raw)
            raise ServerError(
                f"{name}: HTTP {r.status_code}", status_code=r.status_code, raw=raw
            )
        return resp
