"""A live WebDriverAgent session.

Every method is one round trip to ``<wda url>/session/<id>/...``. Nothing is
cached: the only state a ``Session`` holds is its URL.

    session = WDAClient().new_session()
    session.app_launch("com.apple.Preferences")
    session.tap(200, 450)
    print(session.battery_info().state)
"""

from __future__ import annotations

import base64
import logging
from typing import Any, Optional

from . import helpers
from .body import AppLaunchOption, SourceOption, WDABody
from .element import Element, element_id_of
from .errors import DecodeError, InvalidArgument, NoSuchElement, ServerError
from .transport import Transport, WDAResponse, url_join
from .types import (
    ActiveAppInfo,
    AppBaseInfo,
    AppRunState,
    BatteryInfo,
    ContentType,
    DeviceButton,
    DeviceInfo,
    Screen,
    SessionInfo,
    Size,
)

logger = logging.getLogger(__name__)


class Session:
    """Client for the per-session WDA endpoints."""

    def __init__(self, transport: Transport, url: str):
        self._transport = transport
        self._url = url.rstrip("/")

    @property
    def url(self) -> str:
        return self._url

    @property
    def session_id(self) -> str:
        return self._url.rsplit("/", 1)[-1]

    def __repr__(self) -> str:
        return f"Session({self._url!r})"

    # ------------------------------------------------------------------
    # Session management
    # ------------------------------------------------------------------

    def get_active_session(self) -> SessionInfo:
        """Describe this session: bundle id, device kind, SDK version."""
        r = self._transport.get("GetActiveSession", self._url)
        return SessionInfo.from_value(r.value, r.value_text())

    def delete_session(self) -> None:
        """Delete the session and terminate the app under test.

        Deleting a session WDA no longer knows about is a no-op.
        """
        try:
            self._transport.delete("DeleteSession", self._url)
        except ServerError as e:
            if e.error != "invalid session id":
                raise
            logger.debug("DeleteSession: session %s already gone", self.session_id)

    # ------------------------------------------------------------------
    # App management
    # ------------------------------------------------------------------

    def app_launch(self, bundle_id: str, option: Optional[AppLaunchOption] = None) -> None:
        """Launch an app, or activate it if it is already running.

        Without ``option`` WDA waits for the app to become idle. The bundle id
        is not checked here; an unknown id is reported by WDA, which may need
        a new session afterwards.
        """
        if option is None:
            option = AppLaunchOption.default()
        body = WDABody().set_bundle_id(bundle_id).set_app_launch_option(option)
        self._transport.post("AppLaunch", self._path("/wda/apps/launch"), body)

    def app_terminate(self, bundle_id: str) -> bool:
        """Terminate an app. Returns False if it was not running."""
        body = WDABody().set_bundle_id(bundle_id)
        r = self._transport.post("AppTerminate", self._path("/wda/apps/terminate"), body)
        return bool(r.value)

    def app_activate(self, bundle_id: str) -> None:
        """Bring a backgrounded app to the foreground. No-op if already there."""
        body = WDABody().set_bundle_id(bundle_id)
        self._transport.post("AppActivate", self._path("/wda/apps/activate"), body)

    def app_deactivate(self, duration: Optional[float] = None) -> None:
        """Send the active app to the background for ``duration`` seconds."""
        body = WDABody()
        if duration is not None:
            body.set("duration", duration)
        self._transport.post("AppDeactivate", self._path("/wda/deactivateApp"), body)

    def app_state(self, bundle_id: str) -> AppRunState:
        body = WDABody().set_bundle_id(bundle_id)
        r = self._transport.post("AppState", self._path("/wda/apps/state"), body)
        if isinstance(r.value, bool) or not isinstance(r.value, int):
            raise DecodeError(f"AppState: expected an integer, got {r.value_text()}", raw=r.raw)
        try:
            return AppRunState(r.value)
        except ValueError as e:
            raise DecodeError(f"AppState: unknown app state {r.value_text()}", raw=r.raw) from e

    def active_app_info(self) -> ActiveAppInfo:
        return helpers.active_app_info(self._transport, self._url)

    def active_apps_list(self) -> list[AppBaseInfo]:
        """Apps currently on screen (several with iPad multitasking)."""
        r = self._transport.get("ActiveAppsList", self._path("/wda/apps/list"))
        value = r.value if r.value is not None else []
        if not isinstance(value, list):
            raise DecodeError(f"ActiveAppsList: expected a list, got {r.value_text()}", raw=r.raw)
        return [AppBaseInfo.from_value(item) for item in value]

    # ------------------------------------------------------------------
    # Touch actions
    # ------------------------------------------------------------------

    def tap(self, x: int, y: int) -> None:
        body = WDABody().set_xy(x, y)
        self._transport.post("Tap", self._path("/wda/tap/0"), body)

    def double_tap(self, x: int, y: int) -> None:
        body = WDABody().set_xy(x, y)
        self._transport.post("DoubleTap", self._path("/wda/doubleTap"), body)

    def touch_and_hold(self, x: int, y: int, duration: float = 1.0) -> None:
        """Press at a point for ``duration`` seconds."""
        body = WDABody().set_xy(x, y).set("duration", duration)
        self._transport.post("TouchAndHold", self._path("/wda/touchAndHold"), body)

    # ------------------------------------------------------------------
    # Text input
    # ------------------------------------------------------------------

    def send_keys(self, text: str) -> None:
        """Type text into the focused element. Use ``\\n`` to confirm.

        WDA may spend several seconds per character and does not report
        characters it failed to type.
        """
        body = WDABody().set_send_keys(text)
        self._transport.post("SendKeys", self._path("/wda/keys"), body)

    # ------------------------------------------------------------------
    # Elements
    # ------------------------------------------------------------------

    def find_element(self, using: str, value: str) -> Element:
        """Find the first element matching a locator.

        ``using`` is a WDA strategy: ``"name"``, ``"class name"``,
        ``"xpath"``, ``"predicate string"``, ``"class chain"`` and so on.
        """
        body = WDABody().set("using", using).set("value", value)
        try:
            r = self._transport.post("FindElement", self._path("/element"), body)
        except ServerError as e:
            if e.error == "no such element":
                raise NoSuchElement(f"no element matches {using}={value!r}") from e
            raise
        element_id = element_id_of(r.value)
        if not element_id:
            raise NoSuchElement(f"no element matches {using}={value!r}")
        return Element(self._transport, self._url, element_id)

    def find_elements(self, using: str, value: str) -> list[Element]:
        """Find every element matching a locator, in tree order."""
        body = WDABody().set("using", using).set("value", value)
        r = self._transport.post("FindElements", self._path("/elements"), body)
        results = r.value if r.value is not None else []
        if not isinstance(results, list):
            raise DecodeError(f"FindElements: expected a list, got {r.value_text()}", raw=r.raw)
        if not results:
            raise NoSuchElement(f"no element matches {using}={value!r}")
        elements = []
        for res in results:
            element_id = element_id_of(res)
            if not element_id:
                raise DecodeError(f"FindElements: no element id in {res!r}", raw=r.raw)
            elements.append(Element(self._transport, self._url, element_id))
        return elements

    # ------------------------------------------------------------------
    # Device state
    # ------------------------------------------------------------------

    def device_info(self) -> DeviceInfo:
        r = self._transport.get("DeviceInfo", self._path("/wda/device/info"))
        return DeviceInfo.from_value(r.value, r.value_text())

    def battery_info(self) -> BatteryInfo:
        r = self._transport.get("BatteryInfo", self._path("/wda/batteryInfo"))
        return BatteryInfo.from_value(r.value, r.value_text())

    def window_size(self) -> Size:
        """Size of the active window in points."""
        r = self._transport.get("WindowSize", self._path("/window/size"))
        return Size.from_value(r.value, r.value_text())

    def screen(self) -> Screen:
        r = self._transport.get("Screen", self._path("/wda/screen"))
        return Screen.from_value(r.value, r.value_text())

    def scale(self) -> float:
        return self.screen().scale

    def status_bar_size(self) -> Size:
        return self.screen().status_bar_size

    def is_locked(self) -> bool:
        return helpers.is_locked(self._transport, self._url)

    def lock(self) -> None:
        helpers.lock(self._transport, self._url)

    def unlock(self) -> None:
        helpers.unlock(self._transport, self._url)

    # ------------------------------------------------------------------
    # Pasteboard
    # ------------------------------------------------------------------

    def set_pasteboard(self, content_type: ContentType | str, encoded_content: str) -> None:
        """Put base64 encoded content on the general pasteboard."""
        try:
            content_type = ContentType(content_type)
        except ValueError as e:
            raise InvalidArgument(f"Unknown pasteboard content type {content_type!r}") from e
        body = WDABody()
        body.set("contentType", content_type.value)
        body.set("content", encoded_content)
        self._transport.post("SetPasteboard", self._path("/wda/setPasteboard"), body)

    def set_pasteboard_for_plaintext(self, content: str) -> None:
        encoded = base64.b64encode(content.encode("utf-8")).decode("ascii")
        self.set_pasteboard(ContentType.PLAINTEXT, encoded)

    def set_pasteboard_for_image(self, path: str) -> None:
        """Copy an image file to the pasteboard. Raises OSError if unreadable."""
        with open(path, "rb") as f:
            data = f.read()
        self.set_pasteboard(ContentType.IMAGE, base64.b64encode(data).decode("ascii"))

    def set_pasteboard_for_url(self, url: str) -> None:
        encoded = base64.urlsafe_b64encode(url.encode("utf-8")).decode("ascii")
        self.set_pasteboard(ContentType.URL, encoded)

    # ------------------------------------------------------------------
    # Hardware buttons
    # ------------------------------------------------------------------

    def press_button(self, name: DeviceButton | str) -> None:
        """Press a hardware button. Returns before the press has completed."""
        try:
            button = DeviceButton(name)
        except ValueError as e:
            raise InvalidArgument(f"Unknown device button {name!r}") from e
        body = WDABody().set("name", button.value)
        self._transport.post("PressButton", self._path("/wda/pressButton"), body)

    def press_home_button(self) -> None:
        self.press_button(DeviceButton.HOME)

    def press_volume_up_button(self) -> None:
        self.press_button(DeviceButton.VOLUME_UP)

    def press_volume_down_button(self) -> None:
        self.press_button(DeviceButton.VOLUME_DOWN)

    # ------------------------------------------------------------------
    # Siri
    # ------------------------------------------------------------------

    def siri_activate(self, text: str) -> None:
        """Start Siri voice recognition with ``text`` as the spoken request."""
        body = WDABody().set("text", text)
        self._transport.post("SiriActivate", self._path("/wda/siri/activate"), body)

    def siri_open_url(self, url: str) -> None:
        """Ask Siri to open a URL. Unreliable on recent WDA builds."""
        body = WDABody().set("url", url)
        self._transport.post("SiriOpenURL", self._path("/url"), body)

    # ------------------------------------------------------------------
    # UI tree
    # ------------------------------------------------------------------

    def source(self, option: Optional[SourceOption] = None) -> str:
        return helpers.source(self._transport, self._url, option)

    def accessible_source(self) -> str:
        return helpers.accessible_source(self._transport, self._url)

    # ------------------------------------------------------------------
    # Appium settings
    # ------------------------------------------------------------------

    def get_appium_settings(self) -> dict[str, Any]:
        r = self._transport.get("GetAppiumSettings", self._path("/appium/settings"))
        return self._settings(r)

    def set_appium_setting(self, key: str, value: Any) -> dict[str, Any]:
        return self.set_appium_settings({key: value})

    def set_appium_settings(self, settings: dict[str, Any]) -> dict[str, Any]:
        """Update settings; returns the full settings map after the change."""
        body = WDABody().set("settings", dict(settings))
        r = self._transport.post("SetAppiumSettings", self._path("/appium/settings"), body)
        return self._settings(r)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _path(self, path: str) -> str:
        return url_join(self._url, path)

    @staticmethod
    def _settings(r: WDAResponse) -> dict[str, Any]:
        if not isinstance(r.value, dict):
            raise DecodeError(f"AppiumSettings: expected an object, got {r.value_text()}", raw=r.raw)
        return r.value
