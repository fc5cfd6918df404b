"""Typed payloads decoded from WDA responses.

Each dataclass keeps the JSON text it was decoded from in ``raw``;
``str()`` returns that text so a surprising payload can be inspected
without asking the device again.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any

from .errors import DecodeError
from .transport import to_json_text


def _object(value: Any, what: str, raw: str) -> dict:
    if not isinstance(value, dict):
        raise DecodeError(f"{what}: expected a JSON object, got {type(value).__name__}", raw=raw)
    return value


def _field(obj: dict, key: str, kind: type | tuple, default: Any, what: str, raw: str) -> Any:
    """Read ``obj[key]`` checking its JSON type. Missing keys and nulls give ``default``."""
    v = obj.get(key)
    if v is None:
        return default
    # bool is an int subclass, but JSON true is never a number
    if isinstance(v, bool) and bool not in (kind if isinstance(kind, tuple) else (kind,)):
        raise DecodeError(f"{what}: field {key!r} has unexpected type bool", raw=raw)
    if not isinstance(v, kind):
        raise DecodeError(f"{what}: field {key!r} has unexpected type {type(v).__name__}", raw=raw)
    return v


_NUMBER = (int, float)


# ------------------------------------------------------------------
# Enumerations
# ------------------------------------------------------------------

class BatteryState(IntEnum):
    UNPLUGGED = 1  # on battery, discharging
    CHARGING = 2  # plugged in, less than 100%
    FULL = 3  # plugged in, at 100%

    def __str__(self) -> str:
        return _BATTERY_STATE_NAMES[self]


_BATTERY_STATE_NAMES = {
    BatteryState.UNPLUGGED: "On battery, discharging",
    BatteryState.CHARGING: "Plugged in, less than 100%",
    BatteryState.FULL: "Plugged in, at 100%",
}


class AppRunState(IntEnum):
    """State of an application as reported by ``/wda/apps/state``.

    WDA encodes these as bit flags but only ever returns one of them.
    """
    NOT_RUNNING = 1
    RUNNING_BACK = 2
    RUNNING_FRONT = 4

    def __str__(self) -> str:
        return _APP_RUN_STATE_NAMES[self]


_APP_RUN_STATE_NAMES = {
    AppRunState.NOT_RUNNING: "Not Running",
    AppRunState.RUNNING_BACK: "Running (Back)",
    AppRunState.RUNNING_FRONT: "Running (Front)",
}


class ContentType(str, Enum):
    PLAINTEXT = "plaintext"
    IMAGE = "image"
    URL = "url"


class DeviceButton(str, Enum):
    HOME = "home"
    VOLUME_UP = "volumeUp"
    VOLUME_DOWN = "volumeDown"


# ------------------------------------------------------------------
# Session
# ------------------------------------------------------------------

@dataclass(frozen=True)
class SessionInfo:
    """Descriptor returned by ``GET /session/<id>``."""
    session_id: str
    bundle_id: str
    browser_name: str
    device: str
    sdk_version: str
    raw: str = field(default="", repr=False, compare=False)

    def __str__(self) -> str:
        return self.raw

    @classmethod
    def from_value(cls, value: Any, raw: str | None = None) -> SessionInfo:
        raw = raw if raw is not None else to_json_text(value)
        what = "SessionInfo"
        obj = _object(value, what, raw)
        caps = _object(obj.get("capabilities", {}), f"{what}.capabilities", raw)
        return cls(
            session_id=_field(obj, "sessionId", str, "", what, raw),
            bundle_id=_field(caps, "CFBundleIdentifier", str, "", what, raw),
            browser_name=_field(caps, "browserName", str, "", what, raw),
            device=_field(caps, "device", str, "", what, raw),
            sdk_version=_field(caps, "sdkVersion", str, "", what, raw),
            raw=raw,
        )


# ------------------------------------------------------------------
# Device
# ------------------------------------------------------------------

@dataclass(frozen=True)
class DeviceInfo:
    time_zone: str
    current_locale: str
    model: str
    uuid: str
    user_interface_idiom: int
    user_interface_style: str
    name: str
    is_simulator: bool
    raw: str = field(default="", repr=False, compare=False)

    def __str__(self) -> str:
        return self.raw

    @classmethod
    def from_value(cls, value: Any, raw: str | None = None) -> DeviceInfo:
        raw = raw if raw is not None else to_json_text(value)
        what = "DeviceInfo"
        obj = _object(value, what, raw)
        return cls(
            time_zone=_field(obj, "timeZone", str, "", what, raw),
            current_locale=_field(obj, "currentLocale", str, "", what, raw),
            model=_field(obj, "model", str, "", what, raw),
            uuid=_field(obj, "uuid", str, "", what, raw),
            user_interface_idiom=_field(obj, "userInterfaceIdiom", int, 0, what, raw),
            user_interface_style=_field(obj, "userInterfaceStyle", str, "", what, raw),
            name=_field(obj, "name", str, "", what, raw),
            is_simulator=_field(obj, "isSimulator", bool, False, what, raw),
            raw=raw,
        )


@dataclass(frozen=True)
class BatteryInfo:
    level: float  # 0.0 - 1.0
    state: BatteryState
    raw: str = field(default="", repr=False, compare=False)

    def __str__(self) -> str:
        return self.raw

    @classmethod
    def from_value(cls, value: Any, raw: str | None = None) -> BatteryInfo:
        raw = raw if raw is not None else to_json_text(value)
        what = "BatteryInfo"
        obj = _object(value, what, raw)
        code = _field(obj, "state", int, None, what, raw)
        try:
            state = BatteryState(code)
        except ValueError as e:
            raise DecodeError(f"{what}: unknown battery state {code!r}", raw=raw) from e
        return cls(
            level=float(_field(obj, "level", _NUMBER, 0.0, what, raw)),
            state=state,
            raw=raw,
        )


# ------------------------------------------------------------------
# Screen
# ------------------------------------------------------------------

@dataclass(frozen=True)
class Size:
    width: int
    height: int
    raw: str = field(default="", repr=False, compare=False)

    def __str__(self) -> str:
        return self.raw

    @classmethod
    def from_value(cls, value: Any, raw: str | None = None) -> Size:
        raw = raw if raw is not None else to_json_text(value)
        what = "Size"
        obj = _object(value, what, raw)
        return cls(
            width=_field(obj, "width", int, 0, what, raw),
            height=_field(obj, "height", int, 0, what, raw),
            raw=raw,
        )


@dataclass(frozen=True)
class Screen:
    status_bar_size: Size
    scale: float
    raw: str = field(default="", repr=False, compare=False)

    def __str__(self) -> str:
        return self.raw

    @classmethod
    def from_value(cls, value: Any, raw: str | None = None) -> Screen:
        raw = raw if raw is not None else to_json_text(value)
        what = "Screen"
        obj = _object(value, what, raw)
        # the nested size keeps its own text, not the whole screen payload
        status_bar = obj.get("statusBarSize")
        return cls(
            status_bar_size=Size.from_value(status_bar if status_bar is not None else {}),
            scale=float(_field(obj, "scale", _NUMBER, 0.0, what, raw)),
            raw=raw,
        )


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float
    raw: str = field(default="", repr=False, compare=False)

    def __str__(self) -> str:
        return self.raw

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    @classmethod
    def from_value(cls, value: Any, raw: str | None = None) -> Rect:
        raw = raw if raw is not None else to_json_text(value)
        what = "Rect"
        obj = _object(value, what, raw)
        return cls(
            x=_field(obj, "x", _NUMBER, 0, what, raw),
            y=_field(obj, "y", _NUMBER, 0, what, raw),
            width=_field(obj, "width", _NUMBER, 0, what, raw),
            height=_field(obj, "height", _NUMBER, 0, what, raw),
            raw=raw,
        )


# ------------------------------------------------------------------
# Apps
# ------------------------------------------------------------------

@dataclass(frozen=True)
class AppBaseInfo:
    pid: int
    bundle_id: str
    raw: str = field(default="", repr=False, compare=False)

    def __str__(self) -> str:
        return self.raw

    @classmethod
    def from_value(cls, value: Any, raw: str | None = None) -> AppBaseInfo:
        raw = raw if raw is not None else to_json_text(value)
        what = "AppBaseInfo"
        obj = _object(value, what, raw)
        return cls(
            pid=_field(obj, "pid", int, 0, what, raw),
            bundle_id=_field(obj, "bundleId", str, "", what, raw),
            raw=raw,
        )


@dataclass(frozen=True)
class ActiveAppInfo:
    """The foreground application.

    ``process_arguments`` is whatever WDA reports under ``processArguments``:
    usually ``{"env": {...}, "args": [...]}``.
    """
    pid: int
    bundle_id: str
    name: str
    process_arguments: dict = field(default_factory=dict)
    raw: str = field(default="", repr=False, compare=False)

    def __str__(self) -> str:
        return self.raw

    @classmethod
    def from_value(cls, value: Any, raw: str | None = None) -> ActiveAppInfo:
        raw = raw if raw is not None else to_json_text(value)
        what = "ActiveAppInfo"
        obj = _object(value, what, raw)
        return cls(
            pid=_field(obj, "pid", int, 0, what, raw),
            bundle_id=_field(obj, "bundleId", str, "", what, raw),
            name=_field(obj, "name", str, "", what, raw),
            process_arguments=_field(obj, "processArguments", dict, {}, what, raw),
            raw=raw,
        )
