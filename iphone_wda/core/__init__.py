"""Core WebDriverAgent client: transport, session, element and payload types."""

from .body import AppLaunchOption, SourceOption, WDABody
from .element import Element
from .errors import (
    DecodeError,
    InvalidArgument,
    NoSuchElement,
    ServerError,
    TransportError,
    WDAError,
)
from .session import Session
from .transport import Transport, WDAResponse
from .types import (
    ActiveAppInfo,
    AppBaseInfo,
    AppRunState,
    BatteryInfo,
    BatteryState,
    ContentType,
    DeviceButton,
    DeviceInfo,
    Rect,
    Screen,
    SessionInfo,
    Size,
)
from .wda import DEFAULT_WDA_URL, WDAClient

__all__ = [
    "ActiveAppInfo",
    "AppBaseInfo",
    "AppLaunchOption",
    "AppRunState",
    "BatteryInfo",
    "BatteryState",
    "ContentType",
    "DEFAULT_WDA_URL",
    "DecodeError",
    "DeviceButton",
    "DeviceInfo",
    "Element",
    "InvalidArgument",
    "NoSuchElement",
    "Rect",
    "Screen",
    "ServerError",
    "Session",
    "SessionInfo",
    "Size",
    "SourceOption",
    "Transport",
    "TransportError",
    "WDABody",
    "WDAClient",
    "WDAError",
    "WDAResponse",
]
