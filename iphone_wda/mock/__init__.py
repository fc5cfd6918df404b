"""Mock WebDriverAgent server for local runs and tests."""

from .server import ELEMENT_IDS, SESSION_ID, MockWDAServer

__all__ = ["ELEMENT_IDS", "MockWDAServer", "SESSION_ID"]
