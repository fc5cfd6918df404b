"""Request body builders.

Bodies are plain dicts with chainable setters, so they can be handed
straight to ``requests`` as ``json=``::

    body = WDABody().set_bundle_id("com.apple.Preferences").set("duration", 2.0)
"""

from __future__ import annotations

from typing import Any

from .errors import InvalidArgument


class WDABody(dict):
    """Ordered field set for one outgoing call."""

    def set(self, key: str, value: Any) -> "WDABody":
        self[key] = value
        return self

    def set_bundle_id(self, bundle_id: str) -> "WDABody":
        return self.set("bundleId", bundle_id)

    def set_xy(self, x: int | float, y: int | float) -> "WDABody":
        return self.set("x", x).set("y", y)

    def set_send_keys(self, text: str) -> "WDABody":
        # WDA expects the text split into single characters
        return self.set("value", list(text))

    def set_app_launch_option(self, option: "AppLaunchOption") -> "WDABody":
        self.update(option)
        return self


class AppLaunchOption(dict):
    """Launch configuration for ``Session.app_launch``."""

    def set_should_wait_for_quiescence(self, wait: bool) -> "AppLaunchOption":
        """Wait for the app UI to go idle before returning."""
        self["shouldWaitForQuiescence"] = wait
        return self

    def set_arguments(self, args: list[str]) -> "AppLaunchOption":
        """Command line arguments. Only applied if the app was not running."""
        self["arguments"] = list(args)
        return self

    def set_environment(self, env: dict[str, str]) -> "AppLaunchOption":
        """Environment variables. Only applied if the app was not running."""
        self["environment"] = dict(env)
        return self

    @classmethod
    def default(cls) -> "AppLaunchOption":
        return cls().set_should_wait_for_quiescence(True)


SOURCE_FORMATS = ("xml", "json", "description")


class SourceOption(dict):
    """Query parameters for the ``/source`` endpoint."""

    def set_format(self, fmt: str) -> "SourceOption":
        if fmt not in SOURCE_FORMATS:
            raise InvalidArgument(
                f"Unknown source format {fmt!r}, expected one of {', '.join(SOURCE_FORMATS)}"
            )
        self["format"] = fmt
        return self

    def set_scope(self, scope: str) -> "SourceOption":
        """Name of the root element of the xml tree. Only honoured for xml."""
        self["scope"] = scope
        return self

    def set_excluded_attributes(self, attributes: list[str]) -> "SourceOption":
        """Attributes left out of the xml tree, e.g. ``["visible", "enabled"]``."""
        self["excluded_attributes"] = ",".join(attributes)
        return self
