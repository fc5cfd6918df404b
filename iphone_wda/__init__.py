"""iphone-wda: typed client for WebDriverAgent sessions.

Usage:
    from iphone_wda import WDAClient

    with WDAClient("http://localhost:8100") as wda:
        session = wda.new_session()
        session.app_launch("com.apple.mobilesafari")
        session.tap(200, 450)
"""

import logging

from .core import *  # noqa: F401,F403
from .core import __all__

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
