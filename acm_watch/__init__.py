"""
ACM config watcher

Subscribe to configuration entries on an ACM / diamond config server and
get notified when any of them changes.
"""

from .common import (
    GroupIdentity,
    WatchSettings,
    AcmError,
    TransportError,
    AddressParseError,
    ProtocolError,
    WATCH_ERRORS,
)
from .services.watch import AcmWatcher

__version__ = "0.1.0"

__all__ = [
    "AcmWatcher",
    "GroupIdentity",
    "WatchSettings",
    "AcmError",
    "TransportError",
    "AddressParseError",
    "ProtocolError",
    "WATCH_ERRORS",
]
