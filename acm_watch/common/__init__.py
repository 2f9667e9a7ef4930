"""
Common Utilities

Shared modules used across the watcher:
- config.py - Configuration dataclasses and YAML loading
- exceptions.py - Custom exception classes
- logging_setup.py - Structured logging setup
"""

from .config import (
    GroupIdentity,
    WatchSettings,
    WatchConfig,
    load_watch_config,
    validate_config,
)
from .exceptions import (
    AcmError,
    ConfigError,
    TransportError,
    AddressParseError,
    ProtocolError,
    WATCH_ERRORS,
)
from .logging_setup import (
    setup_logging,
    get_service_logger,
    set_log_level,
)

__all__ = [
    # Config
    "GroupIdentity",
    "WatchSettings",
    "WatchConfig",
    "load_watch_config",
    "validate_config",
    # Exceptions
    "AcmError",
    "ConfigError",
    "TransportError",
    "AddressParseError",
    "ProtocolError",
    "WATCH_ERRORS",
    # Logging
    "setup_logging",
    "get_service_logger",
    "set_log_level",
]
