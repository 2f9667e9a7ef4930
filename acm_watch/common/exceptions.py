"""
Custom Exception Classes for the ACM watcher

Hierarchical exception structure for error handling across the client.
The watch engine only ever raises the three classes in WATCH_ERRORS.
"""


class AcmError(Exception):
    """Base exception for all ACM watcher errors"""

    def __init__(self, message: str, recoverable: bool = True):
        self.message = message
        self.recoverable = recoverable
        super().__init__(message)


class ConfigError(AcmError):
    """Local configuration errors (missing file, bad YAML, missing keys)"""

    def __init__(self, message: str, recoverable: bool = False):
        super().__init__(f"Config Error: {message}", recoverable)


class TransportError(AcmError):
    """Network, timeout or non-success status from any HTTP call"""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
        recoverable: bool = True,
    ):
        self.url = url
        self.status_code = status_code
        super().__init__(f"Transport Error: {message}", recoverable)


class AddressParseError(AcmError):
    """Address server returned something that is not an IPv4 address"""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"{value} is not a valid ipv4 address", recoverable=True)


class ProtocolError(AcmError):
    """Long-poll response could not be parsed at all"""

    def __init__(self, message: str, body: str | None = None):
        self.body = body
        super().__init__(f"Protocol Error: {message}", recoverable=True)


# Everything wait_for_new_config / refresh_acm_server can raise
WATCH_ERRORS = (TransportError, AddressParseError, ProtocolError)
