"""
Server Locator

The address server maps a fixed logical host to whichever config server
is currently active. The answer can go stale, so the locator is called
again whenever the caller wants to refresh it.
"""

import threading
from ipaddress import IPv4Address

import httpx

from ...common.exceptions import AddressParseError
from ...common.logging_setup import get_service_logger
from .transport import send_checked

logger = get_service_logger("watch.locator")

ADDRESS_PATH = "/diamond-server/diamond"


def parse_server_address(text: str) -> IPv4Address:
    """Parse the first line of an address server response"""
    first_line = text.split("\n", 1)[0].strip()
    try:
        return IPv4Address(first_line)
    except ValueError as e:
        raise AddressParseError(first_line) from e


class ServerAddress:
    """Current config server address, replaceable while requests run"""

    def __init__(self, address: IPv4Address):
        self._lock = threading.Lock()
        self._address = address

    def get(self) -> IPv4Address:
        with self._lock:
            return self._address

    def replace(self, address: IPv4Address) -> IPv4Address:
        """Swap in a new address and return the previous one"""
        with self._lock:
            previous, self._address = self._address, address
            return previous


class ServerLocator:
    """Resolves the active config server through the address server"""

    def __init__(
        self,
        address_server: str,
        client: httpx.AsyncClient,
        timeout: float = 5.0,
    ):
        self.address_server = address_server
        self.timeout = timeout
        self._client = client

    @property
    def url(self) -> str:
        return f"http://{self.address_server}{ADDRESS_PATH}"

    async def resolve(self) -> IPv4Address:
        """
        Ask the address server for the current config server.

        Raises:
            TransportError: request failed or returned a non-success status
            AddressParseError: first response line is not an IPv4 address
        """
        response = await send_checked(self._client, "GET", self.url, timeout=self.timeout)
        address = parse_server_address(response.text)
        logger.debug(
            f"Address server {self.address_server} resolved to {address}",
            extra={"address_server": self.address_server, "server": str(address)},
        )
        return address
