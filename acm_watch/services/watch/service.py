"""
Watch Engine

Long-polls the config server for changes to a fixed set of config ids.

Flow per change:
1. POST the probe (every id with its last fingerprint), server holds up to 30s
2. Decode which id changed
3. GET that id's full content and record its new fingerprint

Nothing is retried here. On any error the caller should call
refresh_acm_server() before polling again, since an expired server
address is the usual cause. One polling loop per instance.
"""

from ipaddress import IPv4Address
from typing import Iterable

import httpx

from ...common.config import GroupIdentity, WatchSettings
from ...common.logging_setup import get_service_logger
from .codec import PROBE_FIELD, decode_change, encode_probe
from .entries import EntryTable
from .locator import ServerAddress, ServerLocator
from .signer import sign_headers
from .transport import send_checked

logger = get_service_logger("watch.service")

CONFIG_PATH = "/diamond-server/config.co"


class AcmWatcher:
    """
    Watches a set of config ids in one namespace/group.

    Build with ``await AcmWatcher.create(...)``; the initial config server
    address has to be resolved before the watcher is usable.
    """

    def __init__(
        self,
        address_server: str,
        identity: GroupIdentity,
        ids: Iterable[str],
        server_address: IPv4Address,
        client: httpx.AsyncClient,
        settings: WatchSettings | None = None,
        owns_client: bool = False,
    ):
        self.address_server = address_server
        self.identity = identity
        self.settings = settings or WatchSettings()
        self.entries = EntryTable(ids)
        self._client = client
        self._owns_client = owns_client
        self._server = ServerAddress(server_address)
        self._locator = ServerLocator(
            address_server, client, timeout=self.settings.resolve_timeout_s
        )

    @classmethod
    async def create(
        cls,
        address_server: str,
        identity: GroupIdentity,
        ids: Iterable[str],
        client: httpx.AsyncClient | None = None,
        settings: WatchSettings | None = None,
    ) -> "AcmWatcher":
        """
        Resolve the config server and start tracking ids.

        Args:
            address_server: host[:port] of the address server
            identity: Credentials and namespace/group to watch
            ids: Config ids (data ids) to watch
            client: Shared HTTP client; one is created (and owned) if omitted
            settings: Timeouts and server port

        Raises:
            TransportError / AddressParseError: initial resolve failed
            TypeError: ids is a single string instead of a collection
        """
        if isinstance(ids, (str, bytes)):
            raise TypeError("ids must be a collection of config ids, not a single string")
        ids = list(ids)
        settings = settings or WatchSettings()
        owns_client = client is None
        if client is None:
            client = httpx.AsyncClient()

        try:
            locator = ServerLocator(address_server, client, timeout=settings.resolve_timeout_s)
            server_address = await locator.resolve()
        except BaseException:
            if owns_client:
                await client.aclose()
            raise

        watcher = cls(
            address_server,
            identity,
            ids,
            server_address,
            client,
            settings=settings,
            owns_client=owns_client,
        )
        logger.info(
            f"Watching {len(watcher.entries)} config ids via {server_address}",
            extra={
                "server": str(server_address),
                "namespace": identity.namespace,
                "group": identity.group,
            },
        )
        return watcher

    async def __aenter__(self) -> "AcmWatcher":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Close HTTP client (only if the watcher created it)"""
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()

    @property
    def server_address(self) -> IPv4Address:
        return self._server.get()

    @property
    def ids(self) -> list[str]:
        return list(self.entries)

    def fingerprint(self, data_id: str) -> str:
        """Last acknowledged fingerprint of data_id"""
        return self.entries.get(data_id)

    async def wait_for_new_config(self) -> tuple[str, bytes]:
        """
        Block until one of the watched ids changes.

        Returns:
            (config id, raw config content)

        Raises:
            TransportError: any request failed
            ProtocolError: long-poll response could not be parsed
        """
        while True:
            data_id = await self._add_listener()
            if data_id is None:
                logger.debug(
                    f"No new config for namespace {self.identity.namespace!r} "
                    f"group {self.identity.group!r}",
                    extra={"namespace": self.identity.namespace, "group": self.identity.group},
                )
                continue

            content = await self._get_config(data_id)
            fingerprint = self.entries.update(data_id, content)
            logger.info(
                f"Config {data_id} changed ({len(content)} bytes)",
                extra={"data_id": data_id, "fingerprint": fingerprint},
            )
            return data_id, content

    async def refresh_acm_server(self) -> None:
        """
        Re-resolve the config server address.

        Requests already in flight keep the address they started with.
        """
        address = await self._locator.resolve()
        previous = self._server.replace(address)
        logger.info(
            f"Config server refreshed: {previous} -> {address}",
            extra={"server": str(address), "previous_server": str(previous)},
        )

    def _config_url(self) -> str:
        """URL of the config endpoint on the current server (read once)"""
        return f"http://{self._server.get()}:{self.settings.server_port}{CONFIG_PATH}"

    async def _add_listener(self) -> str | None:
        """Send the long-poll probe and decode which id (if any) changed"""
        probe = encode_probe(self.entries, self.identity.group, self.identity.namespace)
        response = await send_checked(
            self._client,
            "POST",
            self._config_url(),
            data={PROBE_FIELD: probe},
            headers=sign_headers(self.identity),
            timeout=self.settings.poll_timeout_s,
        )
        return decode_change(
            response.text,
            self.entries,
            self.identity.group,
            self.identity.namespace,
        )

    async def _get_config(self, data_id: str) -> bytes:
        """Fetch the full content of one config id"""
        response = await send_checked(
            self._client,
            "GET",
            self._config_url(),
            params={
                "tenant": self.identity.namespace,
                "group": self.identity.group,
                "dataId": data_id,
            },
            headers=sign_headers(self.identity),
            timeout=self.settings.fetch_timeout_s,
        )
        return response.content
