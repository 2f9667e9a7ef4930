"""
HTTP helpers shared by the locator and the watch engine.

Every httpx failure (connect, timeout, non-success status, bad URL)
leaves here as a TransportError.
"""

import httpx

from ...common.exceptions import TransportError


async def send_checked(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    **kwargs,
) -> httpx.Response:
    """Send a request and require a success status"""
    try:
        response = await client.request(method, url, **kwargs)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise TransportError(
            f"{method} {url} returned {e.response.status_code}",
            url=url,
            status_code=e.response.status_code,
        ) from e
    except httpx.HTTPError as e:
        raise TransportError(f"{method} {url} failed: {e!r}", url=url) from e
    except httpx.InvalidURL as e:
        # Refreshing the server address cannot repair a malformed host or port
        raise TransportError(f"invalid url {url}: {e}", url=url, recoverable=False) from e
    return response
