"""
Request Signer

Builds the authentication headers sent with every config server request.
"""

import base64
import hashlib
import hmac
import time

from ...common.config import GroupIdentity

# How long (ms) the server may hold a long-poll open
LONG_PULLING_TIMEOUT_MS = "30000"


def current_timestamp_ms() -> int:
    """Unix time in milliseconds, never negative (clock before epoch -> elapsed)"""
    return int(abs(time.time()) * 1000)


def compute_signature(secret_key: str, namespace: str, group: str, timestamp: str) -> str:
    """base64(HMAC-SHA1(secret_key, "namespace+group+timestamp"))"""
    message = f"{namespace}+{group}+{timestamp}"
    digest = hmac.new(
        secret_key.encode("utf-8"),
        message.encode("utf-8"),
        hashlib.sha1,
    ).digest()
    return base64.b64encode(digest).decode("ascii")


def sign_headers(identity: GroupIdentity, timestamp_ms: int | None = None) -> dict[str, str]:
    """
    Build the signed header set for one request.

    Args:
        identity: Credentials and tenant/group being watched
        timestamp_ms: Fixed timestamp, mainly for tests (defaults to now)

    Returns:
        Header mapping ready to pass to httpx
    """
    if timestamp_ms is None:
        timestamp_ms = current_timestamp_ms()
    timestamp = str(timestamp_ms)

    return {
        "Spas-AccessKey": identity.access_key,
        "timeStamp": timestamp,
        "Spas-Signature": compute_signature(
            identity.secret_key, identity.namespace, identity.group, timestamp
        ),
        "longPullingTimeout": LONG_PULLING_TIMEOUT_MS,
    }
