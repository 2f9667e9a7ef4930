"""
Watch Service - config change detection

Responsibilities:
- Resolve the active config server through the address server
- Long-poll for changes to the watched config ids
- Fetch changed content and track per-id fingerprints
"""

from .service import AcmWatcher
from .entries import EntryTable, fingerprint_of
from .locator import ServerAddress, ServerLocator, parse_server_address
from .codec import encode_probe, decode_change
from .signer import sign_headers, compute_signature

__all__ = [
    "AcmWatcher",
    "EntryTable",
    "fingerprint_of",
    "ServerAddress",
    "ServerLocator",
    "parse_server_address",
    "encode_probe",
    "decode_change",
    "sign_headers",
    "compute_signature",
]
