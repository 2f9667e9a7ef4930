"""
Entry Table

Tracks the last acknowledged fingerprint of every watched config id.
Each entry carries its own lock so that reading one fingerprint never
waits on an update to another. The id set is fixed at construction.
"""

import hashlib
import threading
from typing import Iterable, Iterator


def fingerprint_of(content: bytes) -> str:
    """MD5 hex digest used as the change-detection token"""
    return hashlib.md5(content).hexdigest()


class _Entry:
    __slots__ = ("lock", "fingerprint")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.fingerprint = ""


class EntryTable:
    """
    config-id -> fingerprint, one lock per id.

    Fingerprints start empty, which tells the server we have never seen
    the entry and makes it report the entry on the first poll.
    """

    def __init__(self, ids: Iterable[str]):
        if isinstance(ids, (str, bytes)):
            raise TypeError(f"ids must be a collection of config ids, not a single {type(ids).__name__}")
        # Duplicate ids collapse onto one entry
        self._entries: dict[str, _Entry] = {data_id: _Entry() for data_id in ids}

    def __contains__(self, data_id: object) -> bool:
        return data_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def key_for(self, data_id: str) -> str | None:
        """Return data_id if it is tracked, else None"""
        return data_id if data_id in self._entries else None

    def get(self, data_id: str) -> str:
        """Fingerprint for data_id (KeyError if not tracked)"""
        entry = self._entries[data_id]
        with entry.lock:
            return entry.fingerprint

    def set(self, data_id: str, fingerprint: str) -> None:
        """Replace the fingerprint for data_id (KeyError if not tracked)"""
        entry = self._entries[data_id]
        with entry.lock:
            entry.fingerprint = fingerprint

    def update(self, data_id: str, content: bytes) -> str:
        """Store the fingerprint of freshly fetched content and return it"""
        fingerprint = fingerprint_of(content)
        self.set(data_id, fingerprint)
        return fingerprint

    def items(self) -> list[tuple[str, str]]:
        """(id, fingerprint) pairs; each value read under its own lock"""
        pairs = []
        for data_id, entry in self._entries.items():
            with entry.lock:
                pairs.append((data_id, entry.fingerprint))
        return pairs
