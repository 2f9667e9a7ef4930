"""
Probe Wire Codec

Long-poll request body (one record per tracked id):
    id \\x02 group \\x02 fingerprint \\x02 namespace \\x01

Long-poll response body (one record per changed id, fingerprint omitted):
    id \\x02 group \\x02 namespace \\x01

The server percent-encodes the separators in its response (%02 / %01),
so the body is unquoted before it is split.
"""

from urllib.parse import unquote

from ...common.exceptions import ProtocolError
from ...common.logging_setup import get_service_logger
from .entries import EntryTable

logger = get_service_logger("watch.codec")

FIELD_SEPARATOR = "\x02"
RECORD_SEPARATOR = "\x01"

# Form field carrying the probe message
PROBE_FIELD = "Probe-Modify-Request"


def encode_probe(entries: EntryTable, group: str, namespace: str) -> str:
    """Serialize every tracked (id, fingerprint) into a probe message"""
    parts = []
    for data_id, fingerprint in entries.items():
        parts.append(
            FIELD_SEPARATOR.join((data_id, group, fingerprint, namespace))
            + RECORD_SEPARATOR
        )
    return "".join(parts)


def _unquote(message: str) -> str:
    try:
        return unquote(message, errors="strict")
    except UnicodeDecodeError as e:
        raise ProtocolError(f"undecodable long-poll response: {e}", body=message) from e


def decode_change(
    message: str,
    entries: EntryTable,
    group: str,
    namespace: str,
) -> str | None:
    """
    Pick the changed id out of a long-poll response.

    Bad records are logged and skipped; the first record naming a tracked
    id with the expected group and namespace wins.

    Args:
        message: Response text ("" means nothing changed)
        entries: Table of tracked ids
        group: Group this client watches
        namespace: Namespace (tenant) this client watches

    Returns:
        The changed id, or None when no record validates

    Raises:
        ProtocolError: the body's percent-escapes are not valid UTF-8
    """
    if not message:
        return None

    for record in _unquote(message).split(RECORD_SEPARATOR):
        if not record:
            continue

        fields = record.split(FIELD_SEPARATOR)
        if len(fields) != 3:
            logger.error(
                f"Corrupted response {record!r} from add listener",
                extra={"record": record},
            )
            continue

        data_id, record_group, record_namespace = fields

        key = entries.key_for(data_id)
        if key is None:
            logger.error(
                f"Add listener response id {data_id!r} does not exist",
                extra={"data_id": data_id},
            )
            continue

        if record_group != group:
            logger.error(
                f"Add listener response group {record_group!r} does not match {group}",
                extra={"data_id": data_id, "group": record_group},
            )
            continue

        if record_namespace != namespace:
            logger.error(
                f"Add listener response namespace {record_namespace!r} does not match {namespace}",
                extra={"data_id": data_id, "namespace": record_namespace},
            )
            continue

        return key

    return None
