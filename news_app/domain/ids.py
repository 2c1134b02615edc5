"""
Post identifiers.

Identifiers use the document-store object-id layout: 12 bytes rendered
as 24 lowercase hex characters.

    4 bytes  big-endian Unix seconds
    5 bytes  random value chosen once per process
    3 bytes  counter, incremented for every id

Ids generated by one process are strictly increasing, which gives the
repositories a stable tie-breaker when two posts share a timestamp.
"""
import itertools
import os
import string
import threading
import time

ID_LENGTH = 24

_HEX_DIGITS = frozenset(string.hexdigits)
_PROCESS_UNIQUE = os.urandom(5)
_counter = itertools.count(int.from_bytes(os.urandom(3), "big"))
_lock = threading.Lock()


def new_id() -> str:
    """Return a fresh identifier."""
    with _lock:
        count = next(_counter) % 0x1000000
    raw = (
        int(time.time()).to_bytes(4, "big")
        + _PROCESS_UNIQUE
        + count.to_bytes(3, "big")
    )
    return raw.hex()


def is_valid_id(value: str) -> bool:
    return (
        isinstance(value, str)
        and len(value) == ID_LENGTH
        and all(ch in _HEX_DIGITS for ch in value)
    )


def canonical_id(value: str) -> str:
    """Lowercase form used for storage and lookups; *value* must be valid."""
    return value.lower()
