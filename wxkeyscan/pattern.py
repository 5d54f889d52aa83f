"""Search raw memory for SQLCipher raw-key literals of the form x'<key><salt>'."""

from __future__ import annotations

import re
from collections.abc import Iterable

KEY_HEX_LEN = 64
SALT_HEX_LEN = 32
HEX_PATTERN_LEN = KEY_HEX_LEN + SALT_HEX_LEN
PATTERN_TOTAL_LEN = HEX_PATTERN_LEN + 3  # x' + 96 hex + '
CHUNK_SIZE = 2 * 1024 * 1024
CHUNK_OVERLAP = PATTERN_TOTAL_LEN

_HEX_BYTES = frozenset(b"0123456789abcdefABCDEF")
_PATTERN = re.compile(rb"x'([0-9a-fA-F]{%d})'" % HEX_PATTERN_LEN)

KeyPair = tuple[str, str]


def is_hex_char(c: int) -> bool:
    """Return True if the byte value is an ASCII hexadecimal digit."""
    return c in _HEX_BYTES


def search_pattern(buf: bytes) -> list[KeyPair]:
    """Find every distinct (key_hex, salt_hex) pair in ``buf``, lower-cased, in order."""
    found: list[KeyPair] = []
    seen: set[KeyPair] = set()
    for match in _PATTERN.finditer(buf):
        hex_text = match.group(1).decode("ascii").lower()
        pair = (hex_text[:KEY_HEX_LEN], hex_text[KEY_HEX_LEN:])
        if pair not in seen:
            seen.add(pair)
            found.append(pair)
    return found


def merge_unique(results: Iterable[KeyPair], found: Iterable[KeyPair]) -> list[KeyPair]:
    """Return ``results`` followed by the pairs of ``found`` not already present."""
    merged: list[KeyPair] = []
    seen: set[KeyPair] = set()
    for pair in (*results, *found):
        if pair not in seen:
            seen.add(pair)
            merged.append(pair)
    return merged