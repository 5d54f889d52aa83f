"""Database salt discovery and matching of candidate keys to databases."""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

SALT_LEN = 16
_SQLITE_MAGIC = b"SQLite format 3"


@dataclass(frozen=True)
class KeyEntry:
    """A key found for one encrypted database."""

    db_name: str  # relative path such as "message/message_0.db"
    enc_key: str  # 32-byte AES key, hex
    salt: str  # 16-byte salt from the database header, hex


def read_db_salt(path: str | os.PathLike[str]) -> str | None:
    """Return the first 16 bytes of a database file as hex, or None if unreadable or plaintext."""
    try:
        with open(path, "rb") as handle:
            header = handle.read(SALT_LEN)
    except OSError:
        return None
    if len(header) < SALT_LEN or header.startswith(_SQLITE_MAGIC):
        return None
    return header.hex()


def _walk_db_files(directory: Path) -> Iterable[Path]:
    try:
        entries = list(os.scandir(directory))
    except OSError:
        return
    for entry in entries:
        path = Path(entry.path)
        try:
            is_dir = entry.is_dir()
        except OSError:
            continue
        if is_dir:
            yield from _walk_db_files(path)
        elif path.suffix == ".db":
            yield path


def collect_db_salts(db_dir: str | os.PathLike[str]) -> list[tuple[str, str]]:
    """Walk ``db_dir`` recursively and return (salt_hex, relative_path) for encrypted .db files."""
    base = Path(db_dir)
    result: list[tuple[str, str]] = []
    for path in _walk_db_files(base):
        salt = read_db_salt(path)
        if salt is None:
            continue
        try:
            rel = path.relative_to(base)
        except ValueError:
            continue
        result.append((salt, rel.as_posix()))
    return result


def match_keys(
    raw_keys: Iterable[tuple[str, str]],
    db_salts: Iterable[tuple[str, str]],
) -> list[KeyEntry]:
    """Pair each (key_hex, salt_hex) with the first database sharing its salt."""
    salts = list(db_salts)
    entries: list[KeyEntry] = []
    for key_hex, salt_hex in raw_keys:
        db_name = next((name for db_salt, name in salts if db_salt == salt_hex), None)
        if db_name is not None:
            entries.append(KeyEntry(db_name=db_name, enc_key=key_hex, salt=salt_hex))
    return entries