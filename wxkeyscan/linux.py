"""Scan a running WeChat process on Linux for SQLCipher keys through /proc."""

from __future__ import annotations

import os
import re
import sys
from pathlib import Path
from typing import BinaryIO

from .pattern import CHUNK_OVERLAP, CHUNK_SIZE, KeyPair, merge_unique, search_pattern
from .salts import KeyEntry, collect_db_salts, match_keys

PROC_ROOT = "/proc"
_PROCESS_NAMES = frozenset({"wechat", "weixin"})
_HEX_ADDR = re.compile(r"[0-9a-fA-F]{1,16}")


def _log(message: str) -> None:
    print(message, file=sys.stderr)


def _is_pid_name(name: str) -> bool:
    return name.isascii() and name.isdigit()


def find_wechat_pid(proc_root: str | os.PathLike[str] = PROC_ROOT) -> int | None:
    """Return the PID of the first process whose comm is WeChat or Weixin, or None."""
    root = Path(proc_root)
    try:
        names = [entry.name for entry in os.scandir(root) if _is_pid_name(entry.name)]
    except OSError:
        return None
    for name in sorted(names, key=int):
        try:
            comm = (root / name / "comm").read_text()
        except (OSError, UnicodeDecodeError):
            continue
        if comm.strip().lower() in _PROCESS_NAMES:
            return int(name)
    return None


def parse_maps(pid: int, proc_root: str | os.PathLike[str] = PROC_ROOT) -> list[tuple[int, int]]:
    """Return the (start, end) address ranges of the readable and writable mappings of ``pid``."""
    maps_path = Path(proc_root) / str(pid) / "maps"
    try:
        content = maps_path.read_text(errors="replace")
    except OSError as exc:
        raise OSError(exc.errno, f"failed to read {maps_path}") from exc

    regions: list[tuple[int, int]] = []
    for line in content.splitlines():
        # start-end perms offset dev inode pathname
        addresses, sep, rest = line.partition(" ")
        if not sep or not rest.lstrip().startswith("rw"):
            continue
        low, dash, high = addresses.partition("-")
        if not dash or not _HEX_ADDR.fullmatch(low) or not _HEX_ADDR.fullmatch(high):
            continue
        regions.append((int(low, 16), int(high, 16)))
    return regions


def scan_region(mem: BinaryIO, start: int, end: int) -> list[KeyPair]:
    """Read ``mem`` between ``start`` and ``end`` in overlapping chunks and return the key pairs found."""
    total_len = max(end - start, 0)
    results: list[KeyPair] = []
    offset = 0
    while offset < total_len:
        chunk_size = min(CHUNK_SIZE, total_len - offset)
        try:
            mem.seek(start + offset)
        except (OSError, OverflowError, ValueError):
            break
        try:
            data = mem.read(chunk_size)
        except OSError:
            data = b""
        if data:
            results = merge_unique(results, search_pattern(data))
        # keep an overlap so a pattern straddling two chunks is still seen whole
        offset += chunk_size - CHUNK_OVERLAP if chunk_size > CHUNK_OVERLAP else chunk_size
    return results


def scan_keys(
    db_dir: str | os.PathLike[str],
    proc_root: str | os.PathLike[str] = PROC_ROOT,
) -> list[KeyEntry]:
    """Scan the WeChat process memory and return the keys matching databases under ``db_dir``."""
    pid = find_wechat_pid(proc_root)
    if pid is None:
        raise RuntimeError("WeChat process not found; make sure WeChat is running")
    _log(f"WeChat PID: {pid}")

    db_salts = collect_db_salts(db_dir)
    _log(f"found {len(db_salts)} encrypted databases")

    _log("scanning process memory...")
    regions = parse_maps(pid, proc_root)
    _log(f"found {len(regions)} readable and writable memory regions")

    mem_path = Path(proc_root) / str(pid) / "mem"
    try:
        mem = open(mem_path, "rb", buffering=0)
    except OSError as exc:
        raise OSError(exc.errno, f"failed to open {mem_path}; run as root") from exc

    raw_keys: list[KeyPair] = []
    with mem:
        for start, end in regions:
            raw_keys = merge_unique(raw_keys, scan_region(mem, start, end))
    _log(f"found {len(raw_keys)} candidate keys")

    entries = match_keys(raw_keys, db_salts)
    _log(f"matched {len(entries)}/{len(raw_keys)} keys")
    return entries