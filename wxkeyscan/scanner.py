"""Platform dispatch for scanning SQLCipher keys out of the WeChat process."""

from __future__ import annotations

import os
import sys

from . import linux
from .salts import KeyEntry


def scan_keys(db_dir: str | os.PathLike[str]) -> list[KeyEntry]:
    """Scan the running WeChat process for database keys; needs root privileges."""
    if sys.platform.startswith("linux"):
        return linux.scan_keys(db_dir)
    raise RuntimeError(f"automatic key scanning is not supported on {sys.platform}")