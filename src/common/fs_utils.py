"""Filesystem helpers for editor paths and manifests."""
from __future__ import annotations

import glob
import json
import logging
import os
import shutil
from typing import Any, List, Optional

logger = logging.getLogger(__name__)


def remove_path(path: Optional[str]) -> None:
    """Recursively remove ``path``; a missing path is not an error."""
    if not path:
        return
    if os.path.isdir(path) and not os.path.islink(path):
        logger.info("Removing %s", path)
        shutil.rmtree(path, ignore_errors=True)
    elif os.path.lexists(path):
        logger.info("Removing %s", path)
        try:
            os.remove(path)
        except FileNotFoundError:
            pass


def is_readable(path: str) -> bool:
    return os.access(path, os.R_OK)


def is_executable(path: str) -> bool:
    return os.access(path, os.X_OK)


def read_json(path: str) -> Any:
    """Load a JSON document from disk."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def find_first(pattern: str) -> Optional[str]:
    """Return the first path matching a recursive glob pattern, if any."""
    matches: List[str] = sorted(glob.glob(pattern, recursive=True))
    if matches:
        logger.debug("found glob: %s", matches[0])
        return matches[0]
    return None
