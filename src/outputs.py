"""Publishing of run results as environment variables and step outputs."""

from __future__ import annotations

import logging
import os
from typing import Optional

logger = logging.getLogger(__name__)


def _append(path: Optional[str], line: str) -> None:
    if not path:
        return
    with open(path, "a", encoding="utf-8") as f:
        f.write(line + "\n")


def export(name: str, value: str) -> None:
    """Log ``name`` and write it to ``$GITHUB_ENV`` / ``$GITHUB_OUTPUT`` when configured.

    ``UNITY_EDITOR_PATH`` is exported as ``UNITY_EDITOR_PATH`` in the
    environment file and as ``unity-editor-path`` in the outputs file.
    """
    logger.info("%s:\n  > %s", name, value)
    _append(os.environ.get("GITHUB_ENV"), f"{name}={value}")
    _append(os.environ.get("GITHUB_OUTPUT"), f"{name.lower().replace('_', '-')}={value}")
