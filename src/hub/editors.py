"""Parsing of installed-editor listings and selection of a matching install."""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional

from common.errors import FatalCliError
from versioning.models import ReleaseCandidate
from versioning.unity_version import UnityVersion, extract_release

logger = logging.getLogger(__name__)

INSTALLED_LINE_RE = re.compile(
    r"(?P<version>\d+\.\d+\.\d+[abcfpx]?\d*)\s*(?:\((?P<arch>Apple silicon|Intel)\))?\s*,? installed at (?P<path>.*)"
)


def parse_installed_line(line: str) -> Optional[ReleaseCandidate]:
    """Parse ``<version>[ (<arch>)][,] installed at <path>``; None when the line does not match."""
    match = INSTALLED_LINE_RE.search(line)
    if not match:
        return None
    return ReleaseCandidate(
        version=match.group("version"),
        arch_label=match.group("arch"),
        path=match.group("path").strip(),
    )


def parse_installed(lines: Iterable[str]) -> List[ReleaseCandidate]:
    """Parse every non-empty listing line.

    Raises:
        FatalCliError: If any line does not follow the expected format.
    """
    lines = [line.strip() for line in lines if line.strip()]
    candidates = [parse_installed_line(line) for line in lines]
    unparsed = [line for line, candidate in zip(lines, candidates) if candidate is None]
    if unparsed:
        raise FatalCliError(
            "Failed to parse all installed Unity Editors!\n" + "\n".join(f"  > {line}" for line in unparsed)
        )
    return [candidate for candidate in candidates if candidate is not None]


def parse_releases(lines: Iterable[str]) -> List[str]:
    """Reduce ``editors --releases`` lines to bare release tokens (e.g. ``2022.3.62f1``)."""
    return [token for token in (extract_release(line) for line in lines) if token]


def _pick_by_architecture(version: UnityVersion, candidates: List[ReleaseCandidate]) -> Optional[ReleaseCandidate]:
    """Prefer a matching label, then unlabeled installs, then a path naming the architecture."""
    for candidate in candidates:
        if candidate.matches_architecture(version.architecture):
            return candidate
    for candidate in candidates:
        if candidate.arch_label is None:
            return candidate
    for candidate in candidates:
        if candidate.path_mentions(version.architecture):
            return candidate
    return None


def select_installed(version: UnityVersion, candidates: List[ReleaseCandidate]) -> Optional[ReleaseCandidate]:
    """Find the installed editor to use for ``version``.

    Exact version matches are tried before caret-compatible ones.
    """
    exact = [c for c in candidates if c.version == version.version]
    selected = _pick_by_architecture(version, exact)
    if selected:
        return selected

    compatible = [c for c in candidates if c.version != version.version and version.satisfies(c.version)]
    # Newest compatible install first
    compatible.sort(key=lambda c: UnityVersion(c.version).sort_key(), reverse=True)
    logger.debug("Version matches: %s", [c.version for c in compatible])
    return _pick_by_architecture(version, compatible)
