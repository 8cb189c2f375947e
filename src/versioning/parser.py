"""Parsing of user supplied version specifiers and project version files."""

import logging
import re
from typing import List, Optional, Union

from common.errors import ParseError
from constants import Architecture
from versioning.unity_version import UnityVersion

logger = logging.getLogger(__name__)

# Accepts 2020, 2020.x, 2020.*, 2020.3, 2020.3.x, 2020.3.0f1, 2020.3.0f1 (c7b5465681fb)
# The major is 1-4 digits and never the tail of a longer number or word
SPECIFIER_RE = re.compile(
    r"(?<![\w.])(?P<version>\d{1,4}(?!\d)(?:\.(?:\d+|x|\*)){0,2}(?:[abcfpx]\d+)?)(?:\s*\((?P<changeset>\w+)\))?"
)
PROJECT_VERSION_RE = re.compile(
    r"m_EditorVersionWithRevision: (?P<version>(?:\d+\.)?(?:\d+\.)?(?:\d+[abcfpx]\d+\b))\s?(?:\((?P<changeset>\w+)\))?"
)
_TRAILING_WILDCARDS_RE = re.compile(r"(?:\.(?:x|\*))+$")
_OVERLONG_MAJOR_RE = re.compile(r"(?<![\w.])\d{5,}")
_CHANGESET_RE = re.compile(r"\(\w+\)")


def normalize_specifier(raw: str) -> str:
    """Drop trailing wildcard segments and pad ``major.minor`` with a zero patch.

    A major-only specifier stays un-padded so fallback can pick the newest
    minor of that major instead of being pinned to minor 0.
    """
    version = raw.rstrip(".")
    version = _TRAILING_WILDCARDS_RE.sub("", version)
    parts = version.split(".")
    if len(parts) == 2 and parts[1].isdigit():
        version = f"{version}.0"
    return version


def parse_version_specifiers(
    text: Optional[str],
    architecture: Union[Architecture, str] = Architecture.X86_64,
) -> List[UnityVersion]:
    """Parse every version specifier found in ``text``.

    Args:
        text: Free-form input, e.g. ``"2021.3.x, 6000 2022.3.5f1 (abc123)"``
        architecture: Requested editor architecture

    Returns:
        Parsed versions in input order; empty for no input or ``none``.

    Raises:
        ParseError: If the input is non-empty but contains no specifier, or
            names a major version longer than 4 digits.
    """
    if not text or not text.strip():
        return []
    if text.strip().lower() == "none":
        logger.debug("No Unity versions specified")
        return []
    overlong = _OVERLONG_MAJOR_RE.search(_CHANGESET_RE.sub("", text))
    if overlong:
        raise ParseError(f"Invalid Unity version {overlong.group(0)!r}: major version has more than 4 digits")

    versions: List[UnityVersion] = []
    logger.debug("Regex version matches from input:")
    for match in SPECIFIER_RE.finditer(text):
        if not match.group("version"):
            continue
        version = normalize_specifier(match.group("version"))
        unity_version = UnityVersion(version, match.group("changeset"), architecture)
        logger.debug("  > %s", unity_version)
        versions.append(unity_version)

    if not versions:
        raise ParseError(f"Failed to parse Unity versions from input: {text!r}")
    return versions


def parse_project_version(
    content: str,
    architecture: Union[Architecture, str] = Architecture.X86_64,
) -> UnityVersion:
    """Parse the contents of ``ProjectSettings/ProjectVersion.txt``."""
    match = PROJECT_VERSION_RE.search(content)
    if not match:
        raise ParseError("No version match found in project version file")
    if not match.group("version"):
        raise ParseError("No version group found in project version file")
    if not match.group("changeset"):
        raise ParseError("No changeset group found in project version file")
    return UnityVersion(match.group("version"), match.group("changeset"), architecture)


def read_project_version(
    path: str,
    architecture: Union[Architecture, str] = Architecture.X86_64,
) -> UnityVersion:
    """Read and parse a project version file from disk."""
    try:
        with open(path, encoding="utf-8") as f:
            content = f.read()
    except OSError as e:
        raise ParseError(f"Failed to read {path}: {e}") from e
    logger.debug("ProjectVersion.txt:\n%s", content)
    return parse_project_version(content, architecture)
