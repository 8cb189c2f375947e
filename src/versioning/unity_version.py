"""Structured Unity editor version with fallback matching against known releases."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple, Union

import semantic_version

from common.errors import ParseError
from constants import Architecture

logger = logging.getLogger(__name__)

# Release-stage tags from pre-release to stable
TAG_ORDER = {"x": 0, "a": 1, "b": 2, "c": 3, "p": 4, "f": 5}
STABLE_TAG = "f"

FULL_VERSION_RE = re.compile(r"^\d{1,4}\.\d+\.\d+[abcfpx]\d+$")
RELEASE_RE = re.compile(
    r"(?P<major>\d{1,4})\.(?P<minor>\d+)\.(?P<patch>\d+)(?P<tag>[abcfpx])(?P<build>\d+)"
)
_NUMERIC_RE = re.compile(r"^\d+(?:\.\d+){0,2}")
_PREFIX_RE = re.compile(r"^(?P<major>\d{1,4})(?:\.(?P<minor>\d+|x|\*))?(?:\.(?P<patch>\d+|x|\*))?")
_WILDCARD_RE = re.compile(r"\.(?:x|\*)(?:$|[^\w])")

ReleaseKey = Tuple[int, int, int]


def extract_release(text: str) -> Optional[str]:
    """Return the first fully-formed release token (e.g. ``2022.3.5f1``) found in ``text``."""
    match = RELEASE_RE.search(text)
    return match.group(0) if match else None


def _release_sort_key(release: str) -> ReleaseKey:
    """(minor, patch, build number) of a release token."""
    match = RELEASE_RE.search(release)
    if not match:
        return 0, 0, 0
    return int(match.group("minor")), int(match.group("patch")), int(match.group("build"))


@dataclass(frozen=True)
class UnityVersion:
    """A requested or resolved Unity editor release.

    ``version`` may be partial (``6000``, ``2022.3.0``) until it is matched
    against known releases. ``changeset`` is only known once a concrete
    release has been resolved.
    """
    version: str
    changeset: Optional[str] = None
    architecture: Architecture = Architecture.X86_64
    _semver: semantic_version.Version = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if not isinstance(self.version, str):
            raise ParseError(f"Invalid Unity version: {self.version!r}")
        numeric = _NUMERIC_RE.match(self.version.strip())
        if not numeric:
            raise ParseError(f"Invalid Unity version: {self.version}")
        object.__setattr__(self, "version", self.version.strip())
        object.__setattr__(self, "_semver", semantic_version.Version.coerce(numeric.group(0)))

        architecture = self.architecture
        if isinstance(architecture, str):
            try:
                architecture = Architecture(architecture.upper())
            except ValueError as exc:
                raise ParseError(f"Unsupported architecture: {self.architecture}") from exc
        if architecture is Architecture.ARM64 and not self.is_arm_compatible():
            architecture = Architecture.X86_64
        object.__setattr__(self, "architecture", architecture)

    def __str__(self) -> str:
        return f"{self.version} ({self.changeset})" if self.changeset else self.version

    @property
    def major(self) -> int:
        return self._semver.major

    @property
    def minor(self) -> int:
        return self._semver.minor

    @property
    def patch(self) -> int:
        return self._semver.patch

    @property
    def tag(self) -> Optional[str]:
        match = RELEASE_RE.search(self.version)
        return match.group("tag") if match else None

    def sort_key(self) -> Tuple[int, int, int, int, int]:
        """Numeric triple, then stage tag, then build number. Missing tags sort first."""
        match = RELEASE_RE.search(self.version)
        tag_rank = TAG_ORDER[match.group("tag")] if match else -1
        build = int(match.group("build")) if match else 0
        return self.major, self.minor, self.patch, tag_rank, build

    @staticmethod
    def compare(a: "UnityVersion", b: "UnityVersion") -> int:
        """Three-way comparison usable with ``functools.cmp_to_key``."""
        key_a, key_b = a.sort_key(), b.sort_key()
        return (key_a > key_b) - (key_a < key_b)

    def __lt__(self, other: "UnityVersion") -> bool:
        if not isinstance(other, UnityVersion):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def is_legacy(self) -> bool:
        return self.major <= 4

    def is_arm_compatible(self) -> bool:
        return self._semver >= semantic_version.Version("2021.0.0")

    def is_fully_qualified(self) -> bool:
        return bool(FULL_VERSION_RE.match(self.version))

    def is_prerelease(self) -> bool:
        tag = self.tag
        return tag is not None and tag != STABLE_TAG

    def has_wildcard(self) -> bool:
        return bool(_WILDCARD_RE.search(self.version))

    def find_match(self, releases: Iterable[str]) -> "UnityVersion":
        """Pick the most specific known release for this version.

        An exact release hit returns ``self``. Partial or wildcarded versions
        fall back to the newest stable release in the requested major (and
        minor, when one was given); the result carries no changeset so the
        caller re-resolves it against the release catalog. When nothing fits,
        ``self`` is returned unchanged.
        """
        known = [token for token in (extract_release(r) for r in releases) if token]

        if self.version in known:
            logger.debug("Exact match found for %s", self.version)
            return self

        if not (self.has_wildcard() or not self.is_fully_qualified()):
            logger.debug("No matching Unity version found for %s", self.version)
            return self

        prefix = _PREFIX_RE.match(self.version)
        major = prefix.group("major") if prefix else None
        minor = prefix.group("minor") if prefix else None

        candidates = self._filter_stable(known, major, minor)
        if not candidates and minor == "0":
            candidates = self._filter_stable(known, major, None)

        candidates.sort(key=_release_sort_key, reverse=True)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Searching for fallback match for %s:", self.version)
            for release in candidates:
                logger.debug("  > %s", release)

        if candidates:
            logger.debug("Found fallback Unity %s", candidates[0])
            return UnityVersion(candidates[0], None, self.architecture)

        logger.debug("No matching Unity version found for %s", self.version)
        return self

    @staticmethod
    def _filter_stable(known: List[str], major: Optional[str], minor: Optional[str]) -> List[str]:
        result = []
        for release in known:
            parts = RELEASE_RE.match(release)
            if not parts or parts.group("tag") != STABLE_TAG:
                continue
            if major and parts.group("major") != major:
                continue
            if minor and minor not in ("x", "*") and parts.group("minor") != minor:
                continue
            result.append(release)
        return result

    def satisfies(self, other: Union[str, "UnityVersion"]) -> bool:
        """True when ``other`` lies within the caret range of this version."""
        text = other.version if isinstance(other, UnityVersion) else other
        numeric = _NUMERIC_RE.match(text.strip()) if isinstance(text, str) else None
        if not numeric:
            raise ParseError(f"Invalid version to check against: {other}")
        candidate = semantic_version.Version.coerce(numeric.group(0))
        return semantic_version.NpmSpec(f"^{self._semver}").match(candidate)
