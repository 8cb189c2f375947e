"""Data models for editor resolution and installation."""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from constants import Architecture, Constants


@dataclass(frozen=True)
class ReleaseCandidate:
    """One installed editor as reported by ``editors -i``."""
    version: str
    arch_label: Optional[str]
    path: str

    def matches_architecture(self, architecture: Architecture) -> bool:
        """Return True when the label names ``architecture``."""
        return self.arch_label == Constants.ARCH_LABELS.get(architecture)

    def path_mentions(self, architecture: Architecture) -> bool:
        """Return True when the install path embeds the architecture token (e.g. ``-arm64``)."""
        return f"-{architecture.value.lower()}" in self.path.lower()


@dataclass(frozen=True)
class ReleaseInfo:
    """Authoritative release returned by the release catalog."""
    version: str
    short_revision: Optional[str]


@dataclass(frozen=True)
class InstallOutcome:
    """Result of installing one requested editor version."""
    editor_path: str
    installed_modules: Tuple[str, ...] = field(default_factory=tuple)
    additional_modules: Tuple[str, ...] = field(default_factory=tuple)
    # Concrete release the editor path belongs to
    release: Optional[str] = None
