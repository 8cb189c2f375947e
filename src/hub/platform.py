"""Per-platform Unity Hub layout and the context value passed to Hub collaborators."""

from __future__ import annotations

import os
import platform as host_platform
import sys
from dataclasses import dataclass, field
from typing import List, Optional

from constants import Architecture, Constants


@dataclass(frozen=True)
class HubLayout:
    """Where the Hub and its editors live on one host platform."""
    hub_path: str
    editor_root: str
    catalog_platform: str
    # Relative path from an enumerated install path to the executable
    bundle_executable: Optional[str] = None
    # Number of parent hops from the executable to the editor root
    root_depth: int = 2


_LAYOUTS = {
    "win32": HubLayout(
        hub_path="C:/Program Files/Unity Hub/Unity Hub.exe",
        editor_root="C:/Program Files/Unity/Hub/Editor/",
        catalog_platform="WINDOWS",
    ),
    "darwin": HubLayout(
        hub_path="/Applications/Unity Hub.app/Contents/MacOS/Unity Hub",
        editor_root="/Applications/Unity/Hub/Editor/",
        catalog_platform="MAC_OS",
        bundle_executable="Contents/MacOS/Unity",
        root_depth=4,
    ),
    "linux": HubLayout(
        hub_path="/opt/unityhub/unityhub",
        editor_root=os.path.join(os.path.expanduser("~"), "Unity", "Hub", "Editor"),
        catalog_platform="LINUX",
    ),
}


def current_platform() -> str:
    """Normalize ``sys.platform`` to one of ``win32``, ``darwin`` or ``linux``."""
    if sys.platform.startswith("linux"):
        return "linux"
    return sys.platform


def layout_for(platform_name: Optional[str] = None) -> HubLayout:
    name = platform_name or current_platform()
    if name not in _LAYOUTS:
        raise ValueError(f"{name} not supported")
    return _LAYOUTS[name]


def host_architecture() -> Architecture:
    machine = host_platform.machine().lower()
    if machine in ("arm64", "aarch64"):
        return Architecture.ARM64
    return Architecture.X86_64


@dataclass(frozen=True)
class HubContext:
    """Hub executable plus the platform it runs on.

    Passed explicitly to every Hub collaborator so nothing depends on
    process-wide state.
    """
    hub_path: str
    platform: str = field(default_factory=current_platform)
    timeout: Optional[float] = None
    max_transient_retries: int = Constants.MAX_TRANSIENT_RETRIES

    @property
    def layout(self) -> HubLayout:
        return layout_for(self.platform)

    @classmethod
    def for_host(cls, hub_path: Optional[str] = None, **kwargs) -> "HubContext":
        platform_name = kwargs.pop("platform", None) or current_platform()
        return cls(hub_path=hub_path or layout_for(platform_name).hub_path, platform=platform_name, **kwargs)

    def command(self, args: List[str]) -> List[str]:
        """Full argv for a headless Hub call."""
        if self.platform == "linux":
            return [self.hub_path, "--headless", *args]
        return [self.hub_path, "--", "--headless", *args]

    def executable_from_install(self, install_path: str) -> str:
        """Adjust an enumerated install path to the editor executable."""
        bundle = self.layout.bundle_executable
        if bundle:
            return os.path.join(install_path, bundle)
        return install_path

    def editor_root(self, editor_path: str) -> str:
        """Directory holding ``modules.json`` for an editor executable."""
        root = editor_path
        for _ in range(self.layout.root_depth):
            root = os.path.dirname(root.rstrip("/\\"))
        return root
