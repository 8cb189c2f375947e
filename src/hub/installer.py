"""Editor install orchestration: find, resolve, install, verify, reconcile modules."""

from __future__ import annotations

import logging
import os
import subprocess
from typing import List, Optional, Sequence, Tuple

from common.errors import CliError, FatalCliError, ResolutionError, RetryableInstallError, VerificationError
from common.fs_utils import is_executable, is_readable, remove_path
from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants
from versioning.models import InstallOutcome
from versioning.unity_version import UnityVersion
from .catalog import ReleaseCatalog
from .cli import UnityHubCli
from .editors import parse_installed, parse_releases, select_installed
from .modules import reconcile_modules

logger = logging.getLogger(__name__)

CHANGESET_INSTALL_ERROR = "Error while installing an editor or a module from changeset"


class UnityInstaller:
    """Produces a verified editor executable for a requested version."""

    def __init__(
        self,
        hub: UnityHubCli,
        catalog: Optional[ReleaseCatalog] = None,
        legacy_installer: Optional[Sequence[str]] = None,
        max_corrupt_retries: int = Constants.MAX_CORRUPT_INSTALL_RETRIES,
    ):
        self.hub = hub
        self.context = hub.context
        self.catalog = catalog or ReleaseCatalog(self.context.layout.catalog_platform)
        self.legacy_installer = list(legacy_installer) if legacy_installer else None
        self.max_corrupt_retries = max_corrupt_retries

    def get_editor(self, version: UnityVersion, modules: Sequence[str], attempt: int = 0) -> InstallOutcome:
        """Return the editor for ``version``, installing it and ``modules`` when needed.

        Args:
            version: Requested version, possibly partial
            modules: Hub module ids to install alongside the editor
            attempt: How many times a corrupt install has been removed already

        Raises:
            UnitySetupError: Any unrecovered failure; nothing partial is returned.
        """
        modules = list(modules)
        logger.info("Getting release info for Unity %s...", version)
        installed = self.find_installed(version)

        if installed is None and not version.is_legacy():
            version = self.resolve(version)

        if installed is None:
            install_path = self.install_with_retry(version, modules)
            version, editor_path = self.verify_installed(version, install_path)
        else:
            version, editor_path = installed

        if not is_executable(editor_path):
            raise VerificationError(f"Unity Editor is not executable: {editor_path}")
        logger.info('Unity Editor Path:\n  > "%s"', editor_path)

        if version.is_legacy() or not modules:
            return InstallOutcome(editor_path, release=version.version)

        logger.info("Checking installed modules for Unity %s...", version)
        report = reconcile_modules(self.hub, editor_path, version, modules)
        if report.looks_corrupt(modules):
            if attempt < self.max_corrupt_retries:
                editor_root = self.context.editor_root(editor_path)
                logger.warning("No modules found for Unity %s, reinstalling %s", version, editor_root)
                remove_path(editor_root)
                return self.get_editor(version, modules, attempt + 1)
            logger.warning("No modules found for Unity %s after reinstalling", version)

        if report.installed:
            logger.info("Installed Modules:")
            for module in report.installed:
                logger.info("  > %s", module)
        if report.additional:
            logger.info("Additional Modules:")
            for module in report.additional:
                logger.info("  > %s", module)
        return InstallOutcome(editor_path, report.installed, report.additional, version.version)

    def find_installed(self, version: UnityVersion,
                       fail_on_empty: bool = False) -> Optional[Tuple[UnityVersion, str]]:
        """Installed release and executable matching ``version``, if any.

        A partial ``version`` satisfied by a compatible install is narrowed to
        the installed release so later Hub calls get a concrete version.
        """
        candidates = parse_installed(self.hub.list_installed())
        if is_debug_enabled(logger):
            logger.debug(
                "Installed editors",
                extra=extra_context(
                    event="enumerate",
                    component="installer",
                    action="find_installed",
                    count=len(candidates),
                )
            )
        selected = select_installed(version, candidates)
        if selected is None:
            if fail_on_empty:
                raise VerificationError(f"Failed to find installed Unity Editor: {version}")
            return None
        editor_path = self.context.executable_from_install(selected.path)
        # The Hub keeps listing editors whose folder was removed
        if not fail_on_empty and not is_readable(editor_path):
            logger.warning("Unity %s is listed but missing at %s", selected.version, editor_path)
            return None
        if selected.version != version.version:
            logger.info("Using installed Unity %s for %s", selected.version, version)
            version = UnityVersion(selected.version, None, version.architecture)
        return version, self._checked_executable(version, editor_path)

    def verify_installed(self, version: UnityVersion,
                         install_path: Optional[str]) -> Tuple[UnityVersion, str]:
        """Locate the freshly installed editor and make sure it is readable."""
        if not install_path:
            return self.find_installed(version, fail_on_empty=True)
        editor_path = install_path
        if self.context.platform == "win32":
            editor_path = os.path.join(install_path, "Unity.exe")
        return version, self._checked_executable(version, self.context.executable_from_install(editor_path))

    @staticmethod
    def _checked_executable(version: UnityVersion, editor_path: str) -> str:
        if not is_readable(editor_path):
            raise VerificationError(f"Failed to find installed Unity Editor: {version}\n  > {editor_path}")
        logger.debug("Found installed Unity Editor: %s", editor_path)
        return editor_path

    def resolve(self, version: UnityVersion) -> UnityVersion:
        """Narrow ``version`` with locally known releases, then ask the catalog."""
        try:
            releases = parse_releases(self.hub.list_releases())
        except CliError as e:
            logger.warning("Failed to list Unity releases: %s", e)
            releases = []
        return self.catalog.resolve(version.find_match(releases))

    def install_with_retry(self, version: UnityVersion, modules: Sequence[str]) -> Optional[str]:
        """Install once more after removing the partial install on a known recoverable failure."""
        try:
            return self.install(version, modules)
        except RetryableInstallError as error:
            logger.warning("%s\nRemoving partial install and retrying...", error)
            for path in self._partial_install_paths(version):
                remove_path(path)
            return self.install(version, modules)

    def install(self, version: UnityVersion, modules: Sequence[str]) -> Optional[str]:
        """Run ``install``; returns an install path only for legacy editors."""
        if version.is_legacy():
            return self.install_legacy(version)

        logger.info("Installing Unity %s...", version)
        args = ["install", "--version", version.version]
        if version.changeset:
            args.extend(["--changeset", version.changeset])
        if version.architecture:
            args.extend(["-a", version.architecture.value.lower()])
        if modules:
            for module in modules:
                logger.info("  > with module: %s", module)
                args.extend(["-m", module])
            args.append("--cm")

        result = self.hub.run(args)
        if CHANGESET_INSTALL_ERROR in result.output:
            raise FatalCliError(f"Failed to install Unity {version}", result.output)
        return None

    def _partial_install_paths(self, version: UnityVersion) -> List[str]:
        try:
            install_root = self.hub.get_install_path()
        except CliError:
            install_root = self.context.layout.editor_root
        paths = [os.path.join(install_root, version.version)]
        if version.architecture:
            paths.append(os.path.join(install_root, f"{version.version}-{version.architecture.value.lower()}"))
        return paths

    def install_legacy(self, version: UnityVersion) -> str:
        """Unity 4.x and older are installed outside the Hub."""
        if self.context.platform == "linux":
            raise ResolutionError(f"Unity {version} is not supported on Linux!")

        install_dir = self.hub.get_install_path()
        install_path = os.path.join(install_dir, f"Unity {version.version}")
        if self.context.platform == "darwin":
            install_path = os.path.join(install_path, "Unity.app")

        if not os.path.exists(install_path):
            if not self.legacy_installer:
                raise VerificationError(
                    f"Unity {version} is not installed at {install_path} and no legacy installer is configured"
                )
            cmd = [*self.legacy_installer, version.version, install_dir]
            logger.info("[command]%s", " ".join(cmd))
            try:
                exit_code = subprocess.run(cmd, check=False).returncode  # noqa: S603
            except OSError as e:
                raise FatalCliError(f"Failed to start legacy installer: {e}") from e
            if exit_code != 0:
                raise FatalCliError(f"Failed to install Unity {version}: {exit_code}")

        if not is_readable(install_path):
            raise VerificationError(f"Failed to find installed Unity Editor: {version}\n  > {install_path}")
        return install_path
