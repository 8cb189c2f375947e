"""Assembly of the run inputs from command line arguments and configuration."""

from __future__ import annotations

import functools
import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from common.errors import ParseError
from common.fs_utils import find_first, is_readable
from constants import Architecture, Constants
from hub.platform import current_platform, host_architecture
from versioning.parser import parse_version_specifiers, read_project_version
from versioning.unity_version import UnityVersion

logger = logging.getLogger(__name__)


@dataclass
class SetupInputs:
    """Everything one run needs, after defaults have been applied."""
    versions: List[UnityVersion]
    modules: List[str]
    architecture: Architecture
    install_path: Optional[str] = None
    project_path: Optional[str] = None
    hub_path: Optional[str] = None
    max_retries: int = Constants.MAX_TRANSIENT_RETRIES
    hub_timeout: Optional[float] = Constants.HUB_COMMAND_TIMEOUT
    legacy_installer: List[str] = field(default_factory=list)


def split_list(values: Any) -> List[str]:
    """Flatten comma/space separated strings (or lists of them) into items."""
    if values is None:
        return []
    if isinstance(values, str):
        values = [values]
    items: List[str] = []
    for value in values:
        items.extend(item for item in re.split(r",?\s+|,", str(value).strip()) if item)
    return items


def resolve_modules(modules: Iterable[str], build_targets: Iterable[str], platform_name: str) -> List[str]:
    """Merge explicit modules with modules implied by build targets."""
    modules = list(modules)
    build_targets = list(build_targets)
    result: List[str] = []

    if not modules and not build_targets:
        result.extend(Constants.DEFAULT_MODULES.get(platform_name, []))

    for module in modules:
        if module.lower() == "none":
            continue
        if module not in result:
            result.append(module)

    target_map = Constants.BUILD_TARGET_MODULES.get(platform_name, {})
    for target in build_targets:
        module = target_map.get(target)
        if module is None:
            if target.lower() != "none":
                logger.warning("%s is not a valid build target for %s", target, platform_name)
            continue
        if module not in result:
            result.append(module)
            logger.info("  > %s -> %s", target, module)

    return result


def find_version_file(explicit: Optional[str], workspace: str) -> Optional[str]:
    """Locate ``ProjectVersion.txt``; ``none`` disables the lookup."""
    if explicit and explicit.lower() == "none":
        return None

    candidates = []
    if explicit:
        candidates.extend([explicit, os.path.join(workspace, explicit)])
    for candidate in candidates:
        if os.path.isfile(candidate) and is_readable(candidate):
            return candidate

    found = find_first(os.path.join(workspace, "**", Constants.PROJECT_VERSION_FILE))
    if found:
        return found
    logger.warning(
        "Could not find %s in %s! UNITY_PROJECT_PATH will not be set.",
        Constants.PROJECT_VERSION_FILE, workspace,
    )
    return None


def _pick(cli_value: Any, config: Dict[str, Any], key: str, default: Any = None) -> Any:
    if cli_value not in (None, [], ""):
        return cli_value
    value = config.get(key)
    return default if value in (None, [], "") else value


def build_inputs(args: Any, config: Dict[str, Any], platform_name: Optional[str] = None,
                 workspace: Optional[str] = None) -> SetupInputs:
    """Combine parsed arguments and config file values into ``SetupInputs``.

    Raises:
        ParseError: If version specifiers or the version file cannot be parsed.
    """
    platform_name = platform_name or current_platform()
    workspace = workspace or os.environ.get("GITHUB_WORKSPACE") or os.getcwd()

    arch_value = _pick(getattr(args, "ARCHITECTURE", None), config, "architecture")
    try:
        architecture = Architecture(str(arch_value).upper()) if arch_value else host_architecture()
    except ValueError as e:
        raise ParseError(f"Unsupported architecture: {arch_value}") from e
    logger.info("architecture:\n  > %s", architecture.value.lower())

    logger.info("modules:")
    modules = resolve_modules(
        split_list(_pick(getattr(args, "MODULES", None), config, "modules", [])),
        split_list(_pick(getattr(args, "BUILD_TARGETS", None), config, "build_targets", [])),
        platform_name,
    )
    for module in modules:
        logger.info("  > %s", module)
    if not modules:
        logger.info("  > None")

    spec = _pick(getattr(args, "UNITY_VERSION", None), config, "unity_version", [])
    spec_text = " ".join(spec) if isinstance(spec, list) else str(spec)
    versions = parse_version_specifiers(spec_text, architecture)

    project_path = None
    version_file = find_version_file(_pick(getattr(args, "VERSION_FILE", None), config, "version_file"), workspace)
    if version_file:
        project_path = os.path.dirname(os.path.dirname(os.path.abspath(version_file)))
        logger.info('versionFilePath:\n  > "%s"', version_file)
        logger.info('Unity Project Path:\n  > "%s"', project_path)
        if not versions:
            versions.append(read_project_version(version_file, architecture))

    versions.sort(key=functools.cmp_to_key(UnityVersion.compare))
    logger.info("Unity Versions:")
    for version in versions:
        logger.info("  > %s", version)
    if not versions:
        logger.info("  > None")

    install_path = _pick(getattr(args, "INSTALL_PATH", None), config, "install_path")
    if install_path:
        install_path = os.path.normpath(str(install_path).strip())
        logger.info('Install Path:\n  > "%s"', install_path)
    else:
        logger.debug("No install path specified, using default Unity Hub install path.")

    legacy = _pick(getattr(args, "LEGACY_INSTALLER", None), config, "legacy_installer")
    if isinstance(legacy, str):
        legacy = legacy.split()

    hub_timeout = _pick(getattr(args, "HUB_TIMEOUT", None), config, "hub_timeout", Constants.HUB_COMMAND_TIMEOUT)
    return SetupInputs(
        versions=versions,
        modules=modules,
        architecture=architecture,
        install_path=install_path or None,
        project_path=project_path,
        hub_path=_pick(getattr(args, "HUB_PATH", None), config, "hub_path"),
        max_retries=int(_pick(getattr(args, "MAX_RETRIES", None), config, "max_retries",
                              Constants.MAX_TRANSIENT_RETRIES)),
        hub_timeout=float(hub_timeout) if hub_timeout is not None else None,
        legacy_installer=list(legacy or []),
    )
