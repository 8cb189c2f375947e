"""Editor module reconciliation against the Hub and the editor's modules manifest."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from typing import Any, List, Sequence, Tuple

from common.fs_utils import read_json
from constants import Constants
from versioning.unity_version import UnityVersion
from .classifier import Action
from .cli import UnityHubCli

logger = logging.getLogger(__name__)

OMITTED_MODULE_RE = re.compile(r"Omitting module (?P<module>.+) because it's already installed")


@dataclass(frozen=True)
class ModuleReport:
    """What ``install-modules`` and the manifest say about an editor."""
    installed: Tuple[str, ...]
    additional: Tuple[str, ...]
    no_modules_found: bool = False
    omitted: Tuple[str, ...] = ()

    def looks_corrupt(self, requested: Sequence[str]) -> bool:
        """Hub found nothing to install although some requested module is not installed."""
        return self.no_modules_found and any(m not in self.omitted for m in requested)


def parse_omitted_modules(output: str) -> List[str]:
    return [match.group("module").strip() for match in OMITTED_MODULE_RE.finditer(output)]


def additional_platform_modules(manifest: Any, installed: Sequence[str]) -> List[str]:
    """Visible ``Platforms`` modules from ``modules.json`` that are not installed."""
    if not isinstance(manifest, list):
        return []
    additional = []
    for module in manifest:
        if not isinstance(module, dict):
            continue
        if module.get("category") == "Platforms" and module.get("visible") is True:
            module_id = module.get("id")
            if module_id and module_id not in installed and module_id not in additional:
                additional.append(module_id)
    return additional


def install_module_args(version: UnityVersion, modules: Sequence[str]) -> List[str]:
    args = ["install-modules", "--version", version.version]
    if version.architecture:
        args.extend(["-a", version.architecture.value.lower()])
    for module in modules:
        args.extend(["-m", module])
    args.append("--cm")
    return args


def reconcile_modules(hub: UnityHubCli, editor_path: str, version: UnityVersion,
                      modules: Sequence[str]) -> ModuleReport:
    """Install requested modules and report installed plus additionally available ones."""
    result = hub.run(install_module_args(version, modules))
    omitted = parse_omitted_modules(result.output)
    no_modules_found = result.action is Action.BENIGN_EMPTY

    installed = [] if no_modules_found else list(modules)
    for module in omitted:
        if module not in installed:
            installed.append(module)

    manifest_path = os.path.join(hub.context.editor_root(editor_path), Constants.MODULES_MANIFEST)
    logger.debug('Editor Modules Manifest:\n  > "%s"', manifest_path)
    try:
        manifest = read_json(manifest_path)
    except FileNotFoundError:
        logger.warning("Modules manifest not found: %s", manifest_path)
        manifest = []
    except ValueError as e:
        logger.warning("Failed to parse modules manifest %s: %s", manifest_path, e)
        manifest = []

    return ModuleReport(
        installed=tuple(installed),
        additional=tuple(additional_platform_modules(manifest, installed)),
        no_modules_found=no_modules_found,
        omitted=tuple(omitted),
    )
