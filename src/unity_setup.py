"""unity-setup - Resolve Unity editor versions and install them through Unity Hub

    Returns:
        int: Exit code
"""
import json
import logging
import os
import sys

from args import parse_args
from cli_config import load_config
from common.errors import ParseError, ResolutionError, UnitySetupError
from common.fs_utils import is_executable
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from constants import Constants, ExitCodes
from hub import HubContext, UnityHubCli, UnityInstaller
from inputs import SetupInputs, build_inputs
from outputs import export

logger = logging.getLogger(__name__)


def exit_code_for(error: UnitySetupError) -> int:
    """Map an error class to the process exit code."""
    if isinstance(error, ParseError):
        return ExitCodes.INPUT_ERROR.value
    if isinstance(error, ResolutionError):
        return ExitCodes.CONNECTION_ERROR.value
    return ExitCodes.UNITY_ERROR.value


def install_editors(inputs: SetupInputs, installer: UnityInstaller) -> list:
    """Install every requested version in order; stops at the first failure.

    Editors installed before a failure stay installed.
    """
    installed = []
    for version in inputs.versions:
        try:
            outcome = installer.get_editor(version, inputs.modules)
        except UnitySetupError as e:
            logger.error("Failed to setup Unity %s: %s", version, e)
            raise
        # Always points at the most recently installed editor
        export("UNITY_EDITOR_PATH", outcome.editor_path)
        installed.append({"version": outcome.release or version.version, "path": outcome.editor_path})
    return installed


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    # Honor CLI --loglevel by passing it to centralized logger via env
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.LOG_LEVEL_ENV] = str(args.LOG_LEVEL).upper()
    configure_logging(getattr(args, "LOG_FILE", None), getattr(args, "QUIET", False))

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main")
        )

    try:
        inputs = build_inputs(args, load_config(getattr(args, "CONFIG", None)))
    except ParseError as e:
        logger.error("%s", e)
        sys.exit(ExitCodes.INPUT_ERROR.value)

    if inputs.project_path:
        export("UNITY_PROJECT_PATH", inputs.project_path)

    if not inputs.versions:
        logger.warning("No Unity versions requested.")
        sys.exit(ExitCodes.SUCCESS.value)

    context = HubContext.for_host(
        inputs.hub_path,
        timeout=inputs.hub_timeout,
        max_transient_retries=inputs.max_retries,
    )
    if not is_executable(context.hub_path):
        logger.error("Unity Hub not found or not executable: %s", context.hub_path)
        sys.exit(ExitCodes.UNITY_ERROR.value)
    export("UNITY_HUB_PATH", context.hub_path)

    hub = UnityHubCli(context)
    installer = UnityInstaller(hub, legacy_installer=inputs.legacy_installer)

    if inputs.install_path:
        try:
            hub.set_install_path(inputs.install_path)
        except (UnitySetupError, OSError) as e:
            logger.error("Failed to set Unity Hub install path %s: %s", inputs.install_path, e)
            sys.exit(ExitCodes.UNITY_ERROR.value)

    try:
        installed = install_editors(inputs, installer)
    except UnitySetupError as e:
        sys.exit(exit_code_for(e))

    if len(installed) != len(inputs.versions):
        logger.error(
            "Expected to install %d Unity versions, but installed %d.",
            len(inputs.versions), len(installed),
        )
        sys.exit(ExitCodes.UNITY_ERROR.value)

    export("UNITY_EDITORS", json.dumps(installed))
    logger.info("Unity Setup Complete!")
    sys.exit(ExitCodes.SUCCESS.value)


if __name__ == "__main__":
    main()
