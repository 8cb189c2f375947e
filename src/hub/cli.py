"""Blocking Unity Hub command runner with output classification and bounded retries."""

from __future__ import annotations

import logging
import os
import subprocess
from typing import Iterable, List, Optional

from common.errors import FatalCliError, RetryableInstallError, TransientCliError
from common.logging_utils import extra_context, is_debug_enabled
from .classifier import DEFAULT_RULES, Action, Classification, OutputRule, classify
from .platform import HubContext

logger = logging.getLogger(__name__)


class UnityHubCli:
    """Runs headless Unity Hub commands for one ``HubContext``."""

    def __init__(self, context: HubContext, rules: Iterable[OutputRule] = DEFAULT_RULES):
        self.context = context
        self.rules = tuple(rules)

    def _invoke(self, args: List[str]) -> Optional[str]:
        """Run the Hub once; returns combined output, or None on timeout."""
        cmd = self.context.command(args)
        logger.info('[command]"%s" %s', cmd[0], " ".join(cmd[1:]))
        try:
            result = subprocess.run(  # noqa: S603
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
                timeout=self.context.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            logger.warning("Unity Hub command timed out after %s seconds", self.context.timeout)
            return None
        except OSError as e:
            raise FatalCliError(f"Failed to start Unity Hub at {self.context.hub_path}: {e}") from e

        if is_debug_enabled(logger):
            logger.debug(
                "Unity Hub exited",
                extra=extra_context(
                    event="subprocess_exit",
                    component="hub_cli",
                    action=args[0] if args else None,
                    status_code=result.returncode,
                )
            )
        return result.stdout or ""

    def run(self, args: List[str]) -> Classification:
        """Run a Hub command, retrying transient crashes in place.

        Raises:
            TransientCliError: The crash signature persisted past the retry budget.
            RetryableInstallError: A known recoverable install failure was reported.
            FatalCliError: Any other ``Error:`` line was reported.
        """
        retries = 0
        while True:
            raw = self._invoke(args)
            if raw is None:
                result = Classification(Action.RETRY, "", "timeout", "command timed out")
            else:
                result = classify(raw, self.rules)
                for line in result.lines:
                    logger.info(line)

            if result.action is Action.RETRY:
                retries += 1
                if retries > self.context.max_transient_retries:
                    raise TransientCliError(
                        f"Unity Hub kept failing after {self.context.max_transient_retries} retries: {result.message}",
                        result.output,
                    )
                logger.warning("Unity Hub command failed (%s), retrying...", result.rule)
                continue
            if result.action is Action.RETRY_INSTALL:
                raise RetryableInstallError(f"Failed to execute Unity Hub: {result.message}", result.output)
            if result.action is Action.FATAL:
                raise FatalCliError(f"Failed to execute Unity Hub: {result.message}", result.output)
            return result

    def list_installed(self) -> List[str]:
        """Raw, non-empty lines of ``editors -i``."""
        return [line.strip() for line in self.run(["editors", "-i"]).lines if line.strip()]

    def list_releases(self) -> List[str]:
        """Raw, non-empty lines of ``editors --releases``."""
        return [line.strip() for line in self.run(["editors", "--releases"]).lines if line.strip()]

    def get_install_path(self) -> str:
        result = self.run(["install-path", "--get"]).output.strip()
        if not result:
            raise FatalCliError("Failed to get Unity Hub install path!")
        return result.splitlines()[-1].strip()

    def set_install_path(self, install_path: str) -> None:
        os.makedirs(install_path, exist_ok=True)
        self.run(["install-path", "--set", install_path])
