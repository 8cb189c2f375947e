"""Error taxonomy shared by the resolver and the Hub orchestrator."""

from typing import Optional


class UnitySetupError(Exception):
    """Base class for every error surfaced to the command line."""


class ParseError(UnitySetupError, ValueError):
    """Raised when a version specifier or version file cannot be parsed."""


class ResolutionError(UnitySetupError):
    """Raised when no concrete release can be determined for a version."""


class CatalogError(ResolutionError):
    """Raised when the release catalog request fails or returns nothing usable."""


class CliError(UnitySetupError):
    """Base class for failures reported by the Hub command line."""

    def __init__(self, message: str, output: Optional[str] = None):
        super().__init__(message)
        self.output = output


class TransientCliError(CliError):
    """Raised once a transient Hub crash keeps recurring past the retry budget."""


class RetryableInstallError(CliError):
    """Raised for install failures that clear up after removing the partial install."""


class FatalCliError(CliError):
    """Raised for Hub errors that cannot be recovered from."""


class VerificationError(UnitySetupError):
    """Raised when an installed editor cannot be found or accessed afterwards."""
