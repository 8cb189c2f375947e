"""Unity Hub command line integration."""

from .catalog import ReleaseCatalog
from .classifier import Action, Classification, OutputRule, classify
from .cli import UnityHubCli
from .installer import UnityInstaller
from .platform import HubContext

__all__ = [
    "Action",
    "Classification",
    "HubContext",
    "OutputRule",
    "ReleaseCatalog",
    "UnityHubCli",
    "UnityInstaller",
    "classify",
]
