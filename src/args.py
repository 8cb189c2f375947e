"""Argument parsing functionality for unity-setup."""

import argparse


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="unity-setup",
        description=(
            "unity-setup - Resolve and install Unity editors through Unity Hub"
        ),
        add_help=True,
    )

    parser.add_argument("-u", "--unity-version",
                        dest="UNITY_VERSION",
                        help="Version specifiers, e.g. '6000', '2022.3.x', '2021.3.5f1 (abc123)'",
                        action="append", type=str,
                        default=[])
    parser.add_argument("-m", "--modules",
                        dest="MODULES",
                        help="Unity Hub module ids to install (comma or space separated)",
                        action="append", type=str,
                        default=[])
    parser.add_argument("-b", "--build-targets",
                        dest="BUILD_TARGETS",
                        help="Build targets mapped to modules, e.g. Android, iOS, WebGL",
                        action="append", type=str,
                        default=[])
    parser.add_argument("-a", "--architecture",
                        dest="ARCHITECTURE",
                        help="Editor architecture (x86_64 or arm64); defaults to the host",
                        action="store", type=str.upper,
                        choices=["X86_64", "ARM64"])
    parser.add_argument("--install-path",
                        dest="INSTALL_PATH",
                        help="Directory Unity Hub installs editors into",
                        action="store", type=str)
    parser.add_argument("--version-file",
                        dest="VERSION_FILE",
                        help="Path to ProjectVersion.txt, or 'none' to skip the project lookup",
                        action="store", type=str)
    parser.add_argument("--hub-path",
                        dest="HUB_PATH",
                        help="Path to the Unity Hub executable",
                        action="store", type=str)
    parser.add_argument("--max-retries",
                        dest="MAX_RETRIES",
                        help="Retries for transient Unity Hub crashes (default: 5)",
                        action="store", type=int)
    parser.add_argument("--hub-timeout",
                        dest="HUB_TIMEOUT",
                        help="Seconds before a Unity Hub command is considered hung",
                        action="store", type=float)
    parser.add_argument("--legacy-installer",
                        dest="LEGACY_INSTALLER",
                        help="Command used to install Unity 4.x and older (receives version and install dir)",
                        action="store", type=str)

    # Config file (general)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level (default: $UNITY_SETUP_LOG_LEVEL or INFO)",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default=None)
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Do not output to console.",
                        action="store_true")

    return parser.parse_args(argv)
