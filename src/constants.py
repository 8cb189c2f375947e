"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    UNITY_ERROR = 1
    INPUT_ERROR = 2
    CONNECTION_ERROR = 3


class Architecture(Enum):
    """Editor architectures understood by Unity Hub.

    Args:
        Enum (string): Architecture name as passed to the releases API.
    """

    X86_64 = "X86_64"
    ARM64 = "ARM64"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    RELEASES_API_URL = "https://services.api.unity.com/unity/editor/release/v1/releases"
    RELEASE_NOTES_URL = "https://unity.com/releases/editor/whats-new/"
    RELEASES_API_LIMIT = 25

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_LEVEL_ENV = "UNITY_SETUP_LOG_LEVEL"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    HTTP_RETRY_MAX = 3
    HTTP_CACHE_TTL_SEC = 300

    # Hub invocation tunables
    MAX_TRANSIENT_RETRIES = 5
    MAX_CORRUPT_INSTALL_RETRIES = 1
    HUB_COMMAND_TIMEOUT = None  # seconds; None waits for the Hub to exit

    PROJECT_VERSION_FILE = "ProjectVersion.txt"
    MODULES_MANIFEST = "modules.json"

    ARCH_LABELS = {
        Architecture.ARM64: "Apple silicon",
        Architecture.X86_64: "Intel",
    }

    DEFAULT_MODULES = {
        "linux": ["linux-il2cpp"],
        "darwin": ["mac-il2cpp"],
        "win32": ["windows-il2cpp"],
    }

    # Build target -> Hub module id, per host platform
    BUILD_TARGET_MODULES = {
        "linux": {
            "StandaloneLinux64": "linux-il2cpp",
            "Android": "android",
            "iOS": "ios",
            "WebGL": "webgl",
            "StandaloneWindows64": "windows-mono",
            "StandaloneOSX": "mac-mono",
        },
        "darwin": {
            "StandaloneOSX": "mac-il2cpp",
            "Android": "android",
            "iOS": "ios",
            "tvOS": "appletv",
            "VisionOS": "visionos",
            "WebGL": "webgl",
            "StandaloneWindows64": "windows-mono",
            "StandaloneLinux64": "linux-il2cpp",
        },
        "win32": {
            "StandaloneWindows64": "windows-il2cpp",
            "Android": "android",
            "iOS": "ios",
            "WebGL": "webgl",
            "WSAPlayer": "universal-windows-platform",
            "StandaloneOSX": "mac-mono",
            "StandaloneLinux64": "linux-il2cpp",
        },
    }
