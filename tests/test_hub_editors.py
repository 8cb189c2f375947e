"""Tests for installed-editor parsing and selection."""

import pytest

from common.errors import FatalCliError
from constants import Architecture
from hub.editors import parse_installed, parse_installed_line, parse_releases, select_installed
from versioning.models import ReleaseCandidate
from versioning.unity_version import UnityVersion


class TestParseInstalled:
    """Tests for ``editors -i`` parsing."""

    def test_line_with_architecture(self):
        candidate = parse_installed_line("2022.3.5f1 (Apple silicon) installed at /Applications/Unity/2022.3.5f1/Unity.app")
        assert candidate == ReleaseCandidate("2022.3.5f1", "Apple silicon", "/Applications/Unity/2022.3.5f1/Unity.app")

    def test_line_with_comma(self):
        candidate = parse_installed_line("6000.0.5f1 , installed at C:\\Program Files\\Unity\\Hub\\Editor\\6000.0.5f1\\Editor")
        assert candidate.version == "6000.0.5f1"
        assert candidate.arch_label is None
        assert candidate.path.endswith("6000.0.5f1\\Editor")

    def test_path_with_spaces(self):
        candidate = parse_installed_line("2021.3.45f1 (Intel), installed at /Users/me/Unity Editors/2021.3.45f1/Unity.app")
        assert candidate.arch_label == "Intel"
        assert candidate.path == "/Users/me/Unity Editors/2021.3.45f1/Unity.app"

    def test_unparseable_line_is_fatal(self):
        with pytest.raises(FatalCliError) as exc:
            parse_installed(["2022.3.5f1 , installed at /a", "garbage here"])
        assert "garbage here" in str(exc.value)

    def test_blank_lines_are_ignored(self):
        assert parse_installed(["", "   "]) == []

    def test_parse_releases(self):
        lines = ["6000.2.1f1", "2022.3.62f1 (Apple silicon)", "No releases", "6000.3.0b2"]
        assert parse_releases(lines) == ["6000.2.1f1", "2022.3.62f1", "6000.3.0b2"]


class TestSelectInstalled:
    """Tests for choosing an installed editor."""

    def test_exact_match_preferred(self):
        candidates = [
            ReleaseCandidate("2022.3.62f1", None, "/b"),
            ReleaseCandidate("2022.3.5f1", None, "/a"),
        ]
        assert select_installed(UnityVersion("2022.3.5f1"), candidates).path == "/a"

    def test_architecture_label_wins(self):
        candidates = [
            ReleaseCandidate("6000.0.5f1", "Intel", "/intel"),
            ReleaseCandidate("6000.0.5f1", "Apple silicon", "/arm"),
        ]
        uv = UnityVersion("6000.0.5f1", None, Architecture.ARM64)
        assert select_installed(uv, candidates).path == "/arm"

    def test_unlabeled_before_path_token(self):
        candidates = [
            ReleaseCandidate("6000.0.5f1", "Intel", "/editors/6000.0.5f1-arm64"),
            ReleaseCandidate("6000.0.5f1", None, "/editors/6000.0.5f1"),
        ]
        uv = UnityVersion("6000.0.5f1", None, Architecture.ARM64)
        assert select_installed(uv, candidates).path == "/editors/6000.0.5f1"

    def test_path_token_fallback(self):
        candidates = [ReleaseCandidate("6000.0.5f1", "Intel", "/editors/6000.0.5f1-arm64")]
        uv = UnityVersion("6000.0.5f1", None, Architecture.ARM64)
        assert select_installed(uv, candidates).path == "/editors/6000.0.5f1-arm64"

    def test_wrong_architecture_not_selected(self):
        candidates = [ReleaseCandidate("6000.0.5f1", "Intel", "/intel")]
        uv = UnityVersion("6000.0.5f1", None, Architecture.ARM64)
        assert select_installed(uv, candidates) is None

    def test_compatible_newest_first(self):
        candidates = [
            ReleaseCandidate("2022.3.10f1", None, "/old"),
            ReleaseCandidate("2022.3.62f1", None, "/new"),
            ReleaseCandidate("6000.0.5f1", None, "/other"),
        ]
        assert select_installed(UnityVersion("2022.3.0"), candidates).path == "/new"

    def test_nothing_compatible(self):
        candidates = [ReleaseCandidate("2021.3.45f1", None, "/a")]
        assert select_installed(UnityVersion("2022.3.0"), candidates) is None
