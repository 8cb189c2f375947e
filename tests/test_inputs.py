"""Tests for argument parsing, config files and run input assembly."""

import json

import pytest

from args import parse_args
from cli_config import load_config
from common.errors import ParseError
from constants import Architecture, Constants
from inputs import build_inputs, find_version_file, resolve_modules, split_list

PROJECT_VERSION = "m_EditorVersion: 2022.3.5f1\nm_EditorVersionWithRevision: 2022.3.5f1 (9674261d40ee)\n"


def _project(workspace):
    settings = workspace / "MyGame" / "ProjectSettings"
    settings.mkdir(parents=True)
    path = settings / "ProjectVersion.txt"
    path.write_text(PROJECT_VERSION, encoding="utf-8")
    return path


class TestParseArgs:
    """Tests for the command line surface."""

    def test_defaults(self):
        args = parse_args([])
        assert args.UNITY_VERSION == []
        assert args.MODULES == []
        assert args.ARCHITECTURE is None
        assert args.LOG_LEVEL is None

    def test_repeatable_and_case_insensitive(self):
        args = parse_args(["-u", "6000", "-u", "2022.3.x", "-a", "arm64", "--max-retries", "2"])
        assert args.UNITY_VERSION == ["6000", "2022.3.x"]
        assert args.ARCHITECTURE == "ARM64"
        assert args.MAX_RETRIES == 2

    def test_invalid_architecture_rejected(self):
        with pytest.raises(SystemExit):
            parse_args(["-a", "mips"])


class TestLoadConfig:
    """Tests for YAML/JSON config loading."""

    def test_no_path(self):
        assert load_config(None) == {}

    def test_missing_file(self, tmp_path):
        assert load_config(str(tmp_path / "nope.yml")) == {}

    def test_yaml_with_kebab_keys(self, tmp_path):
        path = tmp_path / "setup.yml"
        path.write_text("unity-version: ['6000']\nmodules: [android]\nbogus: 1\n", encoding="utf-8")
        assert load_config(str(path)) == {"unity_version": ["6000"], "modules": ["android"]}

    def test_json(self, tmp_path):
        path = tmp_path / "setup.json"
        path.write_text(json.dumps({"max_retries": 3}), encoding="utf-8")
        assert load_config(str(path)) == {"max_retries": 3}

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "setup.yml"
        path.write_text("", encoding="utf-8")
        assert load_config(str(path)) == {}

    def test_non_mapping_raises(self, tmp_path):
        path = tmp_path / "setup.yml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ParseError):
            load_config(str(path))

    def test_invalid_yaml_raises(self, tmp_path):
        path = tmp_path / "setup.yml"
        path.write_text("modules: [android\n", encoding="utf-8")
        with pytest.raises(ParseError):
            load_config(str(path))


class TestModules:
    """Tests for module list assembly."""

    def test_split_list(self):
        assert split_list("android, ios webgl") == ["android", "ios", "webgl"]
        assert split_list(["a,b", "c"]) == ["a", "b", "c"]
        assert split_list(None) == []

    def test_defaults_when_nothing_requested(self):
        assert resolve_modules([], [], "linux") == Constants.DEFAULT_MODULES["linux"]

    def test_build_targets_mapped(self):
        assert resolve_modules(["android", "none"], ["iOS", "Bogus"], "darwin") == ["android", "ios"]

    def test_no_duplicates(self):
        assert resolve_modules(["android"], ["Android"], "win32") == ["android"]

    def test_none_disables_defaults(self):
        assert resolve_modules(["none"], [], "linux") == []


class TestFindVersionFile:
    """Tests for ProjectVersion.txt discovery."""

    def test_none_disables(self, tmp_path):
        _project(tmp_path)
        assert find_version_file("none", str(tmp_path)) is None

    def test_discovered(self, tmp_path):
        path = _project(tmp_path)
        assert find_version_file(None, str(tmp_path)) == str(path)

    def test_explicit_relative(self, tmp_path):
        path = _project(tmp_path)
        found = find_version_file("MyGame/ProjectSettings/ProjectVersion.txt", str(tmp_path))
        assert found == str(path)

    def test_not_found(self, tmp_path):
        assert find_version_file(None, str(tmp_path)) is None


class TestBuildInputs:
    """Tests for build_inputs."""

    def test_versions_sorted_with_architecture(self, tmp_path):
        args = parse_args(["-u", "6000", "-u", "2021.3.x", "-a", "arm64", "--version-file", "none"])
        inputs = build_inputs(args, {}, "linux", str(tmp_path))
        assert [v.version for v in inputs.versions] == ["2021.3.0", "6000"]
        assert all(v.architecture is Architecture.ARM64 for v in inputs.versions)
        assert inputs.modules == ["linux-il2cpp"]
        assert inputs.project_path is None

    def test_version_from_project(self, tmp_path):
        _project(tmp_path)
        inputs = build_inputs(parse_args(["-a", "x86_64"]), {}, "linux", str(tmp_path))
        assert [str(v) for v in inputs.versions] == ["2022.3.5f1 (9674261d40ee)"]
        assert inputs.project_path == str(tmp_path / "MyGame")

    def test_explicit_versions_win_over_project(self, tmp_path):
        _project(tmp_path)
        inputs = build_inputs(parse_args(["-u", "6000.0.5f1"]), {}, "linux", str(tmp_path))
        assert [v.version for v in inputs.versions] == ["6000.0.5f1"]
        assert inputs.project_path == str(tmp_path / "MyGame")

    def test_cli_overrides_config(self, tmp_path):
        config = {"modules": ["ios"], "max_retries": 2, "legacy_installer": "install4 --quiet", "unity_version": "6000"}
        args = parse_args(["-m", "android", "--version-file", "none"])
        inputs = build_inputs(args, config, "linux", str(tmp_path))
        assert inputs.modules == ["android"]
        assert inputs.max_retries == 2
        assert inputs.legacy_installer == ["install4", "--quiet"]
        assert [v.version for v in inputs.versions] == ["6000"]

    def test_invalid_architecture_in_config(self, tmp_path):
        with pytest.raises(ParseError):
            build_inputs(parse_args([]), {"architecture": "mips"}, "linux", str(tmp_path))

    def test_invalid_version_raises(self, tmp_path):
        with pytest.raises(ParseError):
            build_inputs(parse_args(["-u", "latest", "--version-file", "none"]), {}, "linux", str(tmp_path))
