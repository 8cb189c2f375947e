"""Tests for Unity Hub output classification."""

import re

from hub.classifier import (
    DEFAULT_RULES,
    Action,
    OutputRule,
    classify,
    filter_lines,
)


class TestFilterLines:
    """Tests for noise suppression."""

    def test_noise_is_suppressed(self):
        raw = "dri3 extension not supported\nInstalling 2022.3.5f1\n\nFound package-type: deb\n"
        forwarded, suppressed = filter_lines(raw)
        assert forwarded == ["Installing 2022.3.5f1"]
        assert len(suppressed) == 2

    def test_suppressed_lines_never_decide_outcome(self):
        raw = (
            "This error originated either by throwing inside of an async function without a catch block\n"
            "done\n"
        )
        result = classify(raw)
        assert result.action is Action.SUCCESS
        assert result.lines == ["done"]
        assert len(result.suppressed) == 1


class TestClassify:
    """Tests for outcome rules."""

    def test_success(self):
        result = classify("2022.3.5f1 , installed at /opt/unity\n")
        assert result.action is Action.SUCCESS
        assert result.rule is None

    def test_empty_output_is_success(self):
        result = classify("")
        assert result.action is Action.SUCCESS
        assert result.output == ""

    def test_assertion_is_transient(self):
        result = classify("Assertion !(isolate->...) failed\n")
        assert result.action is Action.RETRY
        assert result.rule == "assertion_failed"

    def test_async_hook_is_transient(self):
        result = classify("Error: async hook stack has become corrupted (actual: 2, expected: 0)\n")
        assert result.action is Action.RETRY

    def test_no_modules_is_benign(self):
        result = classify("Error: No modules found to install.\n")
        assert result.action is Action.BENIGN_EMPTY
        assert result.message == "No modules found to install."

    def test_already_installed_is_retryable(self):
        result = classify("Error: 2022.3.5f1: Editor already installed in this location.\n")
        assert result.action is Action.RETRY_INSTALL
        assert result.message.startswith("Editor already installed")

    def test_download_timeout_is_retryable(self):
        result = classify("Error: editor failed to download. Error given: Request timeout\n")
        assert result.action is Action.RETRY_INSTALL

    def test_other_errors_are_fatal(self):
        result = classify("Something\nError: Unable to find release for 1234.5.6f1\n")
        assert result.action is Action.FATAL
        assert result.message == "Unable to find release for 1234.5.6f1"

    def test_allow_listed_error_does_not_hide_later_error(self):
        raw = "Error: No modules found to install.\nError: something else\n"
        result = classify(raw)
        assert result.action is Action.FATAL
        assert result.message == "something else"

    def test_allow_listed_error_does_not_hide_earlier_error(self):
        raw = "Error: Failed to install module android\nError: No modules found to install.\n"
        result = classify(raw)
        assert result.action is Action.FATAL
        assert result.message == "Failed to install module android"

    def test_retry_install_does_not_hide_error(self):
        raw = "Error: Editor already installed in this location.\nError: disk full\n"
        assert classify(raw).action is Action.FATAL

    def test_transient_crash_outranks_errors(self):
        raw = "Error: disk full\nAssertion foo failed\n"
        assert classify(raw).action is Action.RETRY

    def test_benign_only_when_every_error_is_allow_listed(self):
        raw = "Omitting module android because it's already installed\nError: No modules found to install.\n"
        assert classify(raw).action is Action.BENIGN_EMPTY

    def test_custom_rules(self):
        rules = DEFAULT_RULES + (OutputRule("flaky", re.compile(r"ECONNRESET"), Action.RETRY),)
        assert classify("socket ECONNRESET\n", rules).action is Action.RETRY
        assert classify("socket ECONNRESET\n").action is Action.SUCCESS

    def test_literal_rule_escapes_pattern(self):
        rule = OutputRule.literal("dots", "a.b", Action.FATAL)
        assert classify("axb\n", (rule,)).action is Action.SUCCESS
        assert classify("a.b\n", (rule,)).action is Action.FATAL
