"""Classification of Unity Hub console output.

The Hub reports everything, including failures, as unstructured text. Suppress
rules only filter the lines that get forwarded to the log. Every remaining
line is matched on its own against the outcome rules in order, and the
outcome is the most severe one found: retry, then fatal, then retry-install,
then benign-empty.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Tuple


class Action(Enum):
    """What the caller should do with a Hub invocation."""
    SUPPRESS = "suppress"
    RETRY = "retry"
    BENIGN_EMPTY = "benign_empty"
    RETRY_INSTALL = "retry_install"
    FATAL = "fatal"
    SUCCESS = "success"


@dataclass(frozen=True)
class OutputRule:
    """A tagged pattern -> action rule."""
    name: str
    pattern: "re.Pattern[str]"
    action: Action

    @classmethod
    def literal(cls, name: str, text: str, action: Action) -> "OutputRule":
        return cls(name, re.compile(re.escape(text)), action)


@dataclass(frozen=True)
class Classification:
    """Outcome of classifying one Hub invocation."""
    action: Action
    output: str
    rule: Optional[str] = None
    message: Optional[str] = None
    suppressed: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def lines(self) -> List[str]:
        return [line for line in self.output.splitlines() if line]


SUPPRESS_RULES: Tuple[OutputRule, ...] = tuple(
    OutputRule.literal(f"noise:{index}", text, Action.SUPPRESS)
    for index, text in enumerate((
        "This error originated either by throwing inside of an async function without a catch block",
        "Unexpected error attempting to determine if executable file exists",
        "dri3 extension not supported",
        "Failed to connect to the bus:",
        "Checking for beta autoupdate feature for deb/rpm distributions",
        "Found package-type: deb",
        "XPC error for connection com.apple.backupd.sandbox.xpc: Connection invalid",
    ))
)

OUTCOME_RULES: Tuple[OutputRule, ...] = (
    OutputRule("assertion_failed", re.compile(r"Assertion (?P<message>.+) failed"), Action.RETRY),
    OutputRule.literal("async_hook_corrupted", "async hook stack has become corrupted", Action.RETRY),
    OutputRule("no_modules", re.compile(r"Error: (?P<message>No modules found to install\.)"), Action.BENIGN_EMPTY),
    OutputRule(
        "already_installed",
        re.compile(r"Error: .*(?P<message>Editor already installed in this location.*)"),
        Action.RETRY_INSTALL,
    ),
    OutputRule(
        "download_timeout",
        re.compile(r"Error: .*(?P<message>failed to download\. Error given: Request timeout.*)"),
        Action.RETRY_INSTALL,
    ),
    OutputRule("error", re.compile(r"Error: (?P<message>.+)"), Action.FATAL),
)

DEFAULT_RULES: Tuple[OutputRule, ...] = SUPPRESS_RULES + OUTCOME_RULES


# Most severe first
_PRECEDENCE: Tuple[Action, ...] = (Action.RETRY, Action.FATAL, Action.RETRY_INSTALL, Action.BENIGN_EMPTY)


def filter_lines(raw: str, rules: Iterable[OutputRule] = DEFAULT_RULES) -> Tuple[List[str], List[str]]:
    """Split raw output into (forwarded, suppressed) non-blank lines."""
    suppress = [rule for rule in rules if rule.action is Action.SUPPRESS]
    forwarded: List[str] = []
    suppressed: List[str] = []
    for line in raw.splitlines():
        if not line.strip():
            continue
        if any(rule.pattern.search(line) for rule in suppress):
            suppressed.append(line)
        else:
            forwarded.append(line)
    return forwarded, suppressed


def match_line(line: str, rules: Iterable[OutputRule]) -> Optional[Tuple[OutputRule, "re.Match[str]"]]:
    """First outcome rule matching ``line`` on its own."""
    for rule in rules:
        if rule.action is Action.SUPPRESS:
            continue
        match = rule.pattern.search(line)
        if match:
            return rule, match
    return None


def classify(raw: str, rules: Iterable[OutputRule] = DEFAULT_RULES) -> Classification:
    """Classify the combined stdout/stderr of one Hub invocation.

    Every forwarded line is matched on its own, so an allow-listed ``Error:``
    line never hides another error reported in the same output.
    """
    rules = tuple(rules)
    forwarded, suppressed = filter_lines(raw, rules)
    output = "\n".join(forwarded)
    if output:
        output += "\n"

    hits = {}
    for line in forwarded:
        hit = match_line(line, rules)
        if hit:
            hits.setdefault(hit[0].action, hit)

    for action in _PRECEDENCE:
        if action in hits:
            rule, match = hits[action]
            message = match.groupdict().get("message") or match.group(0)
            return Classification(action, output, rule.name, message.strip(), tuple(suppressed))

    return Classification(Action.SUCCESS, output, suppressed=tuple(suppressed))
