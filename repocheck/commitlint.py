"""Conventional commit message checker driven by ``config/commitlint.yaml``.

Usage (as a commit-msg hook, the hook passes the message file path)::

    repocheck-commit-msg .git/COMMIT_EDITMSG

Every rule is configured as ``[level, applicability, value]``. ``applicability``
is ``always`` or ``never`` and inverts the rule's condition.
"""

from __future__ import annotations

import argparse
import logging
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .config import COMMIT_PROMPT_CONFIG, COMMITLINT_CONFIG
from .errors import ConfigError, RepoCheckError
from .severity import Severity
from .utils import read_yaml_file

logger = logging.getLogger(__name__)

DEFAULT_MESSAGE_FILE = ".git/COMMIT_EDITMSG"

HEADER_PATTERN = re.compile(
    r"^(?P<type>\w*)"
    r"(?:\((?P<scope>[^()]*)\))?"  # optional (scope)
    r"(?P<breaking>!)?"
    r": (?P<subject>.*)$"
)
FOOTER_TOKEN_PATTERN = re.compile(r"^(?:BREAKING[ -]CHANGE|[\w-]+)(?:: | #)")
SCOPE_DELIMITERS = re.compile(r"[/\\,]")
WORD_PATTERN = re.compile(r"[A-Z]?[a-z]+|[A-Z]+(?![a-z])|\d+")

IGNORED_PATTERNS = (
    re.compile(r"^Merge\b"),
    re.compile(r"^Automatic merge\b"),
    re.compile(r'^Revert ".*"'),
    re.compile(r"^(?:fixup|squash)! "),
)

ALWAYS = "always"
NEVER = "never"


@dataclass
class CommitMessage:
    """A commit message split into conventional commit parts."""

    header: str
    type: Optional[str] = None
    scope: Optional[str] = None
    subject: Optional[str] = None
    breaking: bool = False
    body: List[str] = field(default_factory=list)
    footer: List[str] = field(default_factory=list)
    body_leading_blank: bool = True
    footer_leading_blank: bool = True


@dataclass(frozen=True)
class RuleSetting:
    level: int
    when: str
    value: Any = None


@dataclass
class LintConfig:
    rules: Dict[str, RuleSetting] = field(default_factory=dict)


@dataclass(frozen=True)
class Problem:
    severity: Severity
    rule: str
    message: str

    def format(self) -> str:
        return f"{self.severity.marker}   {self.message} [{self.rule}]"


@dataclass
class LintReport:
    """Problems found in a single commit message."""

    problems: List[Problem] = field(default_factory=list)
    ignored: bool = False

    @property
    def errors(self) -> List[Problem]:
        return [problem for problem in self.problems if problem.severity is Severity.ERROR]

    @property
    def warnings(self) -> List[Problem]:
        return [problem for problem in self.problems if problem.severity is Severity.WARNING]

    @property
    def valid(self) -> bool:
        return not self.errors


# ----------------------------------------------------------------------
# Parsing
# ----------------------------------------------------------------------
def parse_message(text: str) -> CommitMessage:
    """Split ``text`` into header, body and footer; ``#`` lines are dropped."""

    lines = [line.rstrip() for line in text.splitlines() if not line.startswith("#")]
    while lines and not lines[-1]:
        lines.pop()
    while lines and not lines[0]:
        lines.pop(0)
    if not lines:
        return CommitMessage(header="")

    header = lines[0]
    message = CommitMessage(header=header)
    match = HEADER_PATTERN.match(header)
    if match:
        message.type = match.group("type") or None
        message.scope = match.group("scope") or None
        message.subject = match.group("subject").strip() or None
        message.breaking = bool(match.group("breaking"))

    rest = lines[1:]
    footer_start = _find_footer_start(rest)
    body_lines = rest if footer_start is None else rest[:footer_start]
    if footer_start is not None:
        message.footer = rest[footer_start:]
        message.footer_leading_blank = footer_start > 0 and not rest[footer_start - 1]

    if any(body_lines):
        message.body_leading_blank = not body_lines[0]
        message.body = _trim_blank(body_lines)
    return message


def _find_footer_start(rest: Sequence[str]) -> Optional[int]:
    # The footer is the last paragraph, and only when it opens with a trailer token.
    start = len(rest)
    while start > 0 and rest[start - 1]:
        start -= 1
    if start < len(rest) and FOOTER_TOKEN_PATTERN.match(rest[start]):
        return start
    return None


def _trim_blank(lines: Sequence[str]) -> List[str]:
    trimmed = list(lines)
    while trimmed and not trimmed[0]:
        trimmed.pop(0)
    while trimmed and not trimmed[-1]:
        trimmed.pop()
    return trimmed


def is_ignored(text: str) -> bool:
    header = text.strip().splitlines()[0] if text.strip() else ""
    return any(pattern.match(header) for pattern in IGNORED_PATTERNS)


# ----------------------------------------------------------------------
# Rules
# ----------------------------------------------------------------------
RuleCheck = Callable[[CommitMessage, str, Any], Tuple[bool, str]]


def _negate(when: str, condition: bool) -> bool:
    return not condition if when == NEVER else condition


def _upper_first(word: str) -> str:
    return word[:1].upper() + word[1:]


CASE_TRANSFORMS: Dict[str, Callable[[str], str]] = {
    "lower-case": str.lower,
    "upper-case": str.upper,
    "sentence-case": _upper_first,
    "start-case": lambda text: " ".join(_upper_first(word) for word in WORD_PATTERN.findall(text)),
    "pascal-case": lambda text: "".join(word.capitalize() for word in WORD_PATTERN.findall(text)),
}


def _case_matches(text: str, cases: Any) -> bool:
    """Return whether ``text`` is already written in any of ``cases``."""

    for case in [cases] if isinstance(cases, str) else list(cases or []):
        if case not in CASE_TRANSFORMS:
            raise ConfigError(f"Unsupported case: {case}")
        if CASE_TRANSFORMS[case](text) == text:
            return True
    return False


def _describe_cases(cases: Any) -> str:
    return cases if isinstance(cases, str) else ", ".join(cases or [])


def _type_empty(message: CommitMessage, when: str, _value: Any) -> Tuple[bool, str]:
    empty = not message.type
    return _negate(when, empty), "type may not be empty" if when == NEVER else "type must be empty"


def _type_case(message: CommitMessage, when: str, value: Any) -> Tuple[bool, str]:
    if not message.type:
        return True, ""
    return _negate(when, _case_matches(message.type, value)), f"type must {'not ' if when == NEVER else ''}be {value}"


def _type_enum(message: CommitMessage, when: str, value: Any) -> Tuple[bool, str]:
    if not message.type:
        return True, ""
    allowed = list(value or [])
    text = f"type must {'not ' if when == NEVER else ''}be one of [{', '.join(allowed)}]"
    return _negate(when, message.type in allowed), text


def _scope_case(message: CommitMessage, when: str, value: Any) -> Tuple[bool, str]:
    if not message.scope:
        return True, ""
    scopes = [scope for scope in SCOPE_DELIMITERS.split(message.scope) if scope]
    matches = all(_case_matches(scope, value) for scope in scopes)
    return _negate(when, matches), f"scope must {'not ' if when == NEVER else ''}be {value}"


def _subject_case(message: CommitMessage, when: str, value: Any) -> Tuple[bool, str]:
    # Subjects opening with a digit or symbol carry no case.
    if not message.subject or not message.subject[0].isalpha():
        return True, ""
    text = f"subject must {'not ' if when == NEVER else ''}be {_describe_cases(value)}"
    return _negate(when, _case_matches(message.subject, value)), text


def _subject_empty(message: CommitMessage, when: str, _value: Any) -> Tuple[bool, str]:
    empty = not message.subject
    return _negate(when, empty), "subject may not be empty" if when == NEVER else "subject must be empty"


def _subject_full_stop(message: CommitMessage, when: str, value: Any) -> Tuple[bool, str]:
    if not message.subject:
        return True, ""
    stop = value or "."
    text = "subject may not end with full stop" if when == NEVER else "subject must end with full stop"
    return _negate(when, message.subject.endswith(stop)), text


def _header_max_length(message: CommitMessage, _when: str, value: Any) -> Tuple[bool, str]:
    length = len(message.header)
    return length <= int(value), f"header must not be longer than {value} characters, current length is {length}"


def _max_line_length(section: str) -> RuleCheck:
    def check(message: CommitMessage, _when: str, value: Any) -> Tuple[bool, str]:
        lines = getattr(message, section)
        valid = all(len(line) <= int(value) for line in lines)
        return valid, f"{section}'s lines must not be longer than {value} characters"

    return check


def _leading_blank(section: str) -> RuleCheck:
    def check(message: CommitMessage, when: str, _value: Any) -> Tuple[bool, str]:
        if not getattr(message, section):
            return True, ""
        blank = getattr(message, f"{section}_leading_blank")
        text = f"{section} must {'not ' if when == NEVER else ''}have leading blank line"
        return _negate(when, blank), text

    return check


RULE_CHECKS: Dict[str, RuleCheck] = {
    "type-empty": _type_empty,
    "type-case": _type_case,
    "type-enum": _type_enum,
    "scope-case": _scope_case,
    "subject-empty": _subject_empty,
    "subject-case": _subject_case,
    "subject-full-stop": _subject_full_stop,
    "header-max-length": _header_max_length,
    "body-max-line-length": _max_line_length("body"),
    "footer-max-line-length": _max_line_length("footer"),
    "body-leading-blank": _leading_blank("body"),
    "footer-leading-blank": _leading_blank("footer"),
}


# ----------------------------------------------------------------------
# Configuration
# ----------------------------------------------------------------------
def load_lint_config(path: Optional[Path] = None) -> LintConfig:
    """Load and validate the lint rule table."""

    config_path = path or COMMITLINT_CONFIG
    data = read_yaml_file(config_path)
    if not isinstance(data, dict):
        raise ConfigError(f"Lint config at {config_path} is missing or not a mapping")
    raw_rules = data.get("rules") or {}
    if not isinstance(raw_rules, dict):
        raise ConfigError(f"'rules' in {config_path} must be a mapping")

    rules: Dict[str, RuleSetting] = {}
    for name, entry in raw_rules.items():
        if name not in RULE_CHECKS:
            raise ConfigError(f"Unknown commit lint rule: {name}")
        if not isinstance(entry, list) or not 1 <= len(entry) <= 3:
            raise ConfigError(f"Rule {name} must be [level, applicability, value]")
        level = entry[0]
        when = entry[1] if len(entry) > 1 else ALWAYS
        value = entry[2] if len(entry) > 2 else None
        if level not in (0, 1, 2):
            raise ConfigError(f"Rule {name} has invalid level {level!r}")
        if when not in (ALWAYS, NEVER):
            raise ConfigError(f"Rule {name} has invalid applicability {when!r}")
        rules[name] = RuleSetting(level=level, when=when, value=value)
    return LintConfig(rules=rules)


def load_prompt_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load the interactive commit prompt configuration."""

    config_path = path or COMMIT_PROMPT_CONFIG
    data = read_yaml_file(config_path)
    if not isinstance(data, dict):
        raise ConfigError(f"Prompt config at {config_path} is missing or not a mapping")
    types = data.get("types") or []
    if not all(isinstance(item, dict) and "value" in item and "name" in item for item in types):
        raise ConfigError(f"Every commit type in {config_path} needs a value and a name")
    return data


# ----------------------------------------------------------------------
# Linting
# ----------------------------------------------------------------------
def lint_message(text: str, config: LintConfig) -> LintReport:
    if is_ignored(text):
        logger.debug("ignoring commit message: %s", text.splitlines()[0] if text else "")
        return LintReport(ignored=True)

    message = parse_message(text)
    report = LintReport()
    for name, setting in config.rules.items():
        severity = Severity.from_level(setting.level)
        if severity is None:
            continue
        valid, detail = RULE_CHECKS[name](message, setting.when, setting.value)
        if not valid:
            report.problems.append(Problem(severity=severity, rule=name, message=detail))
    return report


def format_report(report: LintReport, prompt_config: Optional[Dict[str, Any]] = None) -> str:
    lines = [problem.format() for problem in report.problems]
    if prompt_config and any(problem.rule == "type-enum" for problem in report.problems):
        lines.append("")
        lines.append("Allowed commit types:")
        for item in prompt_config.get("types", []):
            lines.append(f"  {item['name']}")
    lines.append("")
    lines.append(f"found {len(report.errors)} problems, {len(report.warnings)} warnings")
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Check a commit message against the commit conventions")
    parser.add_argument(
        "message_file",
        nargs="?",
        default=DEFAULT_MESSAGE_FILE,
        help="Path to the commit message file (defaults to .git/COMMIT_EDITMSG).",
    )
    parser.add_argument("--config", type=Path, default=None, help="Alternate lint rule table (YAML).")
    parser.add_argument("--prompt-config", type=Path, default=None, help="Alternate commit prompt config (YAML).")
    return parser


def main(argv: List[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)

    path = Path(args.message_file)
    if not path.exists():
        print(f"Commit message file not found: {path}", file=sys.stderr)
        return 2

    try:
        config = load_lint_config(args.config)
        prompt_config = load_prompt_config(args.prompt_config)
        report = lint_message(path.read_text(encoding="utf-8", errors="ignore"), config)
    except RepoCheckError as exc:
        print(f"Invalid commit convention config: {exc}", file=sys.stderr)
        return 2

    if report.problems:
        sys.stderr.write(format_report(report, prompt_config) + "\n")
    return 0 if report.valid else 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
