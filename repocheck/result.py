"""Core result data structures for the file scanner."""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Dict, List

READ_ERROR = "read"
RULE_ERROR = "rule"


@dataclass(frozen=True)
class Violation:
    """A single line matched by a rule."""

    rule: str
    message: str
    path: str
    line: int

    def format(self) -> str:
        return f"{self.message} => {self.path}:{self.line}"

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


@dataclass(frozen=True)
class ScanError:
    """A file that could not be scanned to completion."""

    path: str
    kind: str
    detail: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass
class ScanResult:
    """Counters and records accumulated over one traversal."""

    root: str = ""
    files_scanned: int = 0
    files_matched: int = 0
    violations: List[Violation] = field(default_factory=list)
    errors: List[ScanError] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return bool(self.violations)

    def add_violation(self, violation: Violation) -> None:
        self.violations.append(violation)

    def add_error(self, error: ScanError) -> None:
        self.errors.append(error)

    def exit_code(self) -> int:
        return 1 if self.failed else 0

    def to_dict(self) -> Dict[str, object]:
        return {
            "root": self.root,
            "files_scanned": self.files_scanned,
            "files_matched": self.files_matched,
            "violations": [violation.to_dict() for violation in self.violations],
            "errors": [error.to_dict() for error in self.errors],
            "passed": not self.failed,
        }


def format_summary(result: ScanResult) -> str:
    """Create the completion lines printed once the walk is done."""

    lines: List[str] = []
    lines.append(f"finished walking tree.  Scanned: {result.files_scanned} files")
    lines.append(f"Checked   : {result.files_matched}")
    lines.append(f"Violations: {len(result.violations)}")
    if result.errors:
        lines.append(f"Errors    : {len(result.errors)}")
    status = "FAIL" if result.failed else "PASS"
    lines.append(f"Status    : {status}")
    return "\n".join(lines)
