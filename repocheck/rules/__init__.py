"""Rule table for the file scanner."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Pattern


@dataclass(frozen=True)
class Rule:
    """A line pattern that is forbidden in the files accepted by ``file_filter``."""

    name: str
    pattern: Pattern[str]
    message: str
    file_filter: Optional[Pattern[str]] = None

    def applies_to(self, path: str) -> bool:
        """Return whether the rule should run against ``path`` at all."""

        if self.file_filter is None:
            return True
        return self.file_filter.search(path) is not None

    def matches(self, line: str) -> bool:
        return self.pattern.search(line) is not None


def make_rule(name: str, pattern: str, message: str, file_filter: Optional[str] = None) -> Rule:
    return Rule(
        name=name,
        pattern=re.compile(pattern),
        message=message,
        file_filter=re.compile(file_filter) if file_filter is not None else None,
    )


def load_rules() -> List[Rule]:
    from . import focused_tests, imports, lint_directives, wrapper_types

    return [
        *focused_tests.RULES,
        *imports.IMPORT_PATH_RULES,
        *wrapper_types.RULES,
        *lint_directives.RULES,
        *imports.MODULE_RULES,
    ]


__all__ = ["Rule", "make_rule", "load_rules"]
