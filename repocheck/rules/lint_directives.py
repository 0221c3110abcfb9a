"""Reject tslint directives that switch off ``no-any`` outside test files."""

from __future__ import annotations

from . import make_rule

NON_SPEC_FILE_FILTER = r"^((?!spec).)*[tj]s$"

TSLINT_NO_ANY = make_rule(
    "tslint-no-any",
    r"(?:tslint:).*disable(?!-next-line).*(?::no-any)",
    'Disallow changing tslint "no-any" rule in non-spec files',
    file_filter=NON_SPEC_FILE_FILTER,
)

RULES = (TSLINT_NO_ANY,)
