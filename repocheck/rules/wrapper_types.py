"""Reject annotations that use the boxed ``Boolean``/``String``/``Number`` types."""

from __future__ import annotations

from . import Rule, make_rule

# The annotation must be followed by one of these to count as a type position.
TYPE_TERMINATORS = "[, ;()]"


def _wrapper_rule(name: str, wrapper: str, primitive: str, converter: str) -> Rule:
    return make_rule(
        name,
        rf".*: {wrapper}{TYPE_TERMINATORS}.*",
        f"Disallow variables of type `{wrapper}`. "
        f"Use type `{primitive}` or {converter} if converting to a {primitive}",
    )


BOOLEAN_WRAPPER = _wrapper_rule("boolean-wrapper", "Boolean", "boolean", "!!")
STRING_WRAPPER = _wrapper_rule("string-wrapper", "String", "string", "_toString")
NUMBER_WRAPPER = _wrapper_rule("number-wrapper", "Number", "number", "_toNumber")

RULES = (BOOLEAN_WRAPPER, STRING_WRAPPER, NUMBER_WRAPPER)
