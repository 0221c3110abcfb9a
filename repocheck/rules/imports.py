"""Forbidden import paths."""

from __future__ import annotations

from . import make_rule

SRC_IMPORT = make_rule(
    "src-import",
    r".*import.*from.*/src.*",
    "Invalid import path starting with /src",
)

XPO_DEEP_IMPORT = make_rule(
    "xpo-deep-import",
    r".*import.*@xpo.*/lib/.*",
    "Invalid import path deep linking into @xpo /lib",
)

# The root material module pulls in every component; import the entry points instead.
MATERIAL_ROOT_IMPORT = make_rule(
    "material-root-import",
    r"import.*from.*'@angular/material'",
    "Disallow import from material module",
)

IMPORT_PATH_RULES = (SRC_IMPORT, XPO_DEEP_IMPORT)
MODULE_RULES = (MATERIAL_ROOT_IMPORT,)
