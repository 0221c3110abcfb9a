"""Basic file IO helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Any, List

import yaml


def read_yaml_file(path: Path) -> Any:
    """Return the parsed YAML if the file exists, otherwise ``None``."""

    if not path.exists():
        return None
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle)


def read_text_lines(path: Path) -> List[str]:
    """Return the file as a list of lines with their line endings stripped.

    Undecodable bytes are replaced rather than raising, so a stray binary
    file with the target extension is still scanned.
    """

    with path.open("r", encoding="utf-8", errors="replace", newline="") as handle:
        return [line.rstrip("\r\n") for line in handle]
