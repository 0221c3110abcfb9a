"""Utility helpers for repocheck."""

from .fileio import read_yaml_file, read_text_lines

__all__ = [
    "read_yaml_file",
    "read_text_lines",
]
