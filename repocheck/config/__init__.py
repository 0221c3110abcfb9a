"""Bundled commit convention configuration files."""

from pathlib import Path

CONFIG_DIR = Path(__file__).parent
COMMITLINT_CONFIG = CONFIG_DIR / "commitlint.yaml"
COMMIT_PROMPT_CONFIG = CONFIG_DIR / "commit_prompt.yaml"
