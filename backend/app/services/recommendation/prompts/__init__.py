"""Prompt loader for the report coach guides."""

from pathlib import Path

_PROMPT_DIR = Path(__file__).parent


def load_prompt(name: str) -> str:
    """Load a markdown prompt shipped next to this module."""
    return (_PROMPT_DIR / name).read_text(encoding="utf-8").strip()
