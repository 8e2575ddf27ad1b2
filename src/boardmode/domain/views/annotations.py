"""Reading and writing the leading annotation (frontmatter) block of a document."""

from __future__ import annotations

import re
from typing import Any, Dict, Mapping, Optional

import yaml

from .constants import DEFAULT_BOARD_VARIANT, FRONTMATTER_KEY

# First block opened and closed by three hyphens, interior matched lazily.
RAW_BLOCK_PATTERN = re.compile(r"---\s+([\w\W]+?)\s+---")
LEADING_BLOCK_PATTERN = re.compile(r"\A---[ \t]*\r?\n(.*?)(?:\r?\n)?^---[ \t]*$", re.DOTALL | re.MULTILINE)


def render_board_frontmatter(variant: str = DEFAULT_BOARD_VARIANT) -> str:
    return "\n".join(["---", "", f"{FRONTMATTER_KEY}: {variant}", "", "---", "", ""])


def has_frontmatter_key_raw(text: str | None) -> bool:
    """Check unparsed text for the board key; used before the metadata cache catches up."""

    if not text:
        return False
    match = RAW_BLOCK_PATTERN.search(text)
    if match is None:
        return False
    return FRONTMATTER_KEY in match.group(1)


def parse_frontmatter(text: str | None) -> Optional[Dict[str, Any]]:
    if not text:
        return None
    match = LEADING_BLOCK_PATTERN.match(text)
    if match is None:
        return None
    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError:
        return None
    if data is None:
        return {}
    if not isinstance(data, dict):
        return None
    return data


def declares_board(frontmatter: Mapping[str, Any] | None) -> bool:
    if not isinstance(frontmatter, Mapping):
        return False
    return bool(frontmatter.get(FRONTMATTER_KEY))


__all__ = [
    "RAW_BLOCK_PATTERN",
    "declares_board",
    "has_frontmatter_key_raw",
    "parse_frontmatter",
    "render_board_frontmatter",
]
