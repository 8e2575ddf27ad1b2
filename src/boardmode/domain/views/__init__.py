"""View arbitration domain exports."""

from .annotations import declares_board, has_frontmatter_key_raw, parse_frontmatter, render_board_frontmatter
from .constants import BOARD_VIEW_TYPE, FRONTMATTER_KEY, MARKDOWN_VIEW_TYPE
from .events import OverrideChange, TransitionDecision
from .overrides import OverrideStore
from .value_objects import BoardSettings, BoardSettingsError, Mode, TransitionRequest, override_key

__all__ = [
    "BOARD_VIEW_TYPE",
    "BoardSettings",
    "BoardSettingsError",
    "FRONTMATTER_KEY",
    "MARKDOWN_VIEW_TYPE",
    "Mode",
    "OverrideChange",
    "OverrideStore",
    "TransitionDecision",
    "TransitionRequest",
    "declares_board",
    "has_frontmatter_key_raw",
    "override_key",
    "parse_frontmatter",
    "render_board_frontmatter",
]
