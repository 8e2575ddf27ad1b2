"""Constants for the view arbitration domain."""

from __future__ import annotations

FRONTMATTER_KEY = "kanban-plugin"
DEFAULT_BOARD_VARIANT = "basic"
DEFAULT_NEW_BOARD_NAME = "Untitled Kanban"

MARKDOWN_VIEW_TYPE = "markdown"
BOARD_VIEW_TYPE = "kanban"
BOARD_ICON = "lucide-trello"
HOVER_LINK_DISPLAY = "Kanban"

SEARCH_COMMAND_ID = "editor:open-search"

COMMAND_NAMES = {
    "create-new-kanban-board": "Create new board",
    "archive-completed-cards": "Archive completed cards in active board",
    "toggle-kanban-view": "Toggle between Kanban and markdown mode",
    "convert-to-kanban": "Convert empty note to Kanban",
}

MENU_OPEN_AS_BOARD = "Open as kanban board"
MENU_NEW_BOARD = "New kanban board"
NOTICE_CREATE_FAILED = "Error creating kanban board: {error}"

ERROR_REMEDIATIONS = {
    "BOARD_SETTINGS_INVALID": "Fix the board settings file so that it is a YAML mapping of known keys.",
    "BOARD_SETTINGS_TYPE": "Use string values for new_board_name and board_variant.",
    "BOARD_SETTINGS_UNREADABLE": "Check that the settings file exists and is readable YAML.",
}


def remediation_for(code: str) -> str | None:
    """Return default remediation text for a given error code."""

    return ERROR_REMEDIATIONS.get(code)
