"""Board/markdown view arbitration engine for pane-based editors."""

__version__ = "0.3.1"

__all__ = ["__version__"]
