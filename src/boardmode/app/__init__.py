"""Application services for board/markdown arbitration."""

from .command_router import BoardCommand, CommandNotFoundError, CommandRouter
from .documents import BoardDocuments
from .interceptors import LifecycleInterceptor, SearchCommandInterceptor, TransitionInterceptor, active_board_view
from .listener import ChangeListener
from .oracle import MetadataOracle
from .service import BoardModeService

__all__ = [
    "BoardCommand",
    "BoardDocuments",
    "BoardModeService",
    "ChangeListener",
    "CommandNotFoundError",
    "CommandRouter",
    "LifecycleInterceptor",
    "MetadataOracle",
    "SearchCommandInterceptor",
    "TransitionInterceptor",
    "active_board_view",
]
