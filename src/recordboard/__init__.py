"""Record boards for swim clubs: best times per event, with history and CSV import."""

__version__ = "0.1.0"

from recordboard.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
