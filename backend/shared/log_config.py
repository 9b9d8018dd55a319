"""
Logging setup shared by the CLI and the API server.

Library modules only call logging.getLogger(__name__); entry points call
configure_logging() once to attach a rich handler to the root logger.
"""

import logging

from rich.logging import RichHandler

_configured = False


def configure_logging(level: str = "INFO") -> None:
    """Attach a RichHandler to the root logger (idempotent)."""
    global _configured

    root = logging.getLogger()
    root.setLevel(level.upper())
    if _configured:
        return

    handler = RichHandler(rich_tracebacks=True, show_path=False)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root.addHandler(handler)
    _configured = True
