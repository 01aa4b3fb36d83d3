"""licaudit utility modules.

- logging: stderr logging in console or JSON-lines form
"""

from licaudit.utils.logging import configure_from_cli, get_logger, setup_logging

__all__ = [
    "configure_from_cli",
    "get_logger",
    "setup_logging",
]
