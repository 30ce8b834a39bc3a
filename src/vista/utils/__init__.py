"""Vista utility modules.

- logging: CLI logging with human/verbose/JSON modes
"""

from vista.utils.logging import configure_from_cli, get_logger, setup_logging

__all__ = [
    "configure_from_cli",
    "get_logger",
    "setup_logging",
]
