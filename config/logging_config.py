"""
Logging configuration shared by the API and scripts.
"""

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_configured = False


def setup_logging(level: Optional[str] = None) -> None:
    """Configure the root logger once. Level defaults to settings.log_level."""
    global _configured
    if _configured:
        return

    if level is None:
        from config.settings import settings
        level = settings.log_level

    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a module logger, configuring logging on first use."""
    setup_logging()
    return logging.getLogger(name)
