"""
Lolos - Logging Configuration

One stream handler on the root logger; engine modules log through
``logging.getLogger(__name__)``.
"""

import logging

from src.config.settings import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
HANDLER_NAME = "lolos"


def configure_logging(level: str | int | None = None) -> logging.Logger:
    """
    Install the application log handler.

    Args:
        level: Log level name or number. Defaults to ``Settings.log_level``,
            or DEBUG when ``Settings.debug`` is set.

    Returns:
        The configured root logger
    """
    if level is None:
        settings = get_settings()
        level = "DEBUG" if settings.debug else settings.log_level
    if isinstance(level, str):
        level = level.upper()

    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() == HANDLER_NAME:
            root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.set_name(HANDLER_NAME)
    root.addHandler(handler)
    root.setLevel(level)
    return root
