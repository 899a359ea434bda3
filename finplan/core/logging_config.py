"""Logging setup for the `finplan` logger hierarchy."""

import logging

from finplan.config import Settings

CONSOLE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(settings: Settings) -> logging.Logger:
    """Attach a console handler to the `finplan` logger at the configured level."""
    logger = logging.getLogger("finplan")
    logger.setLevel(settings.log_level.upper())

    # Avoid duplicate handlers on repeated setup
    logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)

    logger.debug("logging configured level=%s env=%s", settings.log_level, settings.app_env)
    return logger
