"""Logging configuration helpers."""

import logging

_FORMAT = "%(levelname)s: %(name)s: %(message)s"


def configure_logging(level: int = logging.INFO) -> None:
    """Configure the recipe_journal logger with a single stream handler.

    Calling this more than once leaves the existing handler in place.
    """
    # The Supabase client logs every HTTP request through httpx at INFO.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logger = logging.getLogger("recipe_journal")
    logger.setLevel(level)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
