import logging
import sys
from typing import Optional
from incommand.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s - %(message)s"


def setup_logging(level: Optional[str] = None) -> None:
    """Configure root logging once for the whole service."""
    level_name = (level or settings.log_level or "INFO").upper()
    root = logging.getLogger()

    # Avoid stacking handlers when called twice (e.g. tests, reload)
    if not any(getattr(h, "_incommand", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._incommand = True
        root.addHandler(handler)

    root.setLevel(getattr(logging, level_name, logging.INFO))


def get_logger(name: str) -> logging.Logger:
    """Return a module logger."""
    return logging.getLogger(name)
