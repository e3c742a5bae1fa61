import logging
import sys
from typing import Optional

from acwhisk.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Install a single stream handler on the ``acwhisk`` logger tree."""
    logger = logging.getLogger("acwhisk")
    logger.setLevel((level or settings.log_level).upper())

    if not any(getattr(h, "_acwhisk", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._acwhisk = True
        logger.addHandler(handler)
