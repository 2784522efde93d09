import logging
import sys
from logging import StreamHandler

from pullup.config.settings import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging() -> None:
    level = logging.DEBUG if settings.debug else logging.getLevelName(settings.LOG_LEVEL.upper())
    logging.basicConfig(
        level=level if isinstance(level, int) else logging.INFO,
        format=LOG_FORMAT,
        handlers=[StreamHandler(sys.stdout)],
    )
