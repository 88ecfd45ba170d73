import logging
import sys

from core.settings import settings

LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'


def setup_logger(name: str = 'employee_hierarchy') -> logging.Logger:
    """Configure the application logger once and return it."""
    app_logger = logging.getLogger(name)
    if app_logger.handlers:
        return app_logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    app_logger.addHandler(handler)
    app_logger.setLevel(settings.LOG_LEVEL.upper())
    app_logger.propagate = False
    return app_logger


logger = setup_logger()
