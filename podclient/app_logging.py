"""JSON log output for processes that embed the pod client."""

from typing import Optional
import logging

from pythonjsonlogger import jsonlogger

from . import config

FORMAT = '%(asctime)s %(levelname)s %(name)s %(message)s'


def setup_logger(level: Optional[int] = None) -> logging.Logger:
    """Send root log records to stderr as JSON, once per process."""
    logger = logging.getLogger()
    logger.setLevel(level if level is not None else config.LOGLEVEL)
    for handler in logger.handlers:
        if isinstance(handler.formatter, jsonlogger.JsonFormatter):
            return logger
    logHandler = logging.StreamHandler()
    formatter = jsonlogger.JsonFormatter(FORMAT, rename_fields={
        'levelname': 'level', 'asctime': 'timestamp'
    })
    logHandler.setFormatter(formatter)
    logger.addHandler(logHandler)
    return logger
