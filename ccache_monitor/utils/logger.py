"""JSON log output for the collector and its host."""

import logging
import sys
from typing import IO, Optional

from pythonjsonlogger import jsonlogger


LOG_FORMAT = '%(asctime)s %(name)s %(levelname)s %(message)s'


class CollectorJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter that tags each record with the emitting component.

    ``ccache_monitor.CcacheCollector`` is logged with
    ``"component": "CcacheCollector"`` so cycle records can be filtered
    without parsing logger names.
    """

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record.setdefault("component", record.name.rsplit(".", 1)[-1])


def setup_logger(
    name: str = "ccache_monitor",
    level: str = "INFO",
    stream: Optional[IO[str]] = None
) -> logging.Logger:
    """
    Attach a single JSON handler to the named logger.

    Calling this again for the same name replaces the handler, so the
    level and stream of the last call win.

    Args:
        name: Logger name; collectors log through its children
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        stream: Destination, stdout by default

    Returns:
        logging.Logger: Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level.upper())

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(CollectorJsonFormatter(LOG_FORMAT, timestamp=True))
    logger.addHandler(handler)

    # Host applications keep their own root handlers
    logger.propagate = False

    return logger
