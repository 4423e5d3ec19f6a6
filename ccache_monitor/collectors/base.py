"""Base collector abstract class defining the host lifecycle hooks."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
import logging
from functools import wraps


class BaseCollector(ABC):
    """
    Abstract base class for collectors driven by the monitoring host.

    The host calls ``init`` once, ``check`` to decide whether the collector
    is usable, ``collect`` once per cycle and ``cleanup`` on shutdown.
    """

    def __init__(self, config: Any, logger: logging.Logger):
        """
        Initialize base collector.

        Args:
            config: Collector-specific configuration
            logger: Logger instance
        """
        self.config = config
        self.logger = logger.getChild(self.__class__.__name__)

    def init(self) -> bool:
        return True

    def check(self) -> bool:
        """Return True if one collection cycle yields data."""
        return bool(self.collect())

    @abstractmethod
    def collect(self) -> Optional[Dict[str, int]]:
        """
        Run one collection cycle.

        Returns:
            Metric mapping, or None when the cycle produced no data

        Note:
            Implementations should use @safe_collect so that no exception
            reaches the host.
        """
        pass

    def cleanup(self) -> None:
        pass


def safe_collect(func):
    """
    Decorator turning any collection exception into a "no data" result.

    Args:
        func: Collector method to wrap

    Returns:
        Wrapped function that logs the failure and returns None
    """
    @wraps(func)
    def wrapper(self, *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        except Exception as e:
            self.logger.error(f"Collection failed: {e}", exc_info=True)
            return None
    return wrapper
