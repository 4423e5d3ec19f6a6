"""ccache statistics collector."""

import asyncio
import logging
import subprocess
import tempfile
import threading
from typing import Dict, Optional

from ..config.models import CcacheConfig
from ..utils.metrics import (
    PRECISION,
    CollectionResult,
    build_metric_set,
    missing_stats,
)
from .base import BaseCollector, safe_collect
from .stats_parser import parse_stats


STATS_ARGUMENT = "--print-stats"

# Bytes of stderr quoted in the failure log
STDERR_LIMIT = 4096


class CcacheCollector(BaseCollector):
    """Collector for local ccache hit/miss and size statistics."""

    def __init__(self, config: CcacheConfig, logger: logging.Logger):
        """
        Initialize ccache collector.

        Args:
            config: ccache command configuration
            logger: Logger instance
        """
        super().__init__(config, logger)

    @property
    def command(self):
        return [self.config.binary, STATS_ARGUMENT]

    @safe_collect
    def collect(self) -> Optional[Dict[str, int]]:
        """
        Run `ccache --print-stats` once and derive the published metrics.

        Returns:
            Dict[str, int]: The six metrics, or None if the command could
            not be started, timed out, failed mid-read or exited non-zero
        """
        self.logger.debug(f"Executing command: {' '.join(self.command)}")

        # stderr is spooled to a file so a chatty command cannot block on a
        # full pipe while stdout is still being read
        with tempfile.TemporaryFile() as stderr_file:
            try:
                process = subprocess.Popen(
                    self.command,
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.PIPE,
                    stderr=stderr_file,
                    encoding="utf-8",
                    errors="replace",
                )
            except (OSError, ValueError) as e:
                self.logger.error(f"Failed to start {self.config.binary}: {e}")
                return None

            timed_out = threading.Event()

            def _kill():
                if process.poll() is None:
                    timed_out.set()
                    process.kill()

            watchdog = threading.Timer(self.config.timeout, _kill)
            watchdog.daemon = True

            with process:
                watchdog.start()
                try:
                    try:
                        stats = parse_stats(process.stdout, self.logger)
                    except OSError as e:
                        self.logger.error(f"Error reading output of {self.config.binary}: {e}")
                        return None

                    returncode = process.wait()
                finally:
                    watchdog.cancel()
                    # Leaving the with block waits for the process
                    if process.poll() is None:
                        process.kill()

            stderr_file.seek(0)
            stderr = stderr_file.read(STDERR_LIMIT).decode("utf-8", errors="replace").strip()

        if timed_out.is_set():
            self.logger.error(
                f"{self.config.binary} timed out after {self.config.timeout}s"
            )
            return None

        if returncode < 0:
            self.logger.error(
                f"{self.config.binary} terminated by signal {-returncode}"
            )
            return None

        if returncode != 0:
            self.logger.error(
                f"{self.config.binary} exited with code {returncode}: {stderr}"
            )
            return None

        missing = missing_stats(stats)
        if missing:
            self.logger.warning(f"Missing stats default to 0: {', '.join(missing)}")

        return build_metric_set(stats, PRECISION)

    async def collect_async(self) -> Optional[Dict[str, int]]:
        """Run a collection cycle without blocking the event loop."""
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, self.collect)

    def collect_result(self) -> CollectionResult:
        """
        Run a collection cycle and wrap it for the host's log line.

        Returns:
            CollectionResult: Metrics and a one-line summary
        """
        metrics = self.collect()
        if not metrics:
            return CollectionResult(
                collector_name="ccache",
                metrics=None,
                message="No data",
                error=f"{self.config.binary} {STATS_ARGUMENT} produced no data",
            )

        return CollectionResult(
            collector_name="ccache",
            metrics=metrics,
            message=(
                f"Hits: {metrics['local_storage_hit_percentage'] / PRECISION:.3f}%, "
                f"Misses: {metrics['local_storage_miss_percentage'] / PRECISION:.3f}%, "
                f"Size: {metrics['cache_size']} bytes, "
                f"Files: {metrics['files_in_cache']}"
            ),
        )


def create_collector(config: CcacheConfig, logger: logging.Logger) -> CcacheCollector:
    """Build a ccache collector for the host to register."""
    return CcacheCollector(config, logger)
