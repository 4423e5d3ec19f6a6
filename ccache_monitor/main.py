"""Main application entry point for the ccache metrics collector."""

import argparse
import asyncio
import json
import logging
import signal
import sys
from typing import Optional

try:
    from apscheduler.schedulers.asyncio import AsyncIOScheduler
    from apscheduler.triggers.interval import IntervalTrigger
except ImportError:
    AsyncIOScheduler = None
    IntervalTrigger = None

from .charts import charts, render_values
from .collectors.ccache_collector import create_collector
from .config.loader import ConfigLoader
from .config.models import CollectorSystemConfig
from .config.settings import Settings
from .utils.logger import setup_logger


class CollectorApp:
    """
    Monitoring host for the ccache collector.

    Loads configuration, builds the collector and runs collection cycles
    either once or on a fixed interval.
    """

    def __init__(self, config_path: str, log_level: Optional[str] = None):
        """
        Initialize collector application.

        Args:
            config_path: Path to configuration file
            log_level: Overrides the configured log level when given
        """
        self.config_path = config_path
        self.logger = setup_logger("ccache_monitor", log_level or "INFO")
        self.scheduler = None

        self.config = self._load_config()
        if log_level is None:
            self.logger.setLevel(self.config.logging.level)

        self.collector = create_collector(self.config.ccache, self.logger)

    def _load_config(self) -> CollectorSystemConfig:
        """
        Load and validate configuration.

        A missing file at the default location means all defaults.

        Raises:
            SystemExit: If configuration is invalid
        """
        try:
            self.logger.info(f"Loading configuration from {self.config_path}")
            return ConfigLoader.load_from_file(self.config_path)

        except FileNotFoundError:
            if self.config_path == Settings.config_path():
                self.logger.info("No configuration file, using defaults")
                return CollectorSystemConfig()
            self.logger.error(f"Configuration file not found: {self.config_path}")
            sys.exit(1)

        except Exception as e:
            self.logger.error(f"Failed to load configuration: {e}", exc_info=True)
            sys.exit(1)

    async def run_collection_cycle(self) -> Optional[dict]:
        """
        Execute one collection cycle and log its metrics.

        Returns:
            The metric set, or None if the cycle produced no data
        """
        metrics = await self.collector.collect_async()

        if not metrics:
            self.logger.warning("Collection cycle produced no data")
            return None

        self.logger.info(
            "Collection cycle completed",
            extra={"metrics": metrics, "charts": render_values(metrics)}
        )
        return metrics

    def run_once(self) -> int:
        """Run one cycle, print the metric set as JSON and return an exit code."""
        result = self.collector.collect_result()
        if not result.ok:
            self.logger.error(result.message, extra={"error": result.error})
            return 1

        self.logger.info(result.message)
        print(json.dumps(result.metrics, indent=2))
        return 0

    def run_check(self) -> int:
        healthy = self.collector.check()
        self.logger.info(f"Check {'passed' if healthy else 'failed'}")
        return 0 if healthy else 1

    def _signal_handler(self, signum, frame):
        """
        Handle shutdown signals.

        Args:
            signum: Signal number
            frame: Current stack frame
        """
        signal_name = signal.Signals(signum).name
        self.logger.info(f"Received {signal_name}, initiating graceful shutdown...")

        if self.scheduler and self.scheduler.running:
            self.scheduler.shutdown(wait=False)

        sys.exit(0)

    def start_scheduler(self):
        """
        Run collection cycles every ``schedule.update_every`` seconds.

        Runs indefinitely until interrupted (SIGTERM/SIGINT).
        """
        if AsyncIOScheduler is None:
            self.logger.error(
                "APScheduler not installed. "
                "Install with: pip install apscheduler>=3.10.0"
            )
            sys.exit(1)

        if not self.collector.init():
            self.logger.error("Collector initialization failed")
            sys.exit(1)

        signal.signal(signal.SIGTERM, self._signal_handler)
        signal.signal(signal.SIGINT, self._signal_handler)

        interval = self.config.schedule.update_every
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)

        self.scheduler = AsyncIOScheduler(event_loop=loop)
        self.scheduler.add_job(
            self.run_collection_cycle,
            trigger=IntervalTrigger(seconds=interval),
            id='collection_cycle',
            name='ccache Collection Cycle',
            max_instances=1,  # Prevent overlapping executions
            coalesce=True,  # If missed, run once
        )

        self.scheduler.start()
        self.logger.info(f"Scheduler started, collecting every {interval}s")

        try:
            loop.run_until_complete(self.run_collection_cycle())
            loop.run_forever()
        except KeyboardInterrupt:
            self.logger.info("Received keyboard interrupt")
        finally:
            if self.scheduler and self.scheduler.running:
                self.scheduler.shutdown()
            self.collector.cleanup()
            loop.close()
            self.logger.info("Scheduler stopped")


def main(argv=None):
    """
    CLI entry point.

    Parses command-line arguments and starts the collector.
    """
    parser = argparse.ArgumentParser(
        description='ccache statistics collector',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Collect on the configured interval
  python -m ccache_monitor.main

  # Collect once and print the metrics as JSON
  python -m ccache_monitor.main --run-once

  # Print chart definitions
  python -m ccache_monitor.main --charts
        """
    )

    parser.add_argument(
        '--config',
        default=Settings.config_path(),
        help='Path to configuration file (default: config/config.yaml or CCACHE_MONITOR_CONFIG)'
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        '--run-once',
        action='store_true',
        help='Run one collection cycle, print the metrics and exit'
    )
    mode.add_argument(
        '--check',
        action='store_true',
        help='Exit 0 if ccache statistics can be collected, 1 otherwise'
    )
    mode.add_argument(
        '--charts',
        action='store_true',
        help='Print chart definitions as JSON and exit'
    )

    parser.add_argument(
        '--log-level',
        default=None,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (default: configured level or LOG_LEVEL env var)'
    )

    args = parser.parse_args(argv)

    if args.charts:
        print(json.dumps([chart.model_dump() for chart in charts()], indent=2))
        sys.exit(0)

    log_level = args.log_level or Settings.get("LOG_LEVEL") or None

    try:
        app = CollectorApp(config_path=args.config, log_level=log_level)

        if args.run_once:
            sys.exit(app.run_once())
        elif args.check:
            sys.exit(app.run_check())
        else:
            app.start_scheduler()

    except Exception as e:
        logging.error(f"Application startup failed: {e}", exc_info=True)
        sys.exit(1)


if __name__ == '__main__':
    main()
