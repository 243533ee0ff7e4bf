#!/usr/bin/env python3
"""Folder archiver daemon.

Loads the configuration, then sweeps the configured folders every
DELETION_FREQUENCY_DAYS days, moving anything older than that into the
archive root. SIGINT/SIGTERM stop the daemon between nodes or during the
wait between sweeps.

Usage:
    python3 -m archiver                              # reads ./config.properties
    python3 -m archiver --config /etc/archiver.properties
    python3 -m archiver --once                       # single sweep, then exit
"""

import argparse
import logging
import signal
import sys

from .config import DEFAULT_CONFIG_PATH, ConfigError, load_config
from .scheduler import ArchiveScheduler

logger = logging.getLogger(__name__)


def install_signal_handlers(scheduler: ArchiveScheduler):
    def _handle(signum, _frame):
        logger.info("Received %s, stopping", signal.Signals(signum).name)
        scheduler.stop()

    signal.signal(signal.SIGINT, _handle)
    signal.signal(signal.SIGTERM, _handle)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Archive files and folders older than a threshold")
    parser.add_argument("--config", "-c", default=str(DEFAULT_CONFIG_PATH),
                        help="Path to the .properties configuration file")
    parser.add_argument("--once", action="store_true", help="Run a single sweep and exit")
    parser.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        config = load_config(args.config)
    except ConfigError:
        logger.exception("Invalid configuration")
        return 1

    try:
        config.temp_path.mkdir(parents=True, exist_ok=True)
    except OSError:
        logger.exception("Cannot create archive root %s", config.temp_path)
        return 1

    logger.info("Folder archiver starting")
    logger.info("  Root: %s", config.root_path)
    logger.info("  Archive: %s", config.temp_path)
    logger.info("  Folders: %s", ", ".join(config.folder_names))
    logger.info("  Frequency: every %d day(s)", config.frequency_days)

    scheduler = ArchiveScheduler(config)
    if args.once:
        result = scheduler.run_once()
        return 0 if result is not None else 1

    install_signal_handlers(scheduler)
    scheduler.run_forever()
    return 0


if __name__ == "__main__":
    sys.exit(main())
