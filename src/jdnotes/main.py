#!/usr/bin/env python
"""Main entry point for the JD Notes backend."""
import argparse
import atexit
import logging
import os
import sys
from pathlib import Path

from jdnotes.config import config
from jdnotes.exceptions import JDNotesError
from jdnotes.models.db_models import init_db
from jdnotes.observability import METRICS_FILE_NAME, configure_logging, metrics
from jdnotes.server.mcp_server import JDNotesMcpServer
from jdnotes.storage.config_store import ConfigStore


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="JD Notes backend command server")
    parser.add_argument(
        "--app-data-dir",
        help="Application data directory (config.json, default database, logs)",
        type=str,
        default=os.environ.get("JDNOTES_APP_DATA_DIR")
    )
    parser.add_argument(
        "--log-level",
        help="Logging level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=config.log_level
    )
    parser.add_argument(
        "--no-init-db",
        help="Do not create the database schema on startup",
        action="store_true",
    )
    return parser.parse_args(argv)


def update_config(args):
    """Update the global config with command line arguments."""
    if args.app_data_dir:
        config.app_data_dir = Path(args.app_data_dir)
    config.log_level = args.log_level


def _save_metrics_on_exit(metrics_file: Path):
    """Save metrics to disk on shutdown."""
    if metrics.save_metrics(metrics_file):
        logging.getLogger(__name__).info("Metrics saved to disk on shutdown")


def main(argv=None):
    """Run the JD Notes backend."""
    args = parse_args(argv)
    update_config(args)

    log_level = getattr(logging, args.log_level.upper(), logging.INFO)
    try:
        log_dir = configure_logging(config.get_log_dir(), level=log_level, console=True)
    except (JDNotesError, OSError) as e:
        # Fall back to basic console logging if file logging fails
        logging.basicConfig(level=log_level)
        logging.getLogger(__name__).warning(f"Failed to configure file logging: {e}")
        log_dir = None

    logger = logging.getLogger(__name__)
    if log_dir:
        logger.info(f"Persistent logging enabled: {log_dir}")
        atexit.register(_save_metrics_on_exit, log_dir / METRICS_FILE_NAME)

    store = ConfigStore()

    # The application cannot start without its data directory
    try:
        db_path = store.effective_database_path()
        logger.info(f"Database path: sqlite:{db_path}")
    except JDNotesError as e:
        logger.error(f"Failed to resolve database path: {e.message}")
        sys.exit(1)

    if not args.no_init_db:
        try:
            engine = init_db(db_path)
            engine.dispose()
        except Exception as e:
            logger.error(f"Failed to initialize database: {e}")
            sys.exit(1)

    try:
        logger.info("Starting JD Notes command server")
        server = JDNotesMcpServer(store=store)
        server.run()
    except Exception as e:
        logger.error(f"Error running server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
