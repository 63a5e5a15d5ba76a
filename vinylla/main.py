#!/usr/bin/env python3
"""
Vinylla - Browse your record collection in the terminal.

Usage:
    vinylla              # Run (needs a 130x40 terminal)
    vinylla --version    # Print version and exit

Environment:
    VINYLLA_CONSUMER_KEY / VINYLLA_CONSUMER_SECRET   Discogs app credentials
    VINYLLA_DATA_DIR                                 Where collection and login are kept
    VINYLLA_LOG_LEVEL                                DEBUG, INFO (default), WARNING...
"""
import os
import sys
import logging
import platform
from logging.handlers import RotatingFileHandler

from . import __version__
from .config import (
    COLLECTION_PATH, SESSION_PATH, DATA_DIR,
    LOG_DIR, LOG_FILE, LOG_MAX_BYTES, LOG_BACKUP_COUNT,
    has_consumer_credentials,
)
from .api import CollectionStore, DiscogsClient
from .managers import SessionManager
from .ui import TerminalDisplay
from .app import Vinylla


def setup_logging():
    """Configure logging to a rotating file (the terminal belongs to the display)."""
    level_name = os.environ.get('VINYLLA_LOG_LEVEL', 'INFO').upper()
    level = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)

    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            LOG_FILE,
            maxBytes=LOG_MAX_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding='utf-8'
        )
    except (OSError, PermissionError) as e:
        # Nothing may write to the terminal once the display starts
        print(f'vinylla: could not create log file, logging disabled: {e}', file=sys.stderr)
        root.addHandler(logging.NullHandler())
    else:
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        root.addHandler(file_handler)

    # Quiet down noisy libraries
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('requests').setLevel(logging.WARNING)
    logging.getLogger('PIL').setLevel(logging.WARNING)


def log_system_info(logger: logging.Logger):
    """Log system information at startup."""
    logger.info('=' * 50)
    logger.info(f'VINYLLA {__version__} STARTUP')
    logger.info('=' * 50)
    logger.info(f'Python: {sys.version.split()[0]}')
    logger.info(f'Platform: {platform.system()} {platform.release()}')
    logger.info(f'Terminal: {os.environ.get("TERM", "unknown")}')
    logger.info(f'Data dir: {DATA_DIR}')
    if not has_consumer_credentials():
        logger.warning('VINYLLA_CONSUMER_KEY/VINYLLA_CONSUMER_SECRET not set, login will fail')
    logger.info('=' * 50)


def main() -> int:
    """Entry point for Vinylla. Returns the process exit status."""
    if '--version' in sys.argv[1:]:
        print(f'vinylla {__version__}')
        return 0

    setup_logging()
    logger = logging.getLogger('vinylla')
    log_system_info(logger)

    client = DiscogsClient()
    app = Vinylla(
        display=TerminalDisplay(),
        store=CollectionStore(COLLECTION_PATH),
        sessions=SessionManager(SESSION_PATH, client),
        client=client,
    )
    app.install_signal_handlers()

    try:
        app.startup()
        with app.display.exclusive():
            app.run()
    except OSError as e:
        logger.error(f'Terminal I/O failure: {e}', exc_info=True)
        app.shutdown()
        print(f'vinylla: terminal error: {e}', file=sys.stderr)
        return 1

    return 0 if app.shutdown() else 1


if __name__ == '__main__':
    sys.exit(main())
