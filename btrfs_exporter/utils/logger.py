# btrfs_exporter/utils/logger.py - Logging setup
"""
Logging configuration for the exporter.
"""

import logging
import sys
from typing import Optional
from colorama import Fore, Style


LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


class ColoredFormatter(logging.Formatter):
    """
    Colored log formatter for console output.
    """

    COLORS = {
        'DEBUG': Fore.CYAN,
        'INFO': Fore.GREEN,
        'WARNING': Fore.YELLOW,
        'ERROR': Fore.RED,
        'CRITICAL': Fore.RED + Style.BRIGHT,
    }

    def format(self, record):
        """Format log record with colors"""
        levelname = record.levelname
        if levelname in self.COLORS:
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = f"{self.COLORS[levelname]}{levelname}{Style.RESET_ALL}"

        return super().format(record)


def verbosity_to_level(base: str = 'INFO', verbose: int = 0, quiet: int = 0) -> str:
    """
    Shift a base level name by -v/-q counts.

    Each ``-v`` moves one step towards DEBUG, each ``-q`` one step towards
    CRITICAL. The result is clamped to the known levels.
    """
    index = LEVELS.index(base.upper()) if base.upper() in LEVELS else LEVELS.index('INFO')
    index = index - verbose + quiet
    index = max(0, min(index, len(LEVELS) - 1))
    return LEVELS[index]


def setup_logging(level: str = 'INFO', log_file: Optional[str] = None):
    """
    Setup logging configuration.

    Args:
        level: Logging level ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
        log_file: Optional log file path
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers = []

    log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    date_format = '%Y-%m-%d %H:%M:%S'

    # Colors only make sense on a terminal
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    if sys.stderr.isatty():
        console_handler.setFormatter(ColoredFormatter(log_format, datefmt=date_format))
    else:
        console_handler.setFormatter(logging.Formatter(log_format, datefmt=date_format))
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter(log_format, datefmt=date_format))
        root_logger.addHandler(file_handler)

    logging.debug(f"Logging initialized at {level} level")
