# tests/test_logger.py - Tests for logging setup
"""
Unit tests for setup_logging and verbosity handling.
"""

import logging
import pytest
from colorama import Fore
from unittest.mock import patch

from btrfs_exporter.utils.logger import ColoredFormatter, setup_logging, verbosity_to_level


class TestVerbosity:
    """Test cases for verbosity_to_level"""

    @pytest.mark.parametrize("base,verbose,quiet,expected", [
        ('INFO', 0, 0, 'INFO'),
        ('INFO', 1, 0, 'DEBUG'),
        ('INFO', 5, 0, 'DEBUG'),
        ('INFO', 0, 1, 'WARNING'),
        ('INFO', 0, 9, 'CRITICAL'),
        ('error', 2, 0, 'INFO'),
        ('bogus', 0, 0, 'INFO'),
    ])
    def test_verbosity_to_level(self, base, verbose, quiet, expected):
        assert verbosity_to_level(base, verbose, quiet) == expected


class TestSetupLogging:
    """Test cases for setup_logging"""

    def test_sets_level_and_file(self, tmp_path):
        """Test root level and file handler"""
        log_file = tmp_path / 'exporter.log'
        fake_root = logging.Logger('root-under-test')

        with patch('btrfs_exporter.utils.logger.logging.getLogger', return_value=fake_root):
            setup_logging(level='DEBUG', log_file=str(log_file))
        fake_root.debug("hello from test")

        assert fake_root.level == logging.DEBUG
        assert len(fake_root.handlers) == 2
        for handler in fake_root.handlers:
            handler.flush()
        assert "hello from test" in log_file.read_text()
        for handler in fake_root.handlers:
            handler.close()

    def test_colored_formatter(self):
        """Test levels are colored without touching the original record"""
        formatter = ColoredFormatter('%(levelname)s %(message)s')
        record = logging.LogRecord('x', logging.ERROR, __file__, 1, 'boom', None, None)

        assert formatter.format(record).startswith(Fore.RED)
        assert record.levelname == 'ERROR'
