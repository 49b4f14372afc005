# tests/test_runner.py - Tests for the btrfs command runner
"""
Unit tests for BtrfsCommandRunner. subprocess is mocked throughout.
"""

import subprocess
import pytest
from unittest.mock import Mock, patch

from btrfs_exporter.collector.runner import BtrfsCommandRunner, CommandError
from btrfs_exporter.utils.config import Config


def completed(returncode=0, stdout="", stderr=""):
    return Mock(returncode=returncode, stdout=stdout, stderr=stderr)


class TestBtrfsCommandRunner:
    """Test cases for BtrfsCommandRunner"""

    def test_build_command_with_sudo(self):
        """Test default command goes through sudo"""
        runner = BtrfsCommandRunner()

        assert runner.build_command('/data') == [
            '/usr/bin/sudo', '/usr/bin/btrfs', 'device', 'stats', '/data'
        ]

    def test_build_command_without_sudo(self):
        """Test command without elevation"""
        runner = BtrfsCommandRunner(btrfs_bin='btrfs', use_sudo=False)

        assert runner.build_command('/') == ['btrfs', 'device', 'stats', '/']

    def test_from_config(self):
        """Test runner settings come from config"""
        config = Config()
        config.set('btrfs.binary', '/sbin/btrfs')
        config.set('btrfs.sudo_binary', '/bin/doas')
        config.set('btrfs.timeout', 5)

        runner = BtrfsCommandRunner.from_config(config)

        assert runner.build_command('/srv') == ['/bin/doas', '/sbin/btrfs', 'device', 'stats', '/srv']
        assert runner.timeout == 5

    @patch('btrfs_exporter.collector.runner.subprocess.run')
    def test_run_returns_stdout(self, mock_run):
        """Test successful invocation"""
        mock_run.return_value = completed(stdout="[/dev/sdb].read_io_errs 0\n")
        runner = BtrfsCommandRunner(use_sudo=False)

        assert runner.run('/data') == "[/dev/sdb].read_io_errs 0\n"
        mock_run.assert_called_once_with(
            ['/usr/bin/btrfs', 'device', 'stats', '/data'],
            capture_output=True,
            text=True,
            encoding='utf-8',
            errors='replace',
            timeout=None
        )

    @patch('btrfs_exporter.collector.runner.subprocess.run')
    def test_nonzero_exit_raises(self, mock_run):
        """Test non-zero exit status"""
        mock_run.return_value = completed(returncode=1, stderr="ERROR: not a btrfs filesystem: /data\n")
        runner = BtrfsCommandRunner()

        with pytest.raises(CommandError) as exc_info:
            runner.run('/data')

        assert exc_info.value.returncode == 1
        assert exc_info.value.stderr == "ERROR: not a btrfs filesystem: /data"
        assert 'exit code 1' in str(exc_info.value)

    @patch('btrfs_exporter.collector.runner.subprocess.run')
    def test_spawn_failure_raises(self, mock_run):
        """Test missing binary"""
        mock_run.side_effect = FileNotFoundError(2, "No such file or directory")
        runner = BtrfsCommandRunner()

        with pytest.raises(CommandError) as exc_info:
            runner.run('/data')

        assert exc_info.value.returncode is None
        assert exc_info.value.cmd[-1] == '/data'

    @patch('btrfs_exporter.collector.runner.subprocess.run')
    def test_timeout_raises(self, mock_run):
        """Test command timing out"""
        mock_run.side_effect = subprocess.TimeoutExpired(cmd='btrfs', timeout=2)
        runner = BtrfsCommandRunner(timeout=2)

        with pytest.raises(CommandError, match='timed out'):
            runner.run('/data')
