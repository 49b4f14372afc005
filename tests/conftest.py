# tests/conftest.py - Shared fixtures
"""
Canned ``btrfs device stats`` output and a fake command runner, so tests
need neither btrfs-progs nor root.
"""

import pytest

from btrfs_exporter.collector.runner import CommandError, CommandRunner
from btrfs_exporter.utils.config import Config


SDB_OUTPUT = """[/dev/sdb].write_io_errs    0
[/dev/sdb].read_io_errs     0
[/dev/sdb].flush_io_errs    0
[/dev/sdb].corruption_errs  0
[/dev/sdb].generation_errs  0
"""

SDC_OUTPUT = """[/dev/sdc].write_io_errs    69
[/dev/sdc].read_io_errs     2
[/dev/sdc].flush_io_errs    0
[/dev/sdc].corruption_errs  1
[/dev/sdc].generation_errs  0
"""


class FakeRunner(CommandRunner):
    """Returns canned output per mount point; unknown mount points fail."""

    def __init__(self, outputs):
        self.outputs = outputs
        self.calls = []

    def run(self, mountpoint):
        self.calls.append(mountpoint)
        output = self.outputs.get(mountpoint)
        if isinstance(output, Exception):
            raise output
        if output is None:
            raise CommandError(['btrfs', 'device', 'stats', mountpoint], 'exit code 1: ERROR: not a btrfs filesystem', returncode=1)
        return output


@pytest.fixture
def make_config():
    def _make(mountpoints='/data,/backup', **overrides):
        config = Config()
        config.set('exporter.mountpoints', mountpoints)
        for key, value in overrides.items():
            config.set(key.replace('__', '.'), value)
        return config
    return _make


@pytest.fixture
def two_mount_runner():
    return FakeRunner({'/data': SDB_OUTPUT, '/backup': SDC_OUTPUT})
