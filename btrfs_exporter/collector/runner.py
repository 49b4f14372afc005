# btrfs_exporter/collector/runner.py - External command invocation
"""
Runs ``btrfs device stats`` for a mount point and returns its raw output.

The runner is an interface so the collection cycle can be driven by canned
output in tests, without btrfs-progs or root privileges.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
import logging
import subprocess


class CommandError(RuntimeError):
    """
    Raised when the stats command cannot be spawned or exits non-zero.
    """

    def __init__(self, cmd: List[str], message: str, returncode: Optional[int] = None,
                 stderr: str = ""):
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"{' '.join(cmd)} failed: {message}")


class CommandRunner(ABC):
    """
    Given a mount point, return the stats command's stdout or raise
    :class:`CommandError`.
    """

    @abstractmethod
    def run(self, mountpoint: str) -> str:
        pass


class BtrfsCommandRunner(CommandRunner):
    """
    Invokes ``btrfs device stats <mountpoint>``, optionally through sudo.
    """

    def __init__(self, btrfs_bin: str = '/usr/bin/btrfs', sudo_bin: str = '/usr/bin/sudo',
                 use_sudo: bool = True, timeout: Optional[float] = None):
        """
        Args:
            btrfs_bin: Path to the btrfs binary
            sudo_bin: Path to the privilege elevation wrapper
            use_sudo: Prefix the command with ``sudo_bin``
            timeout: Seconds to wait for the command, None waits forever
        """
        self.btrfs_bin = btrfs_bin
        self.sudo_bin = sudo_bin
        self.use_sudo = use_sudo
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)

    @classmethod
    def from_config(cls, config) -> 'BtrfsCommandRunner':
        return cls(
            btrfs_bin=config.get('btrfs.binary', '/usr/bin/btrfs'),
            sudo_bin=config.get('btrfs.sudo_binary', '/usr/bin/sudo'),
            use_sudo=config.get('btrfs.use_sudo', True),
            timeout=config.get('btrfs.timeout'),
        )

    def build_command(self, mountpoint: str) -> List[str]:
        cmd = [self.btrfs_bin, 'device', 'stats', mountpoint]
        if self.use_sudo:
            cmd.insert(0, self.sudo_bin)
        return cmd

    def run(self, mountpoint: str) -> str:
        cmd = self.build_command(mountpoint)
        self.logger.debug(f"--> Running {cmd}")

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                encoding='utf-8',
                errors='replace',
                timeout=self.timeout
            )
        except subprocess.TimeoutExpired:
            raise CommandError(cmd, f"timed out after {self.timeout}s")
        except OSError as e:
            raise CommandError(cmd, str(e))

        if result.returncode != 0:
            stderr = result.stderr.strip()
            raise CommandError(
                cmd,
                f"exit code {result.returncode}: {stderr}",
                returncode=result.returncode,
                stderr=stderr
            )

        return result.stdout
