# btrfs_exporter/collector/parser.py - btrfs device stats parsing
"""
Parses ``btrfs device stats`` output into per-device counters.

Sample output::

    [/dev/sdb].write_io_errs    0
    [/dev/sdb].read_io_errs     0
    [/dev/sdc].write_io_errs    69
"""

from dataclasses import dataclass
from typing import Dict, Optional
import logging
import posixpath
import re


logger = logging.getLogger(__name__)

DEVICE_PATTERN = re.compile(r"^\[([^\]]+)\]\.(\S+)\s+(\d+)$")

# Left by undecodable bytes in the command output
REPLACEMENT_CHAR = '\ufffd'


@dataclass(frozen=True)
class DeviceStat:
    """
    One counter of one device.
    """
    device: str
    counter: str
    value: float

    @property
    def key(self) -> str:
        """Synthesized ``<device>_<counter>`` key"""
        return f"{self.device}_{self.counter}"


def device_name(path: str) -> str:
    """``/dev/sdb`` -> ``sdb``, ``/dev/mapper/luks-1`` -> ``luks-1``"""
    return posixpath.basename(path.rstrip('/')) or path


def parse_line(line: str) -> Optional[DeviceStat]:
    """
    Parse a single output line.

    Returns:
        DeviceStat, or None if the line does not have the expected format
    """
    if REPLACEMENT_CHAR in line:
        return None

    m = DEVICE_PATTERN.match(line.strip())
    if not m:
        return None

    path, counter, value = m.groups()
    return DeviceStat(device=device_name(path), counter=counter, value=float(value))


def parse_btrfs_stats(output: str) -> Dict[str, float]:
    """
    Parse the full output of one ``btrfs device stats`` call.

    Malformed lines are logged and skipped; the rest still parse.

    Args:
        output: Raw stdout of the command

    Returns:
        Mapping of ``<device>_<counter>`` to counter value
    """
    device_stats = {}

    for line in output.splitlines():
        if not line.strip():
            continue

        stat = parse_line(line)
        if stat is None:
            logger.warning(f"Skipping unexpected btrfs output line: {line!r}")
            continue

        if stat.key in device_stats:
            logger.warning(f"Duplicate btrfs stat {stat.key}, replacing {device_stats[stat.key]} with {stat.value}")
        device_stats[stat.key] = stat.value

    return device_stats
