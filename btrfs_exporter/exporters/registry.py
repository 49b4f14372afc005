# btrfs_exporter/exporters/registry.py - Current stats snapshot
"""
Holds the latest btrfs stats snapshot and renders it in the Prometheus text
exposition format.
"""

from collections import OrderedDict
from typing import Dict, Iterator, Optional, Tuple
import logging
import math
import threading

from prometheus_client.core import GaugeMetricFamily


METRIC_PREFIX = 'btrfs'

BTRFS_COUNTERS = OrderedDict([
    ('corruption_errs', 'BTRFS Corruption Errors'),
    ('flush_io_errs', 'BTRFS Flush IO Errors'),
    ('generation_errs', 'BTRFS Generation Errors'),
    ('read_io_errs', 'BTRFS Read IO Errors'),
    ('write_io_errs', 'BTRFS Write IO Errors'),
])


def split_stat_key(key: str) -> Optional[Tuple[str, str]]:
    """
    Split ``<device>_<counter>`` into ``(device, counter)``.

    Matches on the known counter suffixes, so device names may contain
    underscores. Returns None for unknown counters.
    """
    for counter in BTRFS_COUNTERS:
        suffix = f"_{counter}"
        if key.endswith(suffix) and len(key) > len(suffix):
            return key[:-len(suffix)], counter
    return None


def format_value(value: float) -> str:
    if math.isinf(value):
        return '+Inf' if value > 0 else '-Inf'
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def escape_label_value(value: str) -> str:
    return value.replace('\\', r'\\').replace('\n', r'\n').replace('"', r'\"')


class StatsRegistry:
    """
    Snapshot of device stats keyed by counter and device.

    :meth:`update` swaps the whole snapshot, so a device missing from the
    latest cycle disappears from the output instead of keeping its old value.
    Also usable as a ``prometheus_client`` collector through :meth:`collect`.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._snapshot: Dict[str, Dict[str, float]] = {}

    def update(self, stats: Dict[str, float]) -> int:
        """
        Replace the snapshot with ``stats``.

        Args:
            stats: Mapping of ``<device>_<counter>`` to value

        Returns:
            Number of stats accepted
        """
        snapshot: Dict[str, Dict[str, float]] = {}
        accepted = 0

        for key, value in stats.items():
            parts = split_stat_key(key)
            if parts is None:
                self.logger.error(f"{key} stat not handled")
                continue

            device, counter = parts
            snapshot.setdefault(counter, {})[device] = float(value)
            accepted += 1

        with self._lock:
            self._snapshot = snapshot

        return accepted

    def collect(self) -> Iterator[GaugeMetricFamily]:
        with self._lock:
            snapshot = self._snapshot

        for counter, documentation in BTRFS_COUNTERS.items():
            devices = snapshot.get(counter)
            if not devices:
                continue

            family = GaugeMetricFamily(
                f"{METRIC_PREFIX}_{counter}", documentation, labels=['device']
            )
            for device in sorted(devices):
                family.add_metric([device], devices[device])
            yield family

    def render(self) -> str:
        """
        Render the snapshot in the text exposition format.

        Returns:
            Exposition text, empty if there are no stats
        """
        output = []

        for family in self.collect():
            output.append(f"# HELP {family.name} {family.documentation}")
            output.append(f"# TYPE {family.name} {family.type}")
            for sample in family.samples:
                device = escape_label_value(sample.labels['device'])
                output.append(f'{sample.name}{{device="{device}"}} {format_value(sample.value)}')

        if not output:
            return ""
        return "\n".join(output) + "\n"
