# btrfs_exporter/collector/cycle.py - Collection cycle
"""
Runs the stats command and the parser for every configured mount point and
merges the results into one snapshot.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional
import logging

from opentelemetry import context as otel_context
from opentelemetry.trace import Status, StatusCode

from btrfs_exporter.collector.parser import parse_btrfs_stats
from btrfs_exporter.collector.runner import BtrfsCommandRunner, CommandError, CommandRunner
from btrfs_exporter.utils.config import Config
from btrfs_exporter.utils.tracing import get_tracer


tracer = get_tracer(__name__)


class BtrfsStatsCollector:
    """
    Collects btrfs device stats for all configured mount points.

    Every call to :meth:`collect` starts from an empty snapshot, so a mount
    point that fails contributes nothing rather than a stale value.
    """

    def __init__(self, config: Config, runner: Optional[CommandRunner] = None):
        """
        Args:
            config: Exporter configuration
            runner: Command runner, defaults to one built from ``config``
        """
        self.mountpoints: List[str] = config.mountpoints()
        self.workers = max(1, int(config.get('collector.workers', 1) or 1))
        self.runner = runner or BtrfsCommandRunner.from_config(config)
        self.logger = logging.getLogger(__name__)

    def _collect_mountpoint(self, mountpoint: str, parent=None) -> Dict[str, float]:
        with tracer.start_as_current_span('btrfs_device_stats', context=parent) as span:
            span.set_attribute('btrfs.mountpoint', mountpoint)
            try:
                output = self.runner.run(mountpoint)
            except CommandError as e:
                self.logger.error(f"Collecting stats for {mountpoint} failed: {e}")
                span.record_exception(e)
                span.set_status(Status(StatusCode.ERROR, str(e)))
                return {}

            stats = parse_btrfs_stats(output)
            span.set_attribute('btrfs.stats', len(stats))
            self.logger.debug(f"{mountpoint}: {stats}")
            return stats

    def _merge(self, stats: Dict[str, float], result: Dict[str, float], mountpoint: str):
        for key in stats.keys() & result.keys():
            self.logger.warning(f"{mountpoint} reports {key} again, replacing {stats[key]} with {result[key]}")
        stats.update(result)

    def collect(self) -> Dict[str, float]:
        """
        Run one collection cycle.

        Returns:
            Merged mapping of ``<device>_<counter>`` to value
        """
        stats: Dict[str, float] = {}

        with tracer.start_as_current_span('collect_btrfs_stats') as span:
            span.set_attribute('btrfs.mountpoints', len(self.mountpoints))

            if self.workers > 1 and len(self.mountpoints) > 1:
                parent = otel_context.get_current()
                workers = min(self.workers, len(self.mountpoints))
                with ThreadPoolExecutor(max_workers=workers) as executor:
                    results = executor.map(
                        lambda m: self._collect_mountpoint(m, parent), self.mountpoints
                    )
                    for mountpoint, result in zip(self.mountpoints, results):
                        self._merge(stats, result, mountpoint)
            else:
                for mountpoint in self.mountpoints:
                    self._merge(stats, self._collect_mountpoint(mountpoint), mountpoint)

            span.set_attribute('btrfs.stats', len(stats))

        self.logger.info(f"{len(stats)} btrfs stats collected")
        return stats
