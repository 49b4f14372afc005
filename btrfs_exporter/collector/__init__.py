# btrfs_exporter/collector/__init__.py - Stats collection module
"""
Collector module for gathering btrfs device error counters.

This module provides:
- runner.py: Invocation of ``btrfs device stats``
- parser.py: Parsing of the command output
- cycle.py: Per-scrape collection across all mount points
"""
