# btrfs_exporter/__init__.py
"""
Prometheus exporter for btrfs device error counters.
"""

__version__ = '0.1.0'
