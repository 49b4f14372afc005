# btrfs_exporter/exporters/__init__.py - Exporters module
"""
Exposition of collected stats.

This module provides:
- registry.py: Current snapshot and Prometheus text rendering
- http_handler.py: HTTP scrape endpoint
"""
