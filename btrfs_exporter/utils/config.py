# btrfs_exporter/utils/config.py - Configuration management
"""
Configuration management for the exporter.
Built once at startup from defaults, an optional YAML file and CLI options,
then handed to the collector and the HTTP server.
"""

import copy
import yaml
from pathlib import Path
from typing import Dict, Any, List, Optional
import logging


class Config:
    """
    Configuration manager for the exporter.

    Loads configuration from YAML files and provides access to settings.
    """

    DEFAULT_CONFIG = {
        'exporter': {
            'mountpoints': [],
            'host': '::',
            'port': 9899,
        },
        'btrfs': {
            'binary': '/usr/bin/btrfs',
            'sudo_binary': '/usr/bin/sudo',
            'use_sudo': True,
            'timeout': None,
        },
        'collector': {
            'workers': 1,
        },
        'tracing': {
            'endpoint': None,
            'service_name': 'btrfs-exporter',
        },
    }

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_file: Path to YAML configuration file
        """
        self.logger = logging.getLogger(__name__)
        self.config = copy.deepcopy(self.DEFAULT_CONFIG)

        if config_file:
            self.load_from_file(config_file)

    def load_from_file(self, config_file: str):
        """
        Load configuration from YAML file.

        Args:
            config_file: Path to YAML file
        """
        config_path = Path(config_file)

        if not config_path.exists():
            self.logger.warning(f"Config file not found: {config_file}, using defaults")
            return

        try:
            with open(config_path, 'r') as f:
                loaded_config = yaml.safe_load(f) or {}

            self._merge_config(self.config, loaded_config)
            self.logger.info(f"Loaded configuration from {config_file}")

        except Exception as e:
            self.logger.error(f"Failed to load config: {e}")
            raise

    def _merge_config(self, base: Dict, override: Dict):
        """Recursively merge ``override`` into ``base``."""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._merge_config(base[key], value)
            else:
                base[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-notation key.

        Args:
            key: Configuration key (e.g., 'exporter.port')
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any):
        """
        Set configuration value by dot-notation key.

        Args:
            key: Configuration key (e.g., 'btrfs.use_sudo')
            value: Value to set
        """
        keys = key.split('.')
        config = self.config

        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value

    def mountpoints(self) -> List[str]:
        """
        Configured mount points, in order, without blanks.

        Accepts either a YAML list or a comma-separated string.
        """
        value = self.get('exporter.mountpoints', [])
        if isinstance(value, str):
            value = value.split(',')
        return [m.strip() for m in value if m and m.strip()]
