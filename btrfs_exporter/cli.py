# btrfs_exporter/cli.py - Command-line interface
"""
Command-line interface for the btrfs Prometheus exporter.
"""

import click
import logging
import sys

from btrfs_exporter import __version__
from btrfs_exporter.collector.cycle import BtrfsStatsCollector
from btrfs_exporter.exporters.http_handler import METRICS_PATH, create_server
from btrfs_exporter.exporters.registry import StatsRegistry
from btrfs_exporter.utils.config import Config
from btrfs_exporter.utils.logger import LEVELS, setup_logging, verbosity_to_level
from btrfs_exporter.utils.tracing import setup_tracing, shutdown_tracing


logger = logging.getLogger(__name__)


@click.command()
@click.argument('mountpoints')
@click.option('-p', '--port', type=int, help='Port to serve metrics on [default: 9899]')
@click.option('--host', help='Address to bind [default: ::]')
@click.option('-v', '--verbose', count=True, help='More logging, repeatable')
@click.option('-q', '--quiet', count=True, help='Less logging, repeatable')
@click.option('--log-level', default='INFO', type=click.Choice(LEVELS, case_sensitive=False))
@click.option('--log-file', type=click.Path(), help='Log file path')
@click.option('--otlp-endpoint', help='OpenTelemetry collector endpoint, e.g. http://localhost:4317')
@click.option('--config', 'config_file', type=click.Path(exists=True), help='YAML configuration file')
@click.option('--no-sudo', is_flag=True, help='Run btrfs directly instead of through sudo')
@click.option('--workers', type=int, help='Mount points to collect concurrently')
@click.version_option(version=__version__)
def cli(mountpoints, port, host, verbose, quiet, log_level, log_file, otlp_endpoint,
        config_file, no_sudo, workers):
    """
    Export btrfs device error counters to Prometheus.

    MOUNTPOINTS is a comma-separated list of btrfs mount points.

    Example:
        btrfs-exporter /,/data
        btrfs-exporter /srv --port 9899 -v --otlp-endpoint http://localhost:4317
    """
    setup_logging(level=verbosity_to_level(log_level, verbose, quiet), log_file=log_file)

    cfg = Config(config_file)

    # CLI options override the config file
    cfg.set('exporter.mountpoints', mountpoints)
    if port is not None:
        cfg.set('exporter.port', port)
    if host is not None:
        cfg.set('exporter.host', host)
    if otlp_endpoint:
        cfg.set('tracing.endpoint', otlp_endpoint)
    if no_sudo:
        cfg.set('btrfs.use_sudo', False)
    if workers is not None:
        cfg.set('collector.workers', workers)

    if not cfg.mountpoints():
        raise click.BadParameter('at least one mount point is required', param_hint='MOUNTPOINTS')

    setup_tracing(cfg.get('tracing.endpoint'), cfg.get('tracing.service_name', 'btrfs-exporter'))

    collector = BtrfsStatsCollector(cfg)
    registry = StatsRegistry()

    host = cfg.get('exporter.host')
    port = cfg.get('exporter.port')
    logger.info(f"Starting btrfs prometheus exporter on port {port}")

    try:
        server = create_server(cfg, collector, registry)
    except OSError as e:
        logger.error(f"Cannot listen on [{host}]:{port}: {e}")
        shutdown_tracing()
        sys.exit(1)

    logger.info(f"Serving {', '.join(collector.mountpoints)} stats at "
                f"http://[{host}]:{port}{METRICS_PATH}")

    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Received SIGINT, shutting down")
    finally:
        server.server_close()
        shutdown_tracing()

    sys.exit(0)


if __name__ == '__main__':
    cli()
