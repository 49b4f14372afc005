# btrfs_exporter/exporters/http_handler.py - Scrape endpoint
"""
HTTP endpoint Prometheus scrapes. Every request to ``/metrics`` runs a full
collection cycle before answering.
"""

from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
import logging
import socket

from opentelemetry import propagate
from prometheus_client import CONTENT_TYPE_LATEST

from btrfs_exporter.utils.tracing import get_tracer


METRICS_PATH = '/metrics'

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)


class MetricsHandler(BaseHTTPRequestHandler):

    def __init__(self, collector, registry, *args, **kwargs):
        self.collector = collector
        self.registry = registry
        super().__init__(*args, **kwargs)

    def do_GET(self):
        if self.path.split('?', 1)[0] != METRICS_PATH:
            self.send_response(404)
            self.send_header('Content-Length', '0')
            self.end_headers()
            return

        with tracer.start_as_current_span('scrape', context=propagate.extract(self.headers)):
            stats = self.collector.collect()
            self.registry.update(stats)
            body = self.registry.render().encode('utf-8')

        self.send_response(200)
        self.send_header('Content-Type', CONTENT_TYPE_LATEST)
        self.send_header('Content-Length', str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        logger.debug("%s - %s", self.address_string(), format % args)


class MetricsServer(ThreadingHTTPServer):
    """
    Thread-per-request HTTP server, binding IPv6 for hosts like ``::``.
    """

    def __init__(self, server_address, handler_class):
        if ':' in server_address[0]:
            self.address_family = socket.AF_INET6
        super().__init__(server_address, handler_class)


def create_server(config, collector, registry) -> MetricsServer:
    """
    Bind the scrape endpoint.

    Raises:
        OSError: If the address cannot be bound
    """
    host = config.get('exporter.host', '::')
    port = int(config.get('exporter.port', 9899))

    def handler(*args, **kwargs):
        return MetricsHandler(collector, registry, *args, **kwargs)

    return MetricsServer((host, port), handler)
