"""
Service lifecycle: starting -> serving -> draining -> stopped.

Startup binds the HTTP listener first and only then connects to Kafka; a
failed broker connection aborts the process instead of serving without a
broker. On SIGTERM/SIGINT the listener is shut down and the producer is
flushed and closed before the process exits.
"""

import logging
import signal
import threading
from enum import Enum
from typing import Any, Callable

from flask import Flask
from kafka.errors import KafkaError
from werkzeug.serving import make_server

from order_intake.app import LIFECYCLE_KEY
from order_intake.errors import BrokerConnectionError
from order_intake.publisher import KafkaOrderPublisher
from order_intake.status_bridge import OrderStatusBridge

logger = logging.getLogger(__name__)


class ServiceState(str, Enum):
    STARTING = 'starting'
    SERVING = 'serving'
    DRAINING = 'draining'
    STOPPED = 'stopped'


class ServiceLifecycle:
    """Runs the gateway and sequences its startup and shutdown"""

    def __init__(
        self,
        app: Flask,
        publisher: KafkaOrderPublisher,
        status_bridge: OrderStatusBridge,
        host: str = '0.0.0.0',
        port: int = 3000,
        shutdown_timeout: float = 10.0,
        server_factory: Callable[..., Any] = make_server,
    ):
        self.app = app
        self.publisher = publisher
        self.status_bridge = status_bridge
        self.host = host
        self.port = port
        self.shutdown_timeout = shutdown_timeout
        self._server_factory = server_factory
        self._stop_requested = threading.Event()
        self.server = None
        self.state = ServiceState.STARTING

        app.extensions[LIFECYCLE_KEY] = self

    def _transition(self, state: ServiceState):
        logger.info(f"Service state: {self.state.value} -> {state.value}")
        self.state = state

    def start(self):
        """Bind the listener, then connect to Kafka. Raises BrokerConnectionError."""
        self.server = self._server_factory(self.host, self.port, self.app, threaded=True)
        logger.info(f"Listening on {self.host}:{self.port}")

        try:
            self.publisher.connect()
        except BrokerConnectionError:
            self.server.server_close()
            self.status_bridge.close()
            self._transition(ServiceState.STOPPED)
            raise

        self._transition(ServiceState.SERVING)

    def request_stop(self, signum=None, frame=None):
        if signum is not None:
            logger.info(f"Received {signal.Signals(signum).name}, shutting down gracefully...")
        self._stop_requested.set()

    def install_signal_handlers(self):
        signal.signal(signal.SIGTERM, self.request_stop)
        signal.signal(signal.SIGINT, self.request_stop)

    def serve(self) -> bool:
        """Serve requests on a background thread until a stop is requested.

        Returns False if the server thread died before a stop was requested.
        """
        thread = threading.Thread(target=self.server.serve_forever, name='http-server', daemon=True)
        thread.start()

        while not self._stop_requested.wait(timeout=1.0):
            if not thread.is_alive():
                logger.error("HTTP server thread exited unexpectedly")
                return False
        return True

    def drain(self) -> bool:
        """Stop the listener and flush the producer. Returns False if the flush failed."""
        self._transition(ServiceState.DRAINING)
        self.server.shutdown()
        self.server.server_close()

        clean = True
        try:
            self.publisher.close(timeout=self.shutdown_timeout)
        except KafkaError as e:
            logger.error(f"Kafka producer did not drain cleanly: {e}")
            clean = False
        finally:
            self.status_bridge.close()

        self._transition(ServiceState.STOPPED)
        return clean

    def run(self, install_signals: bool = True) -> int:
        """Run until stopped; returns the process exit code"""
        try:
            self.start()
        except BrokerConnectionError as e:
            logger.error(f"Startup aborted: {e}")
            return 1

        if install_signals:
            self.install_signal_handlers()

        stopped = self.serve()
        drained = self.drain()
        return 0 if stopped and drained else 1
