"""Shared fixtures: a fake Kafka producer and a stubbed status-service session"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
import requests

from order_intake.app import create_app
from order_intake.publisher import KafkaOrderPublisher
from order_intake.status_bridge import OrderStatusBridge


class FakeFuture:
    def __init__(self, metadata=None, error=None):
        self.metadata = metadata
        self.error = error

    def get(self, timeout=None):
        if self.error is not None:
            raise self.error
        return self.metadata


class FakeProducer:
    """Records sends the way KafkaProducer would receive them"""

    def __init__(self, **config):
        self.config = config
        self.sent = []
        self.send_error = None
        self.flushed = False
        self.closed = False

    def send(self, topic, key=None, value=None):
        self.sent.append(SimpleNamespace(topic=topic, key=key, value=value))
        if self.send_error is not None:
            return FakeFuture(error=self.send_error)
        metadata = SimpleNamespace(topic=topic, partition=0, offset=len(self.sent) - 1)
        return FakeFuture(metadata=metadata)

    def flush(self, timeout=None):
        self.flushed = True

    def close(self, timeout=None):
        self.closed = True


@pytest.fixture
def producer():
    return FakeProducer()


@pytest.fixture
def publisher(producer):
    pub = KafkaOrderPublisher(['kafka:9092'], producer_factory=lambda **config: producer)
    pub.connect()
    return pub


@pytest.fixture
def status_session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def status_bridge(status_session):
    return OrderStatusBridge('http://order-worker:8080', timeout=2.0, session=status_session)


@pytest.fixture
def app(publisher, status_bridge):
    app = create_app(publisher, status_bridge)
    app.config.update(TESTING=True)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def make_response(status_code, body=b'', content_type='application/json'):
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.content = body
    response.headers = {'Content-Type': content_type}
    return response
