"""
Kafka publisher for accepted orders.

One producer is created at startup and shared by every request handler;
KafkaProducer is thread-safe, so no per-request locking is needed. Each
order is sent exactly once, keyed by orderId so that all messages for the
same order land on the same partition.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from kafka import KafkaProducer
from kafka.errors import KafkaError

from order_intake.config import ORDERS_TOPIC, SERVICE_NAME
from order_intake.errors import BrokerConnectionError, PublishError
from order_intake.validation import OrderSubmission

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PublishEnvelope:
    topic: str
    key: bytes
    value: bytes


@dataclass(frozen=True)
class PublishReceipt:
    """Broker acknowledgment for one published order"""
    order_id: str
    topic: str
    partition: int
    offset: int


def build_envelope(submission: OrderSubmission, topic: str = ORDERS_TOPIC) -> PublishEnvelope:
    try:
        value = json.dumps(submission.to_message()).encode('utf-8')
    except (TypeError, ValueError) as e:
        raise PublishError(submission.order_id, f"Could not serialize order: {e}") from e
    return PublishEnvelope(topic=topic, key=submission.order_id.encode('utf-8'), value=value)


class KafkaOrderPublisher:
    """Owns the Kafka producer and publishes orders to the orders topic"""

    def __init__(
        self,
        bootstrap_servers: List[str],
        client_id: str = SERVICE_NAME,
        send_timeout: float = 10.0,
        topic: str = ORDERS_TOPIC,
        producer_factory: Callable[..., Any] = KafkaProducer,
    ):
        self.bootstrap_servers = bootstrap_servers
        self.client_id = client_id
        self.send_timeout = send_timeout
        self.topic = topic
        self._producer_factory = producer_factory
        self.producer = None

    @property
    def is_connected(self) -> bool:
        return self.producer is not None

    def connect(self):
        """Create the producer; raises BrokerConnectionError if no broker answers"""
        if self.producer is not None:
            return

        try:
            self.producer = self._producer_factory(
                bootstrap_servers=self.bootstrap_servers,
                client_id=self.client_id,
                acks='all',
                retries=0,
                max_block_ms=int(self.send_timeout * 1000),
            )
        except KafkaError as e:
            logger.error(f"Kafka connection failed ({', '.join(self.bootstrap_servers)}): {e}")
            raise BrokerConnectionError(f"Could not connect to Kafka: {e}") from e

        logger.info(f"Connected to Kafka at {', '.join(self.bootstrap_servers)}")

    def send(self, submission: OrderSubmission) -> PublishReceipt:
        """Publish one order and wait for the broker acknowledgment. Never retries."""
        producer = self.producer
        if producer is None:
            logger.error(f"Cannot publish order {submission.order_id}: producer not connected")
            raise PublishError(submission.order_id, "Kafka producer is not connected")

        envelope = build_envelope(submission, self.topic)
        logger.info(f"Sending order to Kafka: {submission.order_id}")

        try:
            future = producer.send(envelope.topic, key=envelope.key, value=envelope.value)
            metadata = future.get(timeout=self.send_timeout)
        except KafkaError as e:
            logger.error(f"Failed to publish order {submission.order_id}: {e}")
            raise PublishError(submission.order_id, str(e) or e.__class__.__name__) from e

        logger.info(
            f"Order sent successfully: {submission.order_id} "
            f"({metadata.topic}[{metadata.partition}]@{metadata.offset})"
        )
        return PublishReceipt(
            order_id=submission.order_id,
            topic=metadata.topic,
            partition=metadata.partition,
            offset=metadata.offset,
        )

    def close(self, timeout: Optional[float] = None):
        """Flush pending acknowledgments and close the producer"""
        producer, self.producer = self.producer, None
        if producer is None:
            return

        try:
            producer.flush(timeout=timeout)
        finally:
            producer.close(timeout=timeout)
        logger.info("Kafka producer closed")
