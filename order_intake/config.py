"""
Runtime settings for the order intake gateway.

Values come from the environment and are read once at startup:

    HOST, PORT          listener address
    KAFKA_BROKERS       comma-separated broker list (host:port,...)
    KAFKA_CLIENT_ID     producer client id
    PUBLISH_TIMEOUT     seconds to wait for a broker acknowledgment
    ORDER_STATUS_URL    base URL of the order status service
    STATUS_TIMEOUT      seconds before a status lookup is abandoned
    SHUTDOWN_TIMEOUT    seconds allowed to flush the producer on shutdown
    LOG_LEVEL           root log level
"""

import logging
import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

ORDERS_TOPIC = 'orders'
SERVICE_NAME = 'order-api'

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _parse_brokers(raw: str) -> List[str]:
    brokers = [b.strip() for b in raw.split(',') if b.strip()]
    if not brokers:
        raise ValueError("KAFKA_BROKERS must name at least one broker")
    return brokers


def _positive_float(name: str, raw: str) -> float:
    value = float(raw)
    if value <= 0:
        raise ValueError(f"{name} must be greater than zero, got {raw}")
    return value


@dataclass(frozen=True)
class Settings:
    host: str = '0.0.0.0'
    port: int = 3000
    kafka_brokers: List[str] = field(default_factory=lambda: ['localhost:9092'])
    kafka_client_id: str = SERVICE_NAME
    publish_timeout: float = 10.0
    order_status_url: str = 'http://order-worker:8080'
    status_timeout: float = 5.0
    shutdown_timeout: float = 10.0
    log_level: str = 'INFO'

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            host=env.get('HOST', '0.0.0.0'),
            port=int(env.get('PORT', '3000')),
            kafka_brokers=_parse_brokers(env.get('KAFKA_BROKERS', 'localhost:9092')),
            kafka_client_id=env.get('KAFKA_CLIENT_ID', SERVICE_NAME),
            publish_timeout=_positive_float('PUBLISH_TIMEOUT', env.get('PUBLISH_TIMEOUT', '10')),
            order_status_url=env.get('ORDER_STATUS_URL', 'http://order-worker:8080').rstrip('/'),
            status_timeout=_positive_float('STATUS_TIMEOUT', env.get('STATUS_TIMEOUT', '5')),
            shutdown_timeout=_positive_float('SHUTDOWN_TIMEOUT', env.get('SHUTDOWN_TIMEOUT', '10')),
            log_level=env.get('LOG_LEVEL', 'INFO').upper(),
        )


def configure_logging(level: str = 'INFO') -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
