import logging
import sys

from order_intake.app import create_app
from order_intake.config import Settings, configure_logging
from order_intake.lifecycle import ServiceLifecycle
from order_intake.publisher import KafkaOrderPublisher
from order_intake.status_bridge import OrderStatusBridge

logger = logging.getLogger('order_intake')


def build_service(settings: Settings) -> ServiceLifecycle:
    publisher = KafkaOrderPublisher(
        settings.kafka_brokers,
        client_id=settings.kafka_client_id,
        send_timeout=settings.publish_timeout,
    )
    status_bridge = OrderStatusBridge(settings.order_status_url, timeout=settings.status_timeout)
    app = create_app(publisher, status_bridge)
    return ServiceLifecycle(
        app,
        publisher,
        status_bridge,
        host=settings.host,
        port=settings.port,
        shutdown_timeout=settings.shutdown_timeout,
    )


def main() -> int:
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    logger.info(f"Starting Order Intake Service on port {settings.port}...")
    return build_service(settings).run()


if __name__ == '__main__':
    sys.exit(main())
