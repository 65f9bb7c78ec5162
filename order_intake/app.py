"""
Order Intake REST API
Validates order submissions, publishes them to Kafka and proxies status lookups

    GET  /health                    liveness, never touches Kafka or the status service
    GET  /stats                     lifecycle state and broker connectivity
    POST /orders                    submit an order
    GET  /orders/<orderId>/status   current order status from the order status service
"""

import logging
from datetime import datetime, timezone

from flask import Blueprint, Flask, Response, current_app, jsonify, request
from flask_cors import CORS

from order_intake.config import SERVICE_NAME
from order_intake.errors import PublishError, ValidationError
from order_intake.publisher import KafkaOrderPublisher
from order_intake.status_bridge import NO_STORE_HEADERS, OrderStatusBridge
from order_intake.validation import validate_order

logger = logging.getLogger(__name__)

PUBLISHER_KEY = 'order_intake.publisher'
STATUS_BRIDGE_KEY = 'order_intake.status_bridge'
LIFECYCLE_KEY = 'order_intake.lifecycle'

orders_bp = Blueprint('orders', __name__)


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def _publisher() -> KafkaOrderPublisher:
    return current_app.extensions[PUBLISHER_KEY]


def _status_bridge() -> OrderStatusBridge:
    return current_app.extensions[STATUS_BRIDGE_KEY]


@orders_bp.after_request
def _no_store_status(response: Response) -> Response:
    # Error handler responses on the status route
    if request.endpoint == 'orders.get_order_status':
        response.headers.update(NO_STORE_HEADERS)
    return response


@orders_bp.route('/health', methods=['GET'])
def health_check():
    return jsonify({
        'status': 'healthy',
        'service': SERVICE_NAME,
        'timestamp': utc_timestamp()
    }), 200


@orders_bp.route('/stats', methods=['GET'])
def get_stats():
    lifecycle = current_app.extensions.get(LIFECYCLE_KEY)
    return jsonify({
        'service': SERVICE_NAME,
        'state': lifecycle.state.value if lifecycle is not None else None,
        'brokerConnected': _publisher().is_connected,
        'timestamp': utc_timestamp()
    }), 200


@orders_bp.route('/orders', methods=['POST'])
def create_order():
    data = request.get_json(silent=True)

    try:
        submission = validate_order(data)
    except ValidationError as e:
        order_id = data.get('orderId') if isinstance(data, dict) else None
        logger.warning(f"Rejected order {order_id!r}: {e.message}")
        return jsonify({'error': e.error, 'message': e.message}), 400

    try:
        _publisher().send(submission)
    except PublishError as e:
        logger.error(f"Error sending order {submission.order_id}: {e.message}")
        return jsonify({
            'success': False,
            'error': 'Failed to submit order',
            'message': e.message
        }), 500

    return jsonify({
        'success': True,
        'message': 'Order submitted successfully',
        'orderId': submission.order_id,
        'timestamp': utc_timestamp()
    }), 200


@orders_bp.route('/orders/<order_id>/status', methods=['GET'])
def get_order_status(order_id):
    result = _status_bridge().fetch_status(order_id)
    return Response(
        result.body,
        status=result.status_code,
        content_type=result.content_type,
        headers=result.headers,
    )


def _internal_error(e):
    return jsonify({'error': 'Internal server error'}), 500


def create_app(publisher: KafkaOrderPublisher, status_bridge: OrderStatusBridge) -> Flask:
    """Build the Flask app around an injected publisher and status bridge"""
    app = Flask(__name__)
    CORS(app)

    app.extensions[PUBLISHER_KEY] = publisher
    app.extensions[STATUS_BRIDGE_KEY] = status_bridge

    app.register_blueprint(orders_bp)
    app.register_error_handler(500, _internal_error)
    return app
