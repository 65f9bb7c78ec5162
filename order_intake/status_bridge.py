"""
Order status bridge.

Proxies a status lookup to the order status service. Exactly one outbound
call is made per lookup, always with a bounded timeout, and the result is
never cacheable: order status changes while an order is being processed.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

logger = logging.getLogger(__name__)

NO_STORE_HEADERS = {
    'Cache-Control': 'no-cache, no-store, must-revalidate',
    'Pragma': 'no-cache',
    'Expires': '0',
}


@dataclass(frozen=True)
class StatusResult:
    status_code: int
    body: bytes
    content_type: str = 'application/json'
    headers: Dict[str, str] = field(default_factory=lambda: dict(NO_STORE_HEADERS))


def _json_result(status_code: int, payload: Dict[str, Any]) -> StatusResult:
    return StatusResult(status_code=status_code, body=json.dumps(payload).encode('utf-8'))


class OrderStatusBridge:
    """Synchronous proxy to GET {base_url}/api/orders/<orderId>/status"""

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        session: Optional[requests.Session] = None,
    ):
        if timeout is None or timeout <= 0:
            raise ValueError("Status lookups require a positive timeout")
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()

    def status_url(self, order_id: str) -> str:
        return f"{self.base_url}/api/orders/{quote(order_id, safe='')}/status"

    def fetch_status(self, order_id: str) -> StatusResult:
        url = self.status_url(order_id)
        try:
            response = self.session.get(
                url, headers=NO_STORE_HEADERS, timeout=self.timeout, allow_redirects=False
            )
        except requests.RequestException as e:
            logger.error(f"Error fetching order status for {order_id} from {url}: {e}")
            return _json_result(503, {
                'error': 'Order status service unavailable',
                'message': 'Please try again later',
            })

        if response.status_code == 404:
            logger.info(f"Order status not found: {order_id}")
            return _json_result(404, {'error': 'Order not found', 'orderId': order_id})

        if not 200 <= response.status_code < 300:
            logger.warning(
                f"Order status service returned {response.status_code} for {order_id}"
            )
            return _json_result(response.status_code, {'error': 'Unable to retrieve order status'})

        return StatusResult(
            status_code=response.status_code,
            body=response.content,
            content_type=response.headers.get('Content-Type', 'application/json'),
        )

    def close(self):
        self.session.close()
