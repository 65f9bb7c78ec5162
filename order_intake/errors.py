"""Exceptions raised by the order intake gateway"""

from typing import Optional


class OrderIntakeError(Exception):
    """Base class for gateway errors"""


class ValidationError(OrderIntakeError):
    """Submission failed a structural rule; the client must fix the payload"""

    def __init__(self, field: str, message: str, error: str = "Invalid request"):
        super().__init__(message)
        self.field = field
        self.message = message
        self.error = error


class PublishError(OrderIntakeError):
    """The broker did not accept a message"""

    def __init__(self, order_id: Optional[str], message: str):
        super().__init__(message)
        self.order_id = order_id
        self.message = message


class BrokerConnectionError(OrderIntakeError):
    """Broker connection could not be established"""
