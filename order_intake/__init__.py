"""
Order Intake Gateway
Accepts order submissions over HTTP and publishes them to Kafka for downstream processing
"""

__version__ = "1.0.0"
