"""
Order submission validation.

Rules are checked in order and the first failure is reported:

    1. orderId present and a non-empty string
    2. customerId present and a non-empty string
    3. products present and a non-empty array
    4. every product is an object with a non-empty productId
"""

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field

from order_intake.errors import ValidationError


class OrderSubmission(BaseModel):
    """A structurally valid order, as accepted from the caller"""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    order_id: str = Field(alias='orderId')
    customer_id: str = Field(alias='customerId')
    products: List[Dict[str, Any]]

    def to_message(self) -> Dict[str, Any]:
        """Broker message body: orderId, customerId and products as submitted"""
        return self.model_dump(by_alias=True)


def _is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ''


def _require_string(data: Dict[str, Any], field: str) -> None:
    if not _is_non_empty_string(data.get(field)):
        raise ValidationError(field, f"{field} is required and must be a non-empty string")


def validate_order(data: Any) -> OrderSubmission:
    """Validate a decoded request body, raising ValidationError on the first broken rule"""
    if not isinstance(data, dict):
        raise ValidationError('body', "Request body must be a JSON object")

    _require_string(data, 'orderId')
    _require_string(data, 'customerId')

    products = data.get('products')
    if not isinstance(products, list) or len(products) == 0:
        raise ValidationError('products', "products is required and must be a non-empty array")

    for idx, product in enumerate(products):
        if not isinstance(product, dict) or not _is_non_empty_string(product.get('productId')):
            raise ValidationError(
                'productId',
                f"Each product must have a productId (product {idx} is missing productId)",
                error='Invalid product',
            )

    return OrderSubmission.model_validate(data)
