import pytest

from order_intake.errors import ValidationError
from order_intake.validation import OrderSubmission, validate_order


def _order(**overrides):
    order = {
        'orderId': 'o1',
        'customerId': 'c1',
        'products': [{'productId': 'p1', 'quantity': 2}],
    }
    order.update(overrides)
    return order


class TestValidateOrder:

    def test_valid_order_returns_submission(self):
        submission = validate_order(_order())

        assert isinstance(submission, OrderSubmission)
        assert submission.order_id == 'o1'
        assert submission.customer_id == 'c1'
        assert submission.products == [{'productId': 'p1', 'quantity': 2}]

    @pytest.mark.parametrize('body', [None, [], 'order', 42])
    def test_non_object_body_rejected(self, body):
        with pytest.raises(ValidationError) as exc:
            validate_order(body)
        assert exc.value.field == 'body'

    @pytest.mark.parametrize('value', [None, '', '   ', 17])
    def test_order_id_required(self, value):
        with pytest.raises(ValidationError) as exc:
            validate_order(_order(orderId=value))
        assert exc.value.field == 'orderId'
        assert 'orderId' in exc.value.message

    def test_missing_order_id_key(self):
        order = _order()
        del order['orderId']
        with pytest.raises(ValidationError) as exc:
            validate_order(order)
        assert exc.value.field == 'orderId'

    @pytest.mark.parametrize('value', [None, '', 3.5])
    def test_customer_id_required(self, value):
        with pytest.raises(ValidationError) as exc:
            validate_order(_order(customerId=value))
        assert exc.value.field == 'customerId'
        assert 'customerId' in exc.value.message

    @pytest.mark.parametrize('value', [None, 'p1', {'productId': 'p1'}, []])
    def test_products_must_be_non_empty_array(self, value):
        with pytest.raises(ValidationError) as exc:
            validate_order(_order(products=value))
        assert exc.value.field == 'products'
        assert 'products' in exc.value.message

    @pytest.mark.parametrize('product', [{}, {'productId': ''}, {'name': 'x'}, 'p1', None])
    def test_every_product_needs_product_id(self, product):
        with pytest.raises(ValidationError) as exc:
            validate_order(_order(products=[{'productId': 'p1'}, product]))
        assert exc.value.field == 'productId'
        assert exc.value.error == 'Invalid product'
        assert 'product 1' in exc.value.message

    def test_first_failing_rule_wins(self):
        with pytest.raises(ValidationError) as exc:
            validate_order({'products': [{}]})
        assert exc.value.field == 'orderId'

        with pytest.raises(ValidationError) as exc:
            validate_order({'orderId': 'o1', 'products': 'nope'})
        assert exc.value.field == 'customerId'


class TestOrderSubmission:

    def test_to_message_uses_wire_field_names(self):
        submission = validate_order(_order(extra='ignored'))

        assert submission.to_message() == {
            'orderId': 'o1',
            'customerId': 'c1',
            'products': [{'productId': 'p1', 'quantity': 2}],
        }
