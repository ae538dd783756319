"""Tests for the order service routes and downstream error mapping."""

import pytest

from microservices.client import PaymentCallError, PaymentClient
from microservices.config import OrderConfig
from microservices.order_service import create_app
from microservices.registry import StaticResolver


class TestOrderRoute:
    def test_order_passes_payment_body_through(self, make_order_client) -> None:
        client, stub = make_order_client(body=b"Payment from port 8081")

        response = client.get('/order')

        assert response.status_code == 200
        assert response.get_data() == b"Payment from port 8081"
        assert response.mimetype == 'text/plain'
        assert stub.calls == 1

    def test_order_keeps_body_bytes_verbatim(self, make_order_client) -> None:
        body = "  Payment from port 8081\n  with whitespace é ".encode('utf-8')
        client, _ = make_order_client(body=body, content_type='text/plain')

        response = client.get('/order')

        assert response.get_data() == body
        assert response.headers['Content-Type'] == 'text/plain'

    def test_order_relays_payment_content_type(self, make_order_client) -> None:
        client, _ = make_order_client(body=b"Payment", content_type='text/plain; charset=iso-8859-1')

        assert client.get('/order').headers['Content-Type'] == 'text/plain; charset=iso-8859-1'

    def test_order_calls_downstream_per_request(self, make_order_client) -> None:
        client, stub = make_order_client(body=b"ok")

        client.get('/order')
        client.get('/order')

        assert stub.calls == 2

    @pytest.mark.parametrize(
        "kind, expected_status",
        [
            ('resolution', 503),
            ('connection', 502),
            ('timeout', 504),
            ('status', 502),
        ],
    )
    def test_downstream_errors_map_to_server_errors(self, make_order_client, kind, expected_status) -> None:
        client, _ = make_order_client(error=PaymentCallError(kind, f"PAYMENT-SERVICE {kind}"))

        response = client.get('/order')

        assert response.status_code == expected_status
        assert response.get_data(as_text=True) == f"PAYMENT-SERVICE {kind}"

    def test_unknown_error_kind_is_500(self, make_order_client) -> None:
        client, _ = make_order_client(error=PaymentCallError('mystery', "boom"))

        assert client.get('/order').status_code == 500


class TestOrderHealth:
    def test_health_does_not_call_payment(self, make_order_client) -> None:
        client, stub = make_order_client(error=PaymentCallError('connection', "down"))

        response = client.get('/health')

        assert response.status_code == 200
        assert response.get_json() == {
            'service': 'order-service',
            'status': 'healthy',
            'dependencies': ['PAYMENT-SERVICE'],
        }
        assert stub.calls == 0


class TestOrderAppWiring:
    def test_default_client_built_from_config(self, order_config: OrderConfig) -> None:
        app = create_app(order_config)

        payment_client = app.extensions['payment_client']
        assert isinstance(payment_client, PaymentClient)
        assert isinstance(payment_client.resolver, StaticResolver)
        assert payment_client.resolver.resolve('PAYMENT-SERVICE') == 'http://payment.test:8081'
        assert payment_client.path == '/pay'
        assert payment_client.timeout is None
