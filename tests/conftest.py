import socket

import pytest

from microservices.client import PaymentCallError, PaymentCallResult
from microservices.config import OrderConfig, PaymentConfig
from microservices.order_service import create_app as create_order_app
from microservices.payment_service import create_app as create_payment_app


class StubPaymentClient:
    """Stands in for PaymentClient, returning a canned result."""

    def __init__(self, result: PaymentCallResult):
        self.result = result
        self.resolver = None
        self.calls = 0

    def fetch(self) -> PaymentCallResult:
        self.calls += 1
        return self.result


@pytest.fixture
def payment_config() -> PaymentConfig:
    return PaymentConfig(port='8081')


@pytest.fixture
def payment_app(payment_config: PaymentConfig):
    return create_payment_app(payment_config)


@pytest.fixture
def order_config() -> OrderConfig:
    return OrderConfig(registry='PAYMENT-SERVICE=http://payment.test:8081')


@pytest.fixture
def make_order_client(order_config: OrderConfig):
    """Build an order service test client whose payment call returns ``body`` or ``error``."""

    def _make(body: bytes = None, error: PaymentCallError = None, content_type: str = None):
        stub = StubPaymentClient(PaymentCallResult(body=body, error=error, content_type=content_type))
        app = create_order_app(order_config, payment_client=stub)
        return app.test_client(), stub

    return _make


@pytest.fixture
def free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(('127.0.0.1', 0))
        return sock.getsockname()[1]
