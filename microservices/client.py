"""
Outbound call from the order service to the payment service.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import requests

from .registry import ResolutionError, ServiceResolver

logger = logging.getLogger(__name__)

RESOLUTION = 'resolution'
CONNECTION = 'connection'
TIMEOUT = 'timeout'
STATUS = 'status'


@dataclass(frozen=True)
class PaymentCallError:
    kind: str
    message: str
    status_code: Optional[int] = None


@dataclass(frozen=True)
class PaymentCallResult:
    body: Optional[bytes] = None
    error: Optional[PaymentCallError] = None
    content_type: Optional[str] = None

    def __post_init__(self):
        if (self.body is None) == (self.error is None):
            raise ValueError("PaymentCallResult holds exactly one of body or error")

    @property
    def ok(self) -> bool:
        return self.error is None


class PaymentClient:
    """Issues a single GET against the payment service, resolved by logical name."""

    def __init__(self, resolver: ServiceResolver, service_name: str = 'PAYMENT-SERVICE',
                 path: str = '/pay', timeout: Optional[float] = None, session=None):
        self.resolver = resolver
        self.service_name = service_name
        self.path = path
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config, resolver: ServiceResolver):
        return cls(resolver, config.payment_service_name, config.payment_path, config.timeout)

    def fetch(self) -> PaymentCallResult:
        """Call the payment endpoint and report the outcome without raising."""
        try:
            base_url = self.resolver.resolve(self.service_name)
        except ResolutionError as e:
            logger.error(f"Service resolution failed: {e}")
            return PaymentCallResult(error=PaymentCallError(RESOLUTION, str(e)))

        url = f"{base_url}{self.path}"
        logger.debug(f"Calling {url}")

        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            logger.warning(f"Timed out calling {url}: {e}")
            return PaymentCallResult(error=PaymentCallError(TIMEOUT, f"{self.service_name} timed out"))
        except requests.exceptions.ConnectionError as e:
            logger.warning(f"Could not connect to {url}: {e}")
            return PaymentCallResult(error=PaymentCallError(CONNECTION, f"{self.service_name} is unreachable"))
        except requests.exceptions.RequestException as e:
            logger.error(f"Request to {url} failed: {e}")
            return PaymentCallResult(error=PaymentCallError(CONNECTION, f"{self.service_name} request failed"))

        if not 200 <= response.status_code < 300:
            logger.warning(f"{self.service_name} returned {response.status_code} for {self.path}")
            return PaymentCallResult(error=PaymentCallError(
                STATUS,
                f"{self.service_name} returned {response.status_code}",
                status_code=response.status_code,
            ))

        # Relayed as raw bytes; never decoded
        return PaymentCallResult(body=response.content, content_type=response.headers.get('Content-Type'))
