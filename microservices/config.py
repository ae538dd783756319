"""
Environment driven configuration for the order and payment services.
"""

import math
import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_PAYMENT_PORT = '8081'
DEFAULT_ORDER_PORT = '8080'
DEFAULT_PAYMENT_SERVICE_NAME = 'PAYMENT-SERVICE'
DEFAULT_REGISTRY = f'{DEFAULT_PAYMENT_SERVICE_NAME}=http://localhost:{DEFAULT_PAYMENT_PORT}'

RESOLVER_KINDS = ('static', 'dns', 'kubernetes')


class ConfigError(ValueError):
    """Raised when the environment holds an unusable setting."""


def _port(value: str, variable: str) -> str:
    value = value.strip()
    if not value.isdigit() or not 0 < int(value) < 65536:
        raise ConfigError(f"{variable} must be a TCP port, got {value!r}")
    return value


def _env_port(variable: str, default: str) -> str:
    # SERVER_PORT is shared by both services when the specific variable is unset
    raw = os.getenv(variable) or os.getenv('SERVER_PORT') or default
    return _port(raw, variable)


@dataclass(frozen=True)
class PaymentConfig:
    port: str = DEFAULT_PAYMENT_PORT
    host: str = '0.0.0.0'
    service_name: str = 'payment-service'
    log_level: str = 'INFO'

    @classmethod
    def from_env(cls):
        return cls(
            port=_env_port('PAYMENT_SERVICE_PORT', DEFAULT_PAYMENT_PORT),
            host=os.getenv('PAYMENT_SERVICE_HOST', '0.0.0.0'),
            log_level=os.getenv('LOG_LEVEL', 'INFO').upper(),
        )


@dataclass(frozen=True)
class OrderConfig:
    port: str = DEFAULT_ORDER_PORT
    host: str = '0.0.0.0'
    service_name: str = 'order-service'
    payment_service_name: str = DEFAULT_PAYMENT_SERVICE_NAME
    payment_path: str = '/pay'
    # No timeout unless one is configured explicitly
    timeout: Optional[float] = None
    resolver: str = 'static'
    registry: str = DEFAULT_REGISTRY
    dns_domain: Optional[str] = None
    dns_port: Optional[str] = None
    k8s_namespace: str = 'default'
    k8s_port_name: Optional[str] = None
    log_level: str = 'INFO'

    def __post_init__(self):
        if self.resolver not in RESOLVER_KINDS:
            raise ConfigError(
                f"SERVICE_RESOLVER must be one of {', '.join(RESOLVER_KINDS)}, got {self.resolver!r}"
            )
        if self.resolver == 'static' and not self.registry.strip():
            raise ConfigError("SERVICE_REGISTRY is required for the static resolver")
        if not self.payment_path.startswith('/'):
            raise ConfigError(f"PAYMENT_SERVICE_PATH must start with '/', got {self.payment_path!r}")
        if self.timeout is not None and (not math.isfinite(self.timeout) or self.timeout <= 0):
            raise ConfigError(f"PAYMENT_TIMEOUT_SECONDS must be a positive finite number, got {self.timeout}")

    @classmethod
    def from_env(cls):
        raw_timeout = os.getenv('PAYMENT_TIMEOUT_SECONDS')
        timeout = None
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                raise ConfigError(f"PAYMENT_TIMEOUT_SECONDS must be a number, got {raw_timeout!r}")

        dns_port = os.getenv('SERVICE_DNS_PORT')
        if dns_port:
            dns_port = _port(dns_port, 'SERVICE_DNS_PORT')

        return cls(
            port=_env_port('ORDER_SERVICE_PORT', DEFAULT_ORDER_PORT),
            host=os.getenv('ORDER_SERVICE_HOST', '0.0.0.0'),
            payment_service_name=os.getenv('PAYMENT_SERVICE_NAME', DEFAULT_PAYMENT_SERVICE_NAME),
            payment_path=os.getenv('PAYMENT_SERVICE_PATH', '/pay'),
            timeout=timeout,
            resolver=os.getenv('SERVICE_RESOLVER', 'static').lower(),
            registry=os.getenv('SERVICE_REGISTRY', DEFAULT_REGISTRY),
            dns_domain=os.getenv('SERVICE_DNS_DOMAIN') or None,
            dns_port=dns_port or None,
            k8s_namespace=os.getenv('K8S_NAMESPACE', 'default'),
            k8s_port_name=os.getenv('K8S_PORT_NAME') or None,
            log_level=os.getenv('LOG_LEVEL', 'INFO').upper(),
        )
