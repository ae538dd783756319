"""
Logical service name resolution.

The order service never talks to a hard coded address. It asks a resolver to
turn a logical name such as ``PAYMENT-SERVICE`` into a base URL at request
time, so the same code runs against a static map on a laptop, cluster DNS, or
the Kubernetes API.
"""

import logging
import socket
from typing import Dict, Optional, Protocol

import urllib3

logger = logging.getLogger(__name__)


class ResolutionError(Exception):
    """Raised when a logical service name cannot be mapped to an address."""

    def __init__(self, name: str, reason: str):
        super().__init__(f"cannot resolve {name}: {reason}")
        self.name = name
        self.reason = reason


class ServiceResolver(Protocol):
    """Maps a logical service name to a base URL such as ``http://10.0.0.7:8081``."""

    def resolve(self, name: str) -> str:
        """
        Return the base URL for ``name``.

        Raises:
            ResolutionError: If the name cannot be mapped to an address
        """
        ...


class StaticResolver:
    def __init__(self, mapping: Dict[str, str]):
        self.mapping = {key.strip().upper(): url.rstrip('/') for key, url in mapping.items()}

    @classmethod
    def from_string(cls, raw: str):
        """Parse ``NAME=URL`` pairs separated by commas."""
        mapping = {}
        for entry in raw.split(','):
            entry = entry.strip()
            if not entry:
                continue
            name, sep, url = entry.partition('=')
            if not sep or not name.strip() or not url.strip():
                raise ValueError(f"Invalid registry entry {entry!r}, expected NAME=URL")
            mapping[name.strip()] = url.strip()
        return cls(mapping)

    def resolve(self, name: str) -> str:
        try:
            return self.mapping[name.upper()]
        except KeyError:
            raise ResolutionError(name, "not present in the static registry")

    def __repr__(self):
        return f"StaticResolver({sorted(self.mapping)})"


class DnsResolver:
    """Resolves the lowercased logical name as a DNS host name."""

    def __init__(self, port: Optional[str] = None, scheme: str = 'http', domain: Optional[str] = None):
        self.port = port
        self.scheme = scheme
        self.domain = domain.strip('.') if domain else None

    def host_for(self, name: str) -> str:
        host = name.lower()
        if self.domain:
            host = f"{host}.{self.domain}"
        return host

    def resolve(self, name: str) -> str:
        host = self.host_for(name)
        try:
            socket.getaddrinfo(host, self.port, proto=socket.IPPROTO_TCP)
        except (socket.gaierror, UnicodeError) as e:
            raise ResolutionError(name, f"DNS lookup for {host} failed: {e}")

        if self.port:
            return f"{self.scheme}://{host}:{self.port}"
        return f"{self.scheme}://{host}"

    def __repr__(self):
        return f"DnsResolver(domain={self.domain!r}, port={self.port!r})"


class KubernetesResolver:
    """Looks the logical name up as a Service object through the Kubernetes API."""

    def __init__(self, namespace: str = 'default', port_name: Optional[str] = None, api=None):
        self.namespace = namespace
        self.port_name = port_name
        self._api = api

    @property
    def api(self):
        if self._api is None:
            from kubernetes import client, config

            try:
                config.load_incluster_config()
            except config.ConfigException:
                config.load_kube_config()
            self._api = client.CoreV1Api()
        return self._api

    def resolve(self, name: str) -> str:
        try:
            from kubernetes.client.rest import ApiException
            from kubernetes.config import ConfigException
        except ImportError:
            raise ResolutionError(name, "the kubernetes package is not installed")

        service_name = name.lower()
        try:
            service = self.api.read_namespaced_service(service_name, self.namespace)
        except ApiException as e:
            raise ResolutionError(name, f"service {self.namespace}/{service_name} lookup failed ({e.status} {e.reason})")
        except ConfigException as e:
            raise ResolutionError(name, f"no Kubernetes configuration available: {e}")
        except urllib3.exceptions.HTTPError as e:
            logger.error(f"Kubernetes API unreachable while resolving {name}: {e}")
            raise ResolutionError(name, f"Kubernetes API unreachable: {e}")

        spec = service.spec
        if not spec.cluster_ip or spec.cluster_ip == 'None':
            raise ResolutionError(name, f"service {self.namespace}/{service_name} has no cluster IP")

        ports = spec.ports or []
        if self.port_name:
            ports = [p for p in ports if p.name == self.port_name]
        if not ports:
            raise ResolutionError(name, f"service {self.namespace}/{service_name} exposes no matching port")

        url = f"http://{spec.cluster_ip}:{ports[0].port}"
        logger.debug(f"Resolved {name} to {url} via Kubernetes")
        return url

    def __repr__(self):
        return f"KubernetesResolver(namespace={self.namespace!r})"


def build_resolver(config) -> ServiceResolver:
    """Create the resolver selected by an ``OrderConfig``."""
    if config.resolver == 'static':
        return StaticResolver.from_string(config.registry)
    if config.resolver == 'dns':
        return DnsResolver(port=config.dns_port, domain=config.dns_domain)
    if config.resolver == 'kubernetes':
        return KubernetesResolver(namespace=config.k8s_namespace, port_name=config.k8s_port_name)
    raise ValueError(f"Unknown resolver kind {config.resolver!r}")
