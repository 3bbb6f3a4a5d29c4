"""
Endpoint URL synthesis from raw service ports.

[EndpointExtractor][ethnet.discovery.endpoints.EndpointExtractor] assigns
each port of a service to an endpoint role by case-insensitive substring
match on the port name, then builds a URL for the role. Extraction never
raises: a role without a matching port yields an empty string.

Role table (first matching row per port wins):

| port name contains                 | role         | scheme |
|------------------------------------|--------------|--------|
| ``rpc`` (not ``ws``, not ``engine``) | RPC        | http   |
| ``ws`` / ``websocket``             | WebSocket    | ws     |
| ``engine`` / ``auth``              | Engine API   | http   |
| ``discovery`` / ``p2p`` (TCP first) | P2P        | tcp    |
| ``metrics``                        | Metrics      | http   |
| ``http`` (not ``metrics``) / ``beacon`` | Beacon API | http |
| ``api`` / ``http`` (not ``metrics``) | Validator API | http |

[parse_endpoint_url()][ethnet.discovery.endpoints.parse_endpoint_url] and
[validate_endpoint()][ethnet.discovery.endpoints.validate_endpoint] check
endpoint strings with ``rfc3986`` and are the only functions here that
raise.
"""

from __future__ import annotations

from collections.abc import Callable

from rfc3986 import uri_reference
from rfc3986.exceptions import RFC3986Exception
from rfc3986.validators import Validator

from ethnet.core.exceptions import EmptyEndpointError, InvalidEndpointError
from ethnet.models.constants import PORT_NUMBER_MAX
from ethnet.models.endpoints import ConsensusEndpoints, ExecutionEndpoints, ValidatorEndpoints
from ethnet.models.service import PortInfo, RawService


DEFAULT_PORTS: dict[str, int] = {"http": 80, "ws": 80, "https": 443, "wss": 443}
DEFAULT_HOST = "localhost"

_RolePredicate = Callable[[str], bool]


def _is_rpc(name: str) -> bool:
    return "rpc" in name and "ws" not in name and "engine" not in name


def _is_ws(name: str) -> bool:
    return "ws" in name or "websocket" in name


def _is_engine(name: str) -> bool:
    return "engine" in name or "auth" in name


def _is_p2p(name: str) -> bool:
    return "discovery" in name or "p2p" in name


def _is_metrics(name: str) -> bool:
    return "metrics" in name


def _is_beacon(name: str) -> bool:
    return ("http" in name and "metrics" not in name) or "beacon" in name


def _is_api(name: str) -> bool:
    return "api" in name or ("http" in name and "metrics" not in name)


# (role, predicate, scheme) per family; role names are the endpoint field names.
_EXECUTION_ROLES: tuple[tuple[str, _RolePredicate, str], ...] = (
    ("rpc_url", _is_rpc, "http"),
    ("ws_url", _is_ws, "ws"),
    ("engine_url", _is_engine, "http"),
    ("p2p_url", _is_p2p, "tcp"),
    ("metrics_url", _is_metrics, "http"),
)
_CONSENSUS_ROLES: tuple[tuple[str, _RolePredicate, str], ...] = (
    ("p2p_url", _is_p2p, "tcp"),
    ("metrics_url", _is_metrics, "http"),
    ("beacon_url", _is_beacon, "http"),
)
_VALIDATOR_ROLES: tuple[tuple[str, _RolePredicate, str], ...] = (
    ("metrics_url", _is_metrics, "http"),
    ("api_url", _is_api, "http"),
)


class EndpointExtractor:
    """Build role-specific endpoint URLs from a [RawService][ethnet.models.service.RawService].

    Stateless; a single instance can be shared.

    Ports are visited in port-name order, and the first port matching a role
    claims it. When the primary role of the family (RPC for execution,
    Beacon API for consensus, API for validators) is still empty, the
    extractor falls back to the first port whose name contains ``http`` or
    ``api``, and then to the first TCP port, both as ``http`` URLs.

    Examples:
        ```python
        svc = RawService(
            name="el-1-geth-lighthouse",
            ip_address="10.0.0.2",
            ports={"rpc": PortInfo(8545), "ws": PortInfo(8546)},
        )
        endpoints = EndpointExtractor().extract_execution_endpoints(svc)
        endpoints.rpc_url  # 'http://10.0.0.2:8545'
        endpoints.ws_url   # 'ws://10.0.0.2:8546'
        ```
    """

    def extract_execution_endpoints(self, service: RawService) -> ExecutionEndpoints:
        urls = self._assign_roles(service, _EXECUTION_ROLES)
        if not urls.get("rpc_url"):
            urls["rpc_url"] = self._fallback_url(service)
        return ExecutionEndpoints(**urls)

    def extract_consensus_endpoints(self, service: RawService) -> ConsensusEndpoints:
        urls = self._assign_roles(service, _CONSENSUS_ROLES)
        if not urls.get("beacon_url"):
            urls["beacon_url"] = self._fallback_url(service)
        return ConsensusEndpoints(**urls)

    def extract_validator_endpoints(self, service: RawService) -> ValidatorEndpoints:
        urls = self._assign_roles(service, _VALIDATOR_ROLES)
        if not urls.get("api_url"):
            urls["api_url"] = self._fallback_url(service)
        return ValidatorEndpoints(**urls)

    @staticmethod
    def build_url(service: RawService, port: PortInfo, scheme: str) -> str:
        """Return the URL of *port* on *service*.

        The orchestrator's precomputed ``port.url`` is returned verbatim when
        set. Otherwise the URL is ``{scheme}://{host}:{number}`` where host
        is the service IP, or ``localhost`` when the IP is unknown.
        """
        if port.url:
            return port.url
        host = service.ip_address or DEFAULT_HOST
        return f"{scheme}://{host}:{port.number}"

    def _assign_roles(
        self,
        service: RawService,
        roles: tuple[tuple[str, _RolePredicate, str], ...],
    ) -> dict[str, str]:
        urls: dict[str, str] = {}
        non_tcp: dict[str, str] = {}
        for port_name, port in service.sorted_ports():
            lowered = port_name.lower()
            for role, matches, scheme in roles:
                if matches(lowered):
                    # tcp:// roles take a UDP/QUIC port only when no TCP port matches
                    if scheme == "tcp" and not port.is_tcp:
                        non_tcp.setdefault(role, self.build_url(service, port, scheme))
                    elif role not in urls:
                        urls[role] = self.build_url(service, port, scheme)
                    break
        for role, url in non_tcp.items():
            urls.setdefault(role, url)
        return urls

    def _fallback_url(self, service: RawService) -> str:
        ports = service.sorted_ports()
        for port_name, port in ports:
            lowered = port_name.lower()
            if "http" in lowered or "api" in lowered:
                return self.build_url(service, port, "http")
        for _, port in ports:
            if port.is_tcp:
                return self.build_url(service, port, "http")
        return ""


def parse_endpoint_url(endpoint: str) -> tuple[str, int]:
    """Split an endpoint URL into host and port.

    When the URL carries no explicit port, ``http``/``ws`` default to 80 and
    ``https``/``wss`` to 443.

    Args:
        endpoint: Absolute URL, e.g. ``"http://10.0.0.2:8545"``.

    Returns:
        ``(host, port)``.

    Raises:
        InvalidEndpointError: If the URL is malformed, lacks a scheme or
            host, has an invalid port, or uses a scheme with no known default
            port and no explicit one.

    Examples:
        ```python
        parse_endpoint_url("https://example.com")    # ('example.com', 443)
        parse_endpoint_url("tcp://10.0.0.2:30303")   # ('10.0.0.2', 30303)
        parse_endpoint_url("ftp://example.com")      # raises InvalidEndpointError
        ```
    """
    try:
        uri = uri_reference(endpoint.strip()).normalize()
        Validator().require_presence_of("scheme", "host").check_validity_of(
            "scheme", "host", "port"
        ).validate(uri)
    except RFC3986Exception as e:
        raise InvalidEndpointError(f"invalid endpoint {endpoint!r}: {e}") from e

    scheme = uri.scheme
    host = uri.host
    if not host:
        raise InvalidEndpointError(f"invalid endpoint {endpoint!r}: missing host")

    if uri.port:
        try:
            port = int(uri.port)
        except ValueError:
            raise InvalidEndpointError(f"invalid port in {endpoint!r}: {uri.port}") from None
        if not 0 < port <= PORT_NUMBER_MAX:
            raise InvalidEndpointError(f"invalid port in {endpoint!r}: {port}")
        return host, port

    if scheme not in DEFAULT_PORTS:
        raise InvalidEndpointError(f"unknown scheme, no port: {endpoint!r}")
    return host, DEFAULT_PORTS[scheme]


def validate_endpoint(endpoint: str) -> None:
    """Check that *endpoint* is a usable endpoint URL.

    Raises:
        EmptyEndpointError: If *endpoint* is empty.
        InvalidEndpointError: If
            [parse_endpoint_url()][ethnet.discovery.endpoints.parse_endpoint_url]
            rejects it.
    """
    if not endpoint:
        raise EmptyEndpointError("empty endpoint")
    parse_endpoint_url(endpoint)
