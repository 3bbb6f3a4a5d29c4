"""
Service shapes exchanged with the orchestrator and exposed on a network.

[RawService][ethnet.models.service.RawService] and
[PortInfo][ethnet.models.service.PortInfo] mirror what an orchestrator
returns when listing the services of an enclave. They are immutable once
constructed: the mapping engine only reads them.

[Service][ethnet.models.service.Service] and
[Port][ethnet.models.service.Port] form the flat, typed superset view that a
[Network][ethnet.network.network.Network] exposes for generic enumeration.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ._validation import freeze_mapping, validate_instance, validate_port_number, validate_str
from .constants import SERVICE_STATUS_RUNNING, ServiceType


@dataclass(frozen=True, slots=True)
class PortInfo:
    """A named port of a raw service.

    Attributes:
        number: Port number (0-65535).
        protocol: Transport protocol reported by the orchestrator (``TCP``,
            ``UDP``, ...).
        url: URL precomputed by the orchestrator, or empty. When non-empty it
            is authoritative and preferred over manual URL construction.
    """

    number: int
    protocol: str = "TCP"
    url: str = ""

    def __post_init__(self) -> None:
        validate_port_number(self.number, "number")
        validate_str(self.protocol, "protocol")
        validate_str(self.url, "url")

    @property
    def is_tcp(self) -> bool:
        """Whether the transport protocol is TCP (case-insensitive)."""
        return self.protocol.upper() == "TCP"


@dataclass(frozen=True, slots=True)
class RawService:
    """A service as listed by the orchestrator, before classification.

    Attributes:
        name: Service name, e.g. ``"el-1-geth-lighthouse"``.
        uuid: Container/service identifier.
        status: Orchestrator status string (``"RUNNING"`` when ready).
        ip_address: Service IP address, or empty when unknown.
        ports: Read-only mapping of port name to
            [PortInfo][ethnet.models.service.PortInfo].

    Examples:
        ```python
        svc = RawService(
            name="el-1-geth-lighthouse",
            ip_address="10.0.0.2",
            ports={"rpc": PortInfo(8545)},
        )
        svc.port_names  # frozenset({'rpc'})
        ```
    """

    name: str
    uuid: str = ""
    status: str = ""
    ip_address: str = ""
    ports: Mapping[str, PortInfo] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        validate_str(self.name, "name")
        validate_str(self.uuid, "uuid")
        validate_str(self.status, "status")
        validate_str(self.ip_address, "ip_address")
        ports = freeze_mapping(self.ports, "ports")
        for port_name, port in ports.items():
            validate_str(port_name, "port name")
            validate_instance(port, PortInfo, f"ports[{port_name!r}]")
        object.__setattr__(self, "ports", ports)

    @property
    def port_names(self) -> frozenset[str]:
        """Names of all ports exposed by the service."""
        return frozenset(self.ports)

    @property
    def is_running(self) -> bool:
        return self.status == SERVICE_STATUS_RUNNING

    def sorted_ports(self) -> list[tuple[str, PortInfo]]:
        """Return ``(name, port)`` pairs ordered by port name.

        Mapping order from an orchestrator is not meaningful; every consumer
        that picks "the first matching port" iterates this order so results
        are deterministic.
        """
        return sorted(self.ports.items())

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RawService:
        """Build a raw service from a plain dict (e.g. a YAML snapshot entry).

        Ports may be given either as ``{"number": ..., "protocol": ...,
        "url": ...}`` mappings or as bare port numbers.
        """
        ports: dict[str, PortInfo] = {}
        for port_name, entry in (data.get("ports") or {}).items():
            if isinstance(entry, Mapping):
                ports[str(port_name)] = PortInfo(
                    number=entry["number"],
                    protocol=entry.get("protocol", "TCP"),
                    url=entry.get("url", "") or "",
                )
            else:
                ports[str(port_name)] = PortInfo(number=entry)
        return cls(
            name=data["name"],
            uuid=data.get("uuid", "") or "",
            status=data.get("status", "") or "",
            ip_address=data.get("ip_address", "") or "",
            ports=ports,
        )


@dataclass(frozen=True, slots=True)
class Port:
    """A port of a typed network service."""

    name: str
    internal_port: int
    external_port: int
    protocol: str
    exposed_to_host: bool = False


@dataclass(frozen=True, slots=True)
class Service:
    """Flat, typed view of any service in the network.

    Attributes:
        name: Service name.
        type: Derived [ServiceType][ethnet.models.constants.ServiceType].
        container_id: Container/service identifier.
        ports: Ports ordered by name.
        status: Orchestrator status string.
    """

    name: str
    type: ServiceType
    container_id: str = ""
    ports: tuple[Port, ...] = ()
    status: str = ""

    def port(self, name: str) -> Port | None:
        """Return the port called *name*, or ``None``."""
        for p in self.ports:
            if p.name == name:
                return p
        return None
