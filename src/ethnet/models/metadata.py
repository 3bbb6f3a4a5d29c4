"""
Auxiliary facts extracted from a discovered service.

[ServiceMetadata][ethnet.models.metadata.ServiceMetadata] is the record
produced by [MetadataParser][ethnet.discovery.parser.MetadataParser]. It
converts losslessly to and from a JSON-compatible dict via
[to_dict()][ethnet.models.metadata.ServiceMetadata.to_dict] and
[from_dict()][ethnet.models.metadata.ServiceMetadata.from_dict]; the JSON
string form lives in [ethnet.discovery.parser][].

The dict shape is an internal convenience with no compatibility contract
beyond round-trip fidelity.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ._validation import (
    freeze_mapping,
    validate_instance,
    validate_non_negative_int,
    validate_port_number,
    validate_str,
)
from .constants import ClientType, ServiceType


@dataclass(frozen=True, slots=True)
class PortMetadata:
    """Port details recorded in [ServiceMetadata][ethnet.models.metadata.ServiceMetadata].

    Attributes:
        name: Port name.
        number: Port number.
        protocol: Transport protocol.
        url: Orchestrator-precomputed URL, or empty.
        exposed_to_host: ``True`` when the orchestrator published a URL.
    """

    name: str
    number: int
    protocol: str = ""
    url: str = ""
    exposed_to_host: bool = False

    def __post_init__(self) -> None:
        validate_str(self.name, "name")
        validate_port_number(self.number, "number")
        validate_str(self.protocol, "protocol")
        validate_str(self.url, "url")
        validate_instance(self.exposed_to_host, bool, "exposed_to_host")

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "number": self.number,
            "protocol": self.protocol,
            "url": self.url,
            "exposed_to_host": self.exposed_to_host,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PortMetadata:
        return cls(
            name=data["name"],
            number=data["number"],
            protocol=data.get("protocol", ""),
            url=data.get("url", ""),
            exposed_to_host=data.get("exposed_to_host", False),
        )


@dataclass(frozen=True, slots=True)
class ServiceMetadata:
    """Immutable metadata describing one discovered service.

    Identity fields (``version``, ``enode``, ``enr``, ``peer_id``) are
    placeholders: retrieving them requires querying the client APIs, which
    is out of scope for discovery. They hold ``"unknown"`` or ``""`` and are
    never filled with plausible-looking fabricated values.

    Attributes:
        name: Service name.
        service_type: Classified [ServiceType][ethnet.models.constants.ServiceType].
        client_type: Classified [ClientType][ethnet.models.constants.ClientType].
        status: Orchestrator status string.
        container_id: Container/service identifier.
        ip_address: Service IP address.
        ports: Read-only mapping of port name to
            [PortMetadata][ethnet.models.metadata.PortMetadata]. ``None`` is
            normalized to an empty mapping.
        node_index: Participant index parsed from ``el-N-...``/``cl-N-...``.
        node_name: Remainder of the name after the index, or the full name.
        chain_id: Chain id, when known.
        validator_count: Number of validator keys (validator services only).
        validator_start_index: First validator key index.
        version: Client version, ``"unknown"`` until queried.
        p2p_port: Peer-to-peer port number, or 0.
        enode: Execution client enode, or empty.
        enr: Consensus client ENR, or empty.
        peer_id: Consensus client libp2p peer id, or empty.

    Examples:
        ```python
        meta = ServiceMetadata(name="el-1-geth", service_type=ServiceType.EXECUTION_CLIENT)
        ServiceMetadata.from_dict(meta.to_dict()) == meta  # True
        ```
    """

    name: str
    service_type: ServiceType = ServiceType.OTHER
    client_type: ClientType = ClientType.UNKNOWN
    status: str = ""
    container_id: str = ""
    ip_address: str = ""
    ports: Mapping[str, PortMetadata] | None = field(default=None, hash=False)
    node_index: int = 0
    node_name: str = ""
    chain_id: int = 0
    validator_count: int = 0
    validator_start_index: int = 0
    version: str = ""
    p2p_port: int = 0
    enode: str = ""
    enr: str = ""
    peer_id: str = ""

    def __post_init__(self) -> None:
        validate_str(self.name, "name")
        validate_instance(self.service_type, ServiceType, "service_type")
        validate_instance(self.client_type, ClientType, "client_type")
        for attr in ("status", "container_id", "ip_address", "node_name", "version"):
            validate_str(getattr(self, attr), attr)
        for attr in ("enode", "enr", "peer_id"):
            validate_str(getattr(self, attr), attr)
        for attr in ("node_index", "chain_id", "validator_count", "validator_start_index"):
            validate_non_negative_int(getattr(self, attr), attr)
        validate_port_number(self.p2p_port, "p2p_port")

        ports = freeze_mapping(self.ports, "ports")
        for port_name, port in ports.items():
            validate_instance(port, PortMetadata, f"ports[{port_name!r}]")
        object.__setattr__(self, "ports", ports)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-compatible dict with every field.

        Enum fields are emitted as their string values and ports as a dict of
        port dicts keyed by port name.
        """
        assert self.ports is not None  # noqa: S101  # Always set in __post_init__
        return {
            "name": self.name,
            "service_type": str(self.service_type),
            "client_type": str(self.client_type),
            "status": self.status,
            "container_id": self.container_id,
            "ip_address": self.ip_address,
            "ports": {name: port.to_dict() for name, port in sorted(self.ports.items())},
            "node_index": self.node_index,
            "node_name": self.node_name,
            "chain_id": self.chain_id,
            "validator_count": self.validator_count,
            "validator_start_index": self.validator_start_index,
            "version": self.version,
            "p2p_port": self.p2p_port,
            "enode": self.enode,
            "enr": self.enr,
            "peer_id": self.peer_id,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ServiceMetadata:
        """Rebuild metadata from a dict produced by ``to_dict()``.

        Missing keys take the field defaults; a missing or ``null`` ``ports``
        entry yields an empty mapping.

        Raises:
            KeyError: If ``name`` is missing.
            ValueError: If an enum value or a numeric field is invalid.
            TypeError: If a field has the wrong type.
        """
        ports = {
            port_name: PortMetadata.from_dict(port)
            for port_name, port in (data.get("ports") or {}).items()
        }
        return cls(
            name=data["name"],
            service_type=ServiceType(data.get("service_type", ServiceType.OTHER)),
            client_type=ClientType(data.get("client_type", ClientType.UNKNOWN)),
            status=data.get("status", ""),
            container_id=data.get("container_id", ""),
            ip_address=data.get("ip_address", ""),
            ports=ports,
            node_index=data.get("node_index", 0),
            node_name=data.get("node_name", ""),
            chain_id=data.get("chain_id", 0),
            validator_count=data.get("validator_count", 0),
            validator_start_index=data.get("validator_start_index", 0),
            version=data.get("version", ""),
            p2p_port=data.get("p2p_port", 0),
            enode=data.get("enode", ""),
            enr=data.get("enr", ""),
            peer_id=data.get("peer_id", ""),
        )
