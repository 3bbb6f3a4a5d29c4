"""Pure frozen dataclasses with zero I/O for enclave services and Ethereum clients.

The models layer is the foundation of the package. It has **no dependencies**
on any other ethnet package -- only the Python standard library. Records use
``@dataclass(frozen=True, slots=True)`` for immutability; validation happens
in ``__post_init__`` so invalid instances never escape the constructor.

Attributes:
    ServiceType: Coarse category of a service (execution, consensus,
        validator, auxiliary, other).
    ClientType: Concrete execution or consensus client implementation.
    RawService: Service as listed by the orchestrator, with its
        [PortInfo][ethnet.models.service.PortInfo] map.
    Service: Flat typed view of a service exposed by a network.
    ServiceMetadata: Auxiliary facts extracted from a service, with lossless
        dict conversion.
    ExecutionEndpoints: RPC, WS, Engine, P2P, and metrics URLs.
    ConsensusEndpoints: Beacon API, P2P, and metrics URLs.
    ValidatorEndpoints: Validator API and metrics URLs.
    ExecutionClient: Typed execution node record.
    ConsensusClient: Typed beacon node record.
    Validator: Typed validator client record.
    ClientCollection: Records bucketed by client type.

Note:
    Models use ``object.__setattr__`` in ``__post_init__`` to store
    normalized mapping fields on frozen dataclasses. This is safe because
    ``__post_init__`` runs during ``__init__`` before the instance is
    exposed to external code.
"""

from .client import ClientCollection, ConsensusClient, ExecutionClient, Validator
from .constants import (
    CONSENSUS_CLIENT_TYPES,
    EXECUTION_CLIENT_TYPES,
    SERVICE_STATUS_RUNNING,
    ClientType,
    ServiceType,
)
from .endpoints import ConsensusEndpoints, ExecutionEndpoints, ValidatorEndpoints
from .metadata import PortMetadata, ServiceMetadata
from .service import Port, PortInfo, RawService, Service


__all__ = [
    "CONSENSUS_CLIENT_TYPES",
    "EXECUTION_CLIENT_TYPES",
    "SERVICE_STATUS_RUNNING",
    "ClientCollection",
    "ClientType",
    "ConsensusClient",
    "ConsensusEndpoints",
    "ExecutionClient",
    "ExecutionEndpoints",
    "Port",
    "PortInfo",
    "PortMetadata",
    "RawService",
    "Service",
    "ServiceMetadata",
    "ServiceType",
    "Validator",
    "ValidatorEndpoints",
]
