r"""ethnet -- Ethereum test network discovery.

Discovers the services running inside an orchestrator-managed Ethereum test
network (an *enclave*) and turns the raw service listing into a typed,
queryable [Network][ethnet.network.network.Network] that test harnesses use
to reach client endpoints (RPC, WebSocket, Engine API, Beacon API,
metrics).

Architecture follows a **diamond DAG** dependency structure where imports
flow strictly downward:

```text
          discovery / network   Mapping engine and the network aggregate
             /         |
          core    orchestrator  Logging, errors, config / collaborator contract
             \         |
              models            Pure frozen dataclasses (zero I/O)
```

Attributes:
    models: Pure frozen dataclasses. Zero I/O, depends only on stdlib.
    core: Logging, exceptions, YAML loading, pydantic configuration.
    orchestrator: Orchestrator protocol, readiness polling, snapshot
        orchestrator.
    discovery: Service/client classification, endpoint synthesis, metadata
        parsing, and the service mapper.
    network: The network aggregate and its apache config server.
    logs: Log line filter configuration.

Note:
    For lightweight usage, import directly from subpackages::

        from ethnet.models import RawService
        from ethnet.discovery import ServiceMapper

    Top-level imports (``from ethnet import ServiceMapper``) use lazy loading
    and resolve on first access.
"""

import importlib
from importlib.metadata import version as _get_version


__version__ = _get_version("ethnet")

__all__ = [
    "ApacheConfigServer",
    "ClientCollection",
    "ClientType",
    "ConsensusClient",
    "DiscoveryConfig",
    "EthnetError",
    "ExecutionClient",
    "LogFilter",
    "Logger",
    "Network",
    "NetworkParams",
    "Orchestrator",
    "RawService",
    "Service",
    "ServiceMapper",
    "ServiceType",
    "SnapshotOrchestrator",
    "Validator",
]

_LAZY_IMPORTS: dict[str, tuple[str, str]] = {
    "DiscoveryConfig": ("ethnet.core", "DiscoveryConfig"),
    "EthnetError": ("ethnet.core", "EthnetError"),
    "Logger": ("ethnet.core", "Logger"),
    "NetworkParams": ("ethnet.core", "NetworkParams"),
    "ServiceMapper": ("ethnet.discovery", "ServiceMapper"),
    "LogFilter": ("ethnet.logs", "LogFilter"),
    "ClientCollection": ("ethnet.models", "ClientCollection"),
    "ClientType": ("ethnet.models", "ClientType"),
    "ConsensusClient": ("ethnet.models", "ConsensusClient"),
    "ExecutionClient": ("ethnet.models", "ExecutionClient"),
    "RawService": ("ethnet.models", "RawService"),
    "Service": ("ethnet.models", "Service"),
    "ServiceType": ("ethnet.models", "ServiceType"),
    "Validator": ("ethnet.models", "Validator"),
    "ApacheConfigServer": ("ethnet.network", "ApacheConfigServer"),
    "Network": ("ethnet.network", "Network"),
    "Orchestrator": ("ethnet.orchestrator", "Orchestrator"),
    "SnapshotOrchestrator": ("ethnet.orchestrator", "SnapshotOrchestrator"),
}


def __getattr__(name: str) -> object:
    if name in _LAZY_IMPORTS:
        module_path, attr_name = _LAZY_IMPORTS[name]
        module = importlib.import_module(module_path)
        value = getattr(module, attr_name)
        globals()[name] = value  # Cache for subsequent access
        return value
    raise AttributeError(f"module 'ethnet' has no attribute {name!r}")


def __dir__() -> list[str]:
    return __all__
