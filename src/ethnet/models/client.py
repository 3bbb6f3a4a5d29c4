"""
Typed client records and per-client-type collections.

[ExecutionClient][ethnet.models.client.ExecutionClient],
[ConsensusClient][ethnet.models.client.ConsensusClient], and
[Validator][ethnet.models.client.Validator] are the typed views a test
harness uses to address a specific node. They are assembled by
[ServiceMapper][ethnet.discovery.mapper.ServiceMapper] and grouped into a
[ClientCollection][ethnet.models.client.ClientCollection] keyed by
[ClientType][ethnet.models.constants.ClientType].
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar

from .constants import ClientType


@dataclass(frozen=True, slots=True)
class ExecutionClient:
    """An execution layer node discovered in the enclave.

    Endpoint fields are empty strings when the corresponding port was not
    discovered.
    """

    name: str
    type: ClientType
    version: str = ""
    rpc_url: str = ""
    ws_url: str = ""
    engine_url: str = ""
    metrics_url: str = ""
    enode: str = ""
    p2p_port: int = 0
    service_name: str = ""
    container_id: str = ""


@dataclass(frozen=True, slots=True)
class ConsensusClient:
    """A consensus layer beacon node discovered in the enclave."""

    name: str
    type: ClientType
    version: str = ""
    beacon_api_url: str = ""
    metrics_url: str = ""
    enr: str = ""
    peer_id: str = ""
    p2p_port: int = 0
    service_name: str = ""
    container_id: str = ""


@dataclass(frozen=True, slots=True)
class Validator:
    """A validator client, with the key range it manages when known."""

    name: str
    api_url: str = ""
    metrics_url: str = ""
    validator_count: int = 0
    validator_start_index: int = 0
    service_name: str = ""
    container_id: str = ""


class _TypedClient(Protocol):
    @property
    def type(self) -> ClientType: ...


ClientT = TypeVar("ClientT", bound=_TypedClient)


class ClientCollection(Generic[ClientT]):
    """Clients bucketed by [ClientType][ethnet.models.constants.ClientType].

    Records whose type is ``UNKNOWN`` are still stored: they show up in
    [all()][ethnet.models.client.ClientCollection.all] but can only be
    addressed by type through ``by_type(ClientType.UNKNOWN)``.

    Insertion order is preserved both within a bucket and across buckets.

    Examples:
        ```python
        clients: ClientCollection[ExecutionClient] = ClientCollection()
        clients.add(ExecutionClient(name="el-1-geth", type=ClientType.GETH))
        clients.by_type(ClientType.GETH)   # [ExecutionClient(...)]
        clients.count_by_type(ClientType.BESU)  # 0
        ```
    """

    def __init__(self) -> None:
        self._clients: dict[ClientType, list[ClientT]] = {}

    def add(self, client: ClientT) -> None:
        """Insert *client* into the bucket for its own type."""
        self._clients.setdefault(client.type, []).append(client)

    def all(self) -> list[ClientT]:
        """Return every client in the collection."""
        return [client for bucket in self._clients.values() for client in bucket]

    def by_type(self, client_type: ClientType) -> list[ClientT]:
        """Return clients of *client_type* (empty list when none)."""
        return list(self._clients.get(client_type, ()))

    def count(self) -> int:
        return sum(len(bucket) for bucket in self._clients.values())

    def count_by_type(self, client_type: ClientType) -> int:
        return len(self._clients.get(client_type, ()))

    def types(self) -> list[ClientType]:
        """Return the client types present, in first-insertion order."""
        return list(self._clients)

    def __len__(self) -> int:
        return self.count()

    def __iter__(self) -> Iterator[ClientT]:
        return iter(self.all())

    def __repr__(self) -> str:
        counts = ", ".join(f"{t}={len(b)}" for t, b in self._clients.items())
        return f"{type(self).__name__}({counts})"
