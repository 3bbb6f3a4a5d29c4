"""
Unit tests for models.client and models.endpoints modules.

Tests:
- Client record defaults and immutability
- ClientCollection bucketing, ordering, counting, and iteration
- Endpoint value object defaults
"""

from dataclasses import FrozenInstanceError

import pytest

from ethnet.models.client import ClientCollection, ConsensusClient, ExecutionClient, Validator
from ethnet.models.constants import ClientType
from ethnet.models.endpoints import ConsensusEndpoints, ExecutionEndpoints, ValidatorEndpoints


def _el(name: str, client_type: ClientType) -> ExecutionClient:
    return ExecutionClient(name=name, type=client_type)


class TestClientRecords:
    def test_execution_defaults(self) -> None:
        client = _el("el-1-geth", ClientType.GETH)
        assert client.rpc_url == ""
        assert client.p2p_port == 0

    def test_consensus_defaults(self) -> None:
        client = ConsensusClient(name="cl-1-teku", type=ClientType.TEKU)
        assert client.enr == ""
        assert client.peer_id == ""

    def test_validator_defaults(self) -> None:
        validator = Validator(name="vc-1")
        assert validator.validator_count == 0

    def test_frozen(self) -> None:
        client = _el("el-1-geth", ClientType.GETH)
        with pytest.raises(FrozenInstanceError):
            client.rpc_url = "http://x"  # type: ignore[misc]


class TestClientCollection:
    def test_empty(self) -> None:
        clients: ClientCollection[ExecutionClient] = ClientCollection()
        assert clients.all() == []
        assert clients.count() == 0
        assert len(clients) == 0
        assert clients.by_type(ClientType.GETH) == []
        assert clients.types() == []

    def test_by_type(self) -> None:
        clients: ClientCollection[ExecutionClient] = ClientCollection()
        geth1 = _el("el-1-geth", ClientType.GETH)
        besu = _el("el-2-besu", ClientType.BESU)
        geth3 = _el("el-3-geth", ClientType.GETH)
        for client in (geth1, besu, geth3):
            clients.add(client)

        assert clients.by_type(ClientType.GETH) == [geth1, geth3]
        assert clients.by_type(ClientType.BESU) == [besu]
        assert clients.count_by_type(ClientType.GETH) == 2
        assert clients.count_by_type(ClientType.RETH) == 0

    def test_all_preserves_bucket_order(self) -> None:
        clients: ClientCollection[ExecutionClient] = ClientCollection()
        geth1 = _el("el-1-geth", ClientType.GETH)
        besu = _el("el-2-besu", ClientType.BESU)
        geth3 = _el("el-3-geth", ClientType.GETH)
        for client in (geth1, besu, geth3):
            clients.add(client)
        assert clients.all() == [geth1, geth3, besu]
        assert list(clients) == clients.all()
        assert clients.types() == [ClientType.GETH, ClientType.BESU]

    def test_unknown_clients_are_kept(self) -> None:
        clients: ClientCollection[ExecutionClient] = ClientCollection()
        mystery = _el("el-1-mystery", ClientType.UNKNOWN)
        clients.add(mystery)
        assert clients.all() == [mystery]
        assert clients.by_type(ClientType.UNKNOWN) == [mystery]
        assert clients.by_type(ClientType.GETH) == []

    def test_by_type_returns_copy(self) -> None:
        clients: ClientCollection[ExecutionClient] = ClientCollection()
        clients.add(_el("el-1-geth", ClientType.GETH))
        clients.by_type(ClientType.GETH).clear()
        assert clients.count_by_type(ClientType.GETH) == 1

    def test_repr(self) -> None:
        clients: ClientCollection[ExecutionClient] = ClientCollection()
        clients.add(_el("el-1-geth", ClientType.GETH))
        assert repr(clients) == "ClientCollection(geth=1)"


class TestEndpoints:
    def test_all_empty_by_default(self) -> None:
        assert ExecutionEndpoints() == ExecutionEndpoints("", "", "", "", "")
        assert ConsensusEndpoints().beacon_url == ""
        assert ValidatorEndpoints().api_url == ""
