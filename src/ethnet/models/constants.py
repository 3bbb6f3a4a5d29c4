"""Shared constants for the models layer.

Defines the two classification enumerations used across the models,
discovery, and network layers, plus the keyword tables that drive them.
Placing them here avoids circular dependencies between the models and
discovery layers.

See Also:
    [ethnet.discovery.classifier][]: Resolves
        [ServiceType][ethnet.models.constants.ServiceType] and
        [ClientType][ethnet.models.constants.ClientType] from service names.
    [ethnet.models.client][]: Client records keyed by
        [ClientType][ethnet.models.constants.ClientType].
"""

from __future__ import annotations

from enum import StrEnum


class ServiceType(StrEnum):
    """Coarse category of a service running inside an enclave.

    Every discovered service is classified into exactly one member during
    mapping. The string values double as the ``type`` field of the flat
    service list and of serialized metadata.

    Attributes:
        EXECUTION_CLIENT: Execution layer node (Geth, Besu, ...).
        CONSENSUS_CLIENT: Consensus layer beacon node (Lighthouse, Teku, ...).
        VALIDATOR: Validator client or validator key tooling.
        PROMETHEUS: Metrics collector.
        GRAFANA: Dashboards.
        BLOCKSCOUT: Block explorer.
        DORA: Beacon chain explorer.
        APACHE: HTTP server distributing genesis and network config files.
        SPAMOOR: Transaction spammer.
        OTHER: Anything that could not be classified.
    """

    EXECUTION_CLIENT = "execution"
    CONSENSUS_CLIENT = "consensus"
    VALIDATOR = "validator"
    PROMETHEUS = "prometheus"
    GRAFANA = "grafana"
    BLOCKSCOUT = "blockscout"
    DORA = "dora"
    APACHE = "apache"
    SPAMOOR = "spamoor"
    OTHER = "other"

    @property
    def is_client(self) -> bool:
        """Whether this type is one of the two Ethereum client families."""
        return self in (ServiceType.EXECUTION_CLIENT, ServiceType.CONSENSUS_CLIENT)


class ClientType(StrEnum):
    """Concrete client implementation within the execution or consensus family.

    A client type belongs to at most one family: the execution and consensus
    sets are disjoint, and ``UNKNOWN`` belongs to neither.

    Examples:
        ```python
        ClientType.GETH.is_execution        # True
        ClientType.LIGHTHOUSE.is_consensus  # True
        ClientType.UNKNOWN.is_execution     # False
        ```
    """

    GETH = "geth"
    BESU = "besu"
    NETHERMIND = "nethermind"
    ERIGON = "erigon"
    RETH = "reth"

    LIGHTHOUSE = "lighthouse"
    TEKU = "teku"
    PRYSM = "prysm"
    NIMBUS = "nimbus"
    LODESTAR = "lodestar"
    GRANDINE = "grandine"

    UNKNOWN = "unknown"

    @property
    def is_execution(self) -> bool:
        """Whether this is an execution layer client."""
        return self in EXECUTION_CLIENT_TYPES

    @property
    def is_consensus(self) -> bool:
        """Whether this is a consensus layer client."""
        return self in CONSENSUS_CLIENT_TYPES


# Keyword tables are ordered: the first matching keyword wins.
EXECUTION_CLIENT_TYPES: tuple[ClientType, ...] = (
    ClientType.GETH,
    ClientType.BESU,
    ClientType.NETHERMIND,
    ClientType.ERIGON,
    ClientType.RETH,
)

CONSENSUS_CLIENT_TYPES: tuple[ClientType, ...] = (
    ClientType.LIGHTHOUSE,
    ClientType.TEKU,
    ClientType.PRYSM,
    ClientType.NIMBUS,
    ClientType.LODESTAR,
    ClientType.GRANDINE,
)

SERVICE_STATUS_RUNNING = "RUNNING"

PORT_NUMBER_MAX = 65_535
