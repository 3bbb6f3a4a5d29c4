"""
Service and client type classification from orchestrator naming conventions.

Both classifiers are pure, total functions: they never raise, and an
unrecognized name resolves to ``ServiceType.OTHER`` or
``ClientType.UNKNOWN``.

Service names produced by the Ethereum package follow the convention
``el-<index>-<el client>-<cl client>`` for execution nodes,
``cl-<index>-<cl client>-<el client>`` for beacon nodes and
``vc-<index>-...`` / ``validator-...`` for validator clients. Because a
composite name such as ``el-1-geth-lighthouse`` carries keywords of both
families, the ``el-``/``cl-`` prefix decides the family and the client
keyword search is restricted to that family.

See Also:
    [ServiceMapper][ethnet.discovery.mapper.ServiceMapper]: Calls both
        classifiers for every listed service.
"""

from __future__ import annotations

from collections.abc import Iterable

from ethnet.models.constants import (
    CONSENSUS_CLIENT_TYPES,
    EXECUTION_CLIENT_TYPES,
    ClientType,
    ServiceType,
)


EXECUTION_PREFIX = "el-"
CONSENSUS_PREFIX = "cl-"
VALIDATOR_CLIENT_PREFIX = "vc-"

# Checked in order, before any client detection.
_AUXILIARY_KEYWORDS: tuple[tuple[str, ServiceType], ...] = (
    ("prometheus", ServiceType.PROMETHEUS),
    ("grafana", ServiceType.GRAFANA),
    ("blockscout", ServiceType.BLOCKSCOUT),
    ("dora", ServiceType.DORA),
    ("apache", ServiceType.APACHE),
    ("config", ServiceType.APACHE),
    ("spamoor", ServiceType.SPAMOOR),
)


def _has_keyword(name: str, family: tuple[ClientType, ...]) -> bool:
    return any(client_type.value in name for client_type in family)


def classify_service_type(name: str, ports: Iterable[str] | None = None) -> ServiceType:
    """Classify a service by name, falling back to its port names.

    Rules, first match wins:

    1. Auxiliary names (case-insensitive substring). ``validator`` only
       counts when the name has no ``el-``/``cl-`` prefix; a ``vc-`` prefix
       always means a validator client.
    2. ``cl-`` prefix with a consensus keyword, ``el-`` prefix with an
       execution keyword. A prefixed name without a keyword of its own
       family stops here and goes on to the port rule.
    3. Unprefixed names: consensus keywords first, then execution keywords.
    4. Port names: any ``rpc``/``engine`` port means execution, otherwise
       any ``beacon``/``http`` port means consensus. For a prefixed name
       the ports may only confirm the prefix family; anything else is
       ``OTHER``.
    5. ``ServiceType.OTHER``.

    Args:
        name: Service name.
        ports: Port names of the service, when available.

    Returns:
        The resolved [ServiceType][ethnet.models.constants.ServiceType].

    Examples:
        ```python
        classify_service_type("el-1-geth-lighthouse")   # ServiceType.EXECUTION_CLIENT
        classify_service_type("cl-1-lighthouse-geth")   # ServiceType.CONSENSUS_CLIENT
        classify_service_type("prometheus")             # ServiceType.PROMETHEUS
        classify_service_type("")                       # ServiceType.OTHER
        ```
    """
    lowered = name.lower()
    is_execution_prefixed = lowered.startswith(EXECUTION_PREFIX)
    is_consensus_prefixed = lowered.startswith(CONSENSUS_PREFIX)
    prefixed = is_execution_prefixed or is_consensus_prefixed

    if lowered.startswith(VALIDATOR_CLIENT_PREFIX) or ("validator" in lowered and not prefixed):
        return ServiceType.VALIDATOR
    for keyword, service_type in _AUXILIARY_KEYWORDS:
        if keyword in lowered:
            return service_type

    if is_consensus_prefixed:
        if _has_keyword(lowered, CONSENSUS_CLIENT_TYPES):
            return ServiceType.CONSENSUS_CLIENT
    elif is_execution_prefixed:
        if _has_keyword(lowered, EXECUTION_CLIENT_TYPES):
            return ServiceType.EXECUTION_CLIENT
    elif _has_keyword(lowered, CONSENSUS_CLIENT_TYPES):
        return ServiceType.CONSENSUS_CLIENT
    elif _has_keyword(lowered, EXECUTION_CLIENT_TYPES):
        return ServiceType.EXECUTION_CLIENT

    port_names = [p.lower() for p in ports or ()]
    execution_ports = any("rpc" in p or "engine" in p for p in port_names)
    consensus_ports = any("beacon" in p or "http" in p for p in port_names)

    # A prefix fixes the family; ports can only confirm it.
    if is_execution_prefixed:
        return ServiceType.EXECUTION_CLIENT if execution_ports else ServiceType.OTHER
    if is_consensus_prefixed:
        return ServiceType.CONSENSUS_CLIENT if consensus_ports else ServiceType.OTHER
    if execution_ports:
        return ServiceType.EXECUTION_CLIENT
    if consensus_ports:
        return ServiceType.CONSENSUS_CLIENT

    return ServiceType.OTHER


def classify_client_type(name: str, family: ServiceType) -> ClientType:
    """Detect the client implementation within an already-resolved family.

    Only the keyword table of *family* is searched, so
    ``classify_client_type("el-1-geth-lighthouse", ServiceType.EXECUTION_CLIENT)``
    is ``GETH`` and never ``LIGHTHOUSE``.

    Returns:
        The first matching [ClientType][ethnet.models.constants.ClientType]
        in table order, or ``UNKNOWN`` on a miss or a non-client family.
    """
    if family is ServiceType.EXECUTION_CLIENT:
        table = EXECUTION_CLIENT_TYPES
    elif family is ServiceType.CONSENSUS_CLIENT:
        table = CONSENSUS_CLIENT_TYPES
    else:
        return ClientType.UNKNOWN

    lowered = name.lower()
    for client_type in table:
        if client_type.value in lowered:
            return client_type
    return ClientType.UNKNOWN
