"""Role-specific endpoint value objects.

Every field is a URL string; an empty string means the endpoint was not
discovered. Empty is a valid terminal state, never an error: callers must
treat it as "unavailable" and never dereference it as a URL.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ExecutionEndpoints:
    """Endpoints of an execution client."""

    rpc_url: str = ""
    ws_url: str = ""
    engine_url: str = ""
    p2p_url: str = ""
    metrics_url: str = ""


@dataclass(frozen=True, slots=True)
class ConsensusEndpoints:
    """Endpoints of a consensus (beacon) client."""

    beacon_url: str = ""
    p2p_url: str = ""
    metrics_url: str = ""


@dataclass(frozen=True, slots=True)
class ValidatorEndpoints:
    """Endpoints of a validator client."""

    api_url: str = ""
    metrics_url: str = ""
