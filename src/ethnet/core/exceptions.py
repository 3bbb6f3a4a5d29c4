"""ethnet exception hierarchy.

Provides typed exceptions for every failure the package surfaces. Note what
is *not* here: an unclassifiable service or a missing port is never an
error. Those resolve to ``ServiceType.OTHER`` / ``ClientType.UNKNOWN`` and
empty endpoint strings so that discovery never partially fails.

Exception hierarchy:

```text
EthnetError (base -- never raised directly)
├── ConfigurationError        -- config validation, bad YAML
├── EndpointError             -- endpoint string problems
│   ├── InvalidEndpointError  -- unparseable URL, unknown scheme without port
│   └── EmptyEndpointError    -- empty string given for validation
├── MetadataError             -- metadata (de)serialization failures
└── OrchestratorError         -- failures reported by the orchestrator
    ├── ServiceListingError   -- listing the services of an enclave failed
    ├── EnclaveNotFoundError  -- no such enclave
    └── ServicesTimeoutError  -- services not ready before the deadline
```

``asyncio.CancelledError`` is never wrapped: cancellation of a wait or of a
mapping call propagates untouched.

See Also:
    [EndpointExtractor][ethnet.discovery.endpoints.EndpointExtractor]:
        Raises the [EndpointError][ethnet.core.exceptions.EndpointError]
        family.
    [ServiceMapper][ethnet.discovery.mapper.ServiceMapper]: Raises
        [ServiceListingError][ethnet.core.exceptions.ServiceListingError].
"""

from __future__ import annotations


class EthnetError(Exception):
    """Base exception for all ethnet errors.

    Never raised directly -- always use a specific subclass.
    """


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ConfigurationError(EthnetError):
    """Invalid or missing configuration (YAML, snapshot files, CLI flags)."""


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


class EndpointError(EthnetError):
    """Base for endpoint string errors."""


class InvalidEndpointError(EndpointError):
    """The endpoint string is malformed or its port cannot be determined.

    Raised by
    [parse_endpoint_url()][ethnet.discovery.endpoints.parse_endpoint_url]
    for unparseable URLs, missing scheme or host, invalid ports, and schemes
    with no known default port.
    """


class EmptyEndpointError(EndpointError):
    """An empty endpoint string was given for validation.

    Kept distinct from
    [InvalidEndpointError][ethnet.core.exceptions.InvalidEndpointError]: an
    empty endpoint means "not discovered", not "malformed".
    """


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------


class MetadataError(EthnetError):
    """Service metadata could not be serialized or deserialized."""


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------


class OrchestratorError(EthnetError):
    """Base for failures reported by the orchestrator collaborator."""


class ServiceListingError(OrchestratorError):
    """Listing the services of an enclave failed.

    Fatal to [map_to_network()][ethnet.discovery.mapper.ServiceMapper.map_to_network]:
    the original error is chained as ``__cause__`` and never retried.
    """


class EnclaveNotFoundError(OrchestratorError):
    """The requested enclave does not exist."""


class ServicesTimeoutError(OrchestratorError):
    """Services did not all report ready before the timeout expired."""
