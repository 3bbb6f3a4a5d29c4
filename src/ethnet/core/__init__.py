"""Core layer: logging, exceptions, YAML loading, and configuration.

Depends only on the standard library, pydantic, and PyYAML; depended upon by
the orchestrator, discovery, and network layers.

Attributes:
    Logger: Structured logger supporting key=value and JSON output modes.
        See [Logger][ethnet.core.logger.Logger].
    EthnetError: Root of the exception hierarchy.
        See [ethnet.core.exceptions][].
    DiscoveryConfig: Pydantic discovery configuration with YAML factory.
        See [DiscoveryConfig][ethnet.core.config.DiscoveryConfig].
    load_yaml: Safe YAML loading with ``yaml.safe_load()``.
"""

from .config import DiscoveryConfig, NetworkParams, WaitConfig
from .exceptions import (
    ConfigurationError,
    EmptyEndpointError,
    EnclaveNotFoundError,
    EndpointError,
    EthnetError,
    InvalidEndpointError,
    MetadataError,
    OrchestratorError,
    ServiceListingError,
    ServicesTimeoutError,
)
from .logger import Logger, StructuredFormatter, format_kv_pairs
from .yaml import load_yaml


__all__ = [
    "ConfigurationError",
    "DiscoveryConfig",
    "EmptyEndpointError",
    "EnclaveNotFoundError",
    "EndpointError",
    "EthnetError",
    "InvalidEndpointError",
    "Logger",
    "MetadataError",
    "NetworkParams",
    "OrchestratorError",
    "ServiceListingError",
    "ServicesTimeoutError",
    "StructuredFormatter",
    "WaitConfig",
    "format_kv_pairs",
    "load_yaml",
]
