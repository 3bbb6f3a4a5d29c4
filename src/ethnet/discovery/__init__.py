"""Discovery layer: classification, endpoint synthesis, metadata, and mapping.

Attributes:
    classify_service_type: Service family from name and port names.
    classify_client_type: Client implementation within a resolved family.
    EndpointExtractor: Role-specific endpoint URLs from service ports.
    parse_endpoint_url: Split an endpoint URL into host and port.
    validate_endpoint: Reject empty or malformed endpoint strings.
    MetadataParser: Best-effort [ServiceMetadata][ethnet.models.metadata.ServiceMetadata].
    ServiceMapper: Enclave services to [Network][ethnet.network.network.Network].
"""

from .classifier import classify_client_type, classify_service_type
from .endpoints import EndpointExtractor, parse_endpoint_url, validate_endpoint
from .mapper import DEFAULT_CHAIN_ID, ServiceMapper, resolve_chain_id
from .parser import (
    MetadataParser,
    deserialize_metadata,
    parse_node_info,
    parse_validator_info,
    serialize_metadata,
)


__all__ = [
    "DEFAULT_CHAIN_ID",
    "EndpointExtractor",
    "MetadataParser",
    "ServiceMapper",
    "classify_client_type",
    "classify_service_type",
    "deserialize_metadata",
    "parse_endpoint_url",
    "parse_node_info",
    "parse_validator_info",
    "resolve_chain_id",
    "serialize_metadata",
    "validate_endpoint",
]
