"""
Best-effort metadata extraction from raw services.

[MetadataParser][ethnet.discovery.parser.MetadataParser] derives a
[ServiceMetadata][ethnet.models.metadata.ServiceMetadata] from a service's
name and ports. Malformed names never raise: unmatched patterns degrade to
zero values.

The JSON helpers [serialize_metadata()][ethnet.discovery.parser.serialize_metadata]
and [deserialize_metadata()][ethnet.discovery.parser.deserialize_metadata]
form a lossless round trip.
"""

from __future__ import annotations

import json
import re

from ethnet.core.exceptions import MetadataError
from ethnet.models.constants import ClientType, ServiceType
from ethnet.models.metadata import PortMetadata, ServiceMetadata
from ethnet.models.service import RawService

from .classifier import classify_client_type, classify_service_type


NODE_NAME_PATTERN = re.compile(r"^(el|cl)-(\d+)-(.+)$")
VALIDATOR_RANGE_PATTERN = re.compile(r"validator-(\d+)-(\d+)")

UNKNOWN_VERSION = "unknown"


def parse_node_info(name: str) -> tuple[int, str]:
    """Return ``(index, node_name)`` for ``el-N-rest`` / ``cl-N-rest`` names.

    Names that do not match yield ``(0, name)``.

    Examples:
        ```python
        parse_node_info("el-10-besu")       # (10, 'besu')
        parse_node_info("prometheus")       # (0, 'prometheus')
        ```
    """
    match = NODE_NAME_PATTERN.match(name)
    if match is None:
        return 0, name
    return int(match.group(2)), match.group(3)


def parse_validator_info(name: str) -> tuple[int, int]:
    """Return ``(validator_count, start_index)`` from a ``validator-C-S`` name.

    Names that do not match yield ``(0, 0)``.
    """
    match = VALIDATOR_RANGE_PATTERN.search(name)
    if match is None:
        return 0, 0
    return int(match.group(1)), int(match.group(2))


def serialize_metadata(metadata: ServiceMetadata) -> str:
    """Encode *metadata* as a JSON string."""
    return json.dumps(metadata.to_dict(), sort_keys=True)


def deserialize_metadata(data: str | bytes) -> ServiceMetadata:
    """Decode a JSON string produced by [serialize_metadata()][ethnet.discovery.parser.serialize_metadata].

    Raises:
        MetadataError: If *data* is not valid JSON or does not describe a
            valid [ServiceMetadata][ethnet.models.metadata.ServiceMetadata].
    """
    try:
        payload = json.loads(data)
    except ValueError as e:
        raise MetadataError(f"failed to decode metadata: {e}") from e
    if not isinstance(payload, dict):
        raise MetadataError(f"metadata must be a JSON object, got {type(payload).__name__}")
    try:
        return ServiceMetadata.from_dict(payload)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise MetadataError(f"invalid metadata: {e!r}") from e


class MetadataParser:
    """Derive [ServiceMetadata][ethnet.models.metadata.ServiceMetadata] from a raw service.

    Identity fields that can only come from the client APIs are left as
    placeholders: ``version`` is ``"unknown"`` and ``enode``, ``enr`` and
    ``peer_id`` are empty.

    Args:
        chain_id: Chain id recorded on every parsed record (0 when unknown).
    """

    def __init__(self, chain_id: int = 0) -> None:
        self._chain_id = chain_id

    def parse(
        self,
        service: RawService,
        service_type: ServiceType | None = None,
        client_type: ClientType | None = None,
    ) -> ServiceMetadata:
        """Build the metadata record for *service*.

        Args:
            service: Raw service from the orchestrator.
            service_type: Already-resolved type; classified from the name and
                ports when omitted.
            client_type: Already-resolved client; classified within the
                service family when omitted.
        """
        if service_type is None:
            service_type = classify_service_type(service.name, service.port_names)
        if client_type is None:
            client_type = classify_client_type(service.name, service_type)

        node_index, node_name = parse_node_info(service.name)
        if service_type is ServiceType.VALIDATOR:
            validator_count, validator_start = parse_validator_info(service.name)
        else:
            validator_count, validator_start = 0, 0

        return ServiceMetadata(
            name=service.name,
            service_type=service_type,
            client_type=client_type,
            status=service.status,
            container_id=service.uuid,
            ip_address=service.ip_address,
            ports={
                port_name: PortMetadata(
                    name=port_name,
                    number=port.number,
                    protocol=port.protocol,
                    url=port.url,
                    exposed_to_host=bool(port.url),
                )
                for port_name, port in service.sorted_ports()
            },
            node_index=node_index,
            node_name=node_name,
            chain_id=self._chain_id,
            validator_count=validator_count,
            validator_start_index=validator_start,
            version=UNKNOWN_VERSION,
            p2p_port=self._p2p_port(service),
        )

    @staticmethod
    def _p2p_port(service: RawService) -> int:
        candidates = [
            port
            for port_name, port in service.sorted_ports()
            if "p2p" in port_name.lower() or "discovery" in port_name.lower()
        ]
        for port in candidates:
            if port.is_tcp:
                return port.number
        return candidates[0].number if candidates else 0

    parse_node_info = staticmethod(parse_node_info)
    parse_validator_info = staticmethod(parse_validator_info)
    serialize = staticmethod(serialize_metadata)
    deserialize = staticmethod(deserialize_metadata)
