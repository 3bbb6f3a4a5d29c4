"""
Map the services of an enclave onto a typed [Network][ethnet.network.network.Network].

[ServiceMapper][ethnet.discovery.mapper.ServiceMapper] is the entry point of
discovery. It lists the enclave's services through the orchestrator it was
given, classifies each one, extracts endpoints and metadata, and assembles
the network aggregate with a cleanup callback bound to the enclave.

Discovery never partially fails: an unclassifiable or endpoint-less service
degrades to ``OTHER``/``UNKNOWN`` and empty URLs. Only a failure to list the
services aborts the mapping.

See Also:
    [classify_service_type()][ethnet.discovery.classifier.classify_service_type]:
        Service family detection.
    [EndpointExtractor][ethnet.discovery.endpoints.EndpointExtractor]: URL
        synthesis.
    [MetadataParser][ethnet.discovery.parser.MetadataParser]: Node index,
        validator ranges, p2p port.
"""

from __future__ import annotations

from collections.abc import Sequence

from ethnet.core.config import DiscoveryConfig
from ethnet.core.exceptions import ServiceListingError
from ethnet.core.logger import Logger
from ethnet.models.client import ClientCollection, ConsensusClient, ExecutionClient, Validator
from ethnet.models.constants import ClientType, ServiceType
from ethnet.models.metadata import ServiceMetadata
from ethnet.models.service import Port, RawService, Service
from ethnet.network.apache import ApacheConfigServer
from ethnet.network.network import LifecycleFn, Network, SignalCallback
from ethnet.orchestrator.protocol import Orchestrator

from .classifier import classify_client_type, classify_service_type
from .endpoints import DEFAULT_HOST, EndpointExtractor
from .parser import MetadataParser


# Placeholder used when no chain id was supplied. It is not derived from the
# network and is not a protocol default.
DEFAULT_CHAIN_ID = 12345

NETWORK_NAME_PREFIX = "ethereum-network-"
APACHE_DEFAULT_PORT = 80


def resolve_chain_id(config: DiscoveryConfig) -> int:
    """Return the caller-supplied chain id, or ``DEFAULT_CHAIN_ID``."""
    if config.network_params is not None:
        chain_id = config.network_params.explicit_chain_id()
        if chain_id:
            return chain_id
    return DEFAULT_CHAIN_ID


class ServiceMapper:
    """Build a [Network][ethnet.network.network.Network] from an enclave's services.

    The orchestrator is an explicit collaborator: there is no shared session
    state, so independent mappers (or concurrent ``map_to_network`` calls for
    different enclaves) do not interfere.

    Args:
        orchestrator: Source of the service listing and target of cleanup.
        handle_signals: Install SIGINT/SIGTERM cleanup handlers on networks
            that are not orphaned.
        on_signal: Application hook called after signal-triggered cleanup.
            See
            [Network.install_signal_handlers()][ethnet.network.network.Network.install_signal_handlers].

    Examples:
        ```python
        mapper = ServiceMapper(orchestrator)
        async with await mapper.map_to_network("devnet") as network:
            geth = network.execution_clients.by_type(ClientType.GETH)[0]
            print(geth.rpc_url)
        ```
    """

    def __init__(
        self,
        orchestrator: Orchestrator,
        *,
        handle_signals: bool = True,
        on_signal: SignalCallback | None = None,
    ) -> None:
        self._orchestrator = orchestrator
        self._handle_signals = handle_signals
        self._on_signal = on_signal
        self._extractor = EndpointExtractor()
        self._logger = Logger("discovery.mapper")

    async def map_to_network(
        self,
        enclave_name: str,
        config: DiscoveryConfig | None = None,
        *,
        wait_for: Sequence[str] = (),
    ) -> Network:
        """Discover the services of *enclave_name* and return the network.

        Args:
            enclave_name: Enclave to inspect.
            config: Discovery settings; defaults apply when omitted.
            wait_for: Services that must be running before the listing is
                taken. The wait is bounded by ``config.wait.timeout``; no
                wait happens when empty.

        Raises:
            ServicesTimeoutError: If the ``wait_for`` services are not
                running in time.
            ServiceListingError: If the orchestrator cannot list the services.
                The original exception is chained as ``__cause__``.
        """
        config = config or DiscoveryConfig()

        if wait_for:
            self._logger.info("waiting_for_services", enclave=enclave_name, count=len(wait_for))
            await self._orchestrator.wait_for_services(
                enclave_name, list(wait_for), config.wait.timeout
            )

        try:
            raw_services = await self._orchestrator.get_services(enclave_name)
        except Exception as e:
            raise ServiceListingError(f"failed to get services: {e}") from e
        self._logger.info("services_listed", enclave=enclave_name, count=len(raw_services))

        chain_id = resolve_chain_id(config)
        parser = MetadataParser(chain_id=chain_id)
        execution_clients: ClientCollection[ExecutionClient] = ClientCollection()
        consensus_clients: ClientCollection[ConsensusClient] = ClientCollection()
        validators: list[Validator] = []
        services: list[Service] = []
        apache_config: ApacheConfigServer | None = None

        for _, raw in sorted(raw_services.items()):
            service_type = classify_service_type(raw.name, raw.port_names)
            client_type = classify_client_type(raw.name, service_type)
            metadata = parser.parse(raw, service_type, client_type)
            self._logger.debug(
                "service_classified",
                service=raw.name,
                type=service_type,
                client=client_type,
            )

            if service_type is ServiceType.EXECUTION_CLIENT:
                execution_clients.add(self._execution_client(raw, client_type, metadata))
            elif service_type is ServiceType.CONSENSUS_CLIENT:
                consensus_clients.add(self._consensus_client(raw, client_type, metadata))
            elif service_type is ServiceType.VALIDATOR:
                validators.append(self._validator(raw, metadata))
            elif service_type is ServiceType.APACHE and apache_config is None:
                apache_config = self._apache_config(raw)

            services.append(
                Service(
                    name=raw.name,
                    type=service_type,
                    container_id=raw.uuid,
                    ports=self._convert_ports(raw),
                    status=raw.status,
                )
            )

        network = Network(
            name=f"{NETWORK_NAME_PREFIX}{enclave_name}",
            chain_id=chain_id,
            enclave_name=enclave_name,
            execution_clients=execution_clients,
            consensus_clients=consensus_clients,
            validators=validators,
            services=services,
            apache_config=apache_config,
            cleanup_fn=self._cleanup_fn(enclave_name),
            stop_fn=self._stop_fn(enclave_name),
            orphan_on_exit=config.orphan_on_exit,
        )
        if self._handle_signals and not config.orphan_on_exit:
            network.install_signal_handlers(self._on_signal)

        self._logger.info(
            "network_mapped",
            enclave=enclave_name,
            chain_id=chain_id,
            execution=len(execution_clients),
            consensus=len(consensus_clients),
            validators=len(validators),
            services=len(services),
        )
        return network

    # -- Record builders -----------------------------------------------------

    def _execution_client(
        self, raw: RawService, client_type: ClientType, metadata: ServiceMetadata
    ) -> ExecutionClient:
        endpoints = self._extractor.extract_execution_endpoints(raw)
        return ExecutionClient(
            name=raw.name,
            type=client_type,
            version=metadata.version,
            rpc_url=endpoints.rpc_url,
            ws_url=endpoints.ws_url,
            engine_url=endpoints.engine_url,
            metrics_url=endpoints.metrics_url,
            enode=metadata.enode,
            p2p_port=metadata.p2p_port,
            service_name=raw.name,
            container_id=raw.uuid,
        )

    def _consensus_client(
        self, raw: RawService, client_type: ClientType, metadata: ServiceMetadata
    ) -> ConsensusClient:
        endpoints = self._extractor.extract_consensus_endpoints(raw)
        return ConsensusClient(
            name=raw.name,
            type=client_type,
            version=metadata.version,
            beacon_api_url=endpoints.beacon_url,
            metrics_url=endpoints.metrics_url,
            enr=metadata.enr,
            peer_id=metadata.peer_id,
            p2p_port=metadata.p2p_port,
            service_name=raw.name,
            container_id=raw.uuid,
        )

    def _validator(self, raw: RawService, metadata: ServiceMetadata) -> Validator:
        endpoints = self._extractor.extract_validator_endpoints(raw)
        return Validator(
            name=raw.name,
            api_url=endpoints.api_url,
            metrics_url=endpoints.metrics_url,
            validator_count=metadata.validator_count,
            validator_start_index=metadata.validator_start_index,
            service_name=raw.name,
            container_id=raw.uuid,
        )

    def _apache_config(self, raw: RawService) -> ApacheConfigServer:
        for port_name, port in raw.sorted_ports():
            if "http" in port_name.lower():
                return ApacheConfigServer(self._extractor.build_url(raw, port, "http"))
        host = raw.ip_address or DEFAULT_HOST
        return ApacheConfigServer(f"http://{host}:{APACHE_DEFAULT_PORT}")

    @staticmethod
    def _convert_ports(raw: RawService) -> tuple[Port, ...]:
        return tuple(
            Port(
                name=port_name,
                internal_port=port.number,
                external_port=port.number,
                protocol=port.protocol,
                exposed_to_host=bool(port.url),
            )
            for port_name, port in raw.sorted_ports()
        )

    # -- Lifecycle callbacks -------------------------------------------------

    def _cleanup_fn(self, enclave_name: str) -> LifecycleFn:
        orchestrator = self._orchestrator

        async def cleanup() -> None:
            await orchestrator.destroy_enclave(enclave_name)

        return cleanup

    def _stop_fn(self, enclave_name: str) -> LifecycleFn:
        orchestrator = self._orchestrator

        async def stop() -> None:
            await orchestrator.stop_enclave(enclave_name)

        return stop
