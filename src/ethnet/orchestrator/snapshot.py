"""
In-memory orchestrator over a fixed service listing.

[SnapshotOrchestrator][ethnet.orchestrator.snapshot.SnapshotOrchestrator]
answers ``get_services`` from services captured earlier (for instance a
YAML dump of a running enclave) and records lifecycle calls instead of
touching any container runtime. It backs the ``inspect`` CLI command and
is the reference orchestrator used by the test-suite.

Snapshot file format:

```yaml
enclave: devnet
services:
  - name: el-1-geth-lighthouse
    uuid: 3f2a9c
    status: RUNNING
    ip_address: 172.16.0.10
    ports:
      rpc: {number: 8545, protocol: TCP, url: "http://127.0.0.1:32769"}
      engine-rpc: 8551
```
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from types import MappingProxyType

from ethnet.core.exceptions import ConfigurationError, EnclaveNotFoundError
from ethnet.core.logger import Logger
from ethnet.core.yaml import load_yaml
from ethnet.models.service import RawService

from .protocol import RunPackageConfig, RunPackageResult
from .wait import DEFAULT_POLL_INTERVAL
from .wait import wait_for_services as _poll_until_ready


class SnapshotOrchestrator:
    """Orchestrator whose enclaves are fixed service listings.

    Attributes:
        destroyed: Names of enclaves destroyed so far, in call order.
        stopped: Names of enclaves stopped so far, in call order.
        destroy_calls: Total ``destroy_enclave`` invocations, including
            ones that failed.

    Examples:
        ```python
        orchestrator = SnapshotOrchestrator({"devnet": [RawService(name="el-1-geth")]})
        services = await orchestrator.get_services("devnet")
        await orchestrator.destroy_enclave("devnet")
        orchestrator.destroyed  # ['devnet']
        ```
    """

    def __init__(
        self,
        enclaves: Mapping[str, Iterable[RawService]] | None = None,
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self._enclaves: dict[str, dict[str, RawService]] = {
            name: {svc.name: svc for svc in services} for name, services in (enclaves or {}).items()
        }
        self._poll_interval = poll_interval
        self._logger = Logger("orchestrator.snapshot")
        self.destroyed: list[str] = []
        self.stopped: list[str] = []
        self.destroy_calls = 0

    @classmethod
    def from_yaml(cls, path: str | Path, enclave_name: str | None = None) -> SnapshotOrchestrator:
        """Load a single-enclave snapshot file.

        Args:
            path: Snapshot YAML file.
            enclave_name: Overrides the file's ``enclave`` key.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigurationError: If the file is malformed.
        """
        data = load_yaml(path)
        name = enclave_name or data.get("enclave")
        if not name:
            raise ConfigurationError(f"No enclave name in {path} and none given")
        entries = data.get("services") or []
        if not isinstance(entries, list):
            raise ConfigurationError(f"'services' in {path} must be a list")
        try:
            services = [RawService.from_dict(entry) for entry in entries]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise ConfigurationError(f"Invalid service entry in {path}: {e}") from e
        return cls({str(name): services})

    @property
    def enclave_names(self) -> list[str]:
        return sorted(self._enclaves)

    def _enclave(self, enclave_name: str) -> dict[str, RawService]:
        try:
            return self._enclaves[enclave_name]
        except KeyError:
            raise EnclaveNotFoundError(f"enclave not found: {enclave_name}") from None

    def set_service(self, enclave_name: str, service: RawService) -> None:
        """Insert or replace *service*, creating the enclave if needed."""
        self._enclaves.setdefault(enclave_name, {})[service.name] = service

    async def run_package(self, config: RunPackageConfig) -> RunPackageResult:
        self._enclaves.setdefault(config.enclave_name, {})
        self._logger.info(
            "package_run_recorded", enclave=config.enclave_name, package=config.package_id
        )
        return RunPackageResult(
            enclave_name=config.enclave_name,
            response_lines=("Package run completed successfully",),
        )

    async def get_services(self, enclave_name: str) -> Mapping[str, RawService]:
        return MappingProxyType(dict(self._enclave(enclave_name)))

    async def stop_enclave(self, enclave_name: str) -> None:
        self._enclave(enclave_name)
        self.stopped.append(enclave_name)

    async def destroy_enclave(self, enclave_name: str) -> None:
        self.destroy_calls += 1
        self._enclave(enclave_name)
        del self._enclaves[enclave_name]
        self.destroyed.append(enclave_name)
        self._logger.info("enclave_destroyed", enclave=enclave_name)

    async def wait_for_services(
        self,
        enclave_name: str,
        service_names: Sequence[str],
        timeout: float,  # noqa: ASYNC109
    ) -> None:
        await _poll_until_ready(
            self, enclave_name, service_names, timeout=timeout, interval=self._poll_interval
        )
