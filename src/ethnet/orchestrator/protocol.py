"""
Orchestrator collaborator contract.

The orchestrator creates and destroys enclaves and lists their services.
ethnet never talks to a container runtime itself: it depends only on the
call signatures of [Orchestrator][ethnet.orchestrator.protocol.Orchestrator]
and the data shapes defined here and in [ethnet.models.service][].

Implementations hold their own session state (engine connection, cached
enclave handles) and are passed explicitly to
[ServiceMapper][ethnet.discovery.mapper.ServiceMapper]; there is no
package-level singleton.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field

from ethnet.models.service import RawService


class RunPackageConfig(BaseModel):
    """Parameters for running an Ethereum package inside an enclave."""

    package_id: str = Field(min_length=1, description="Package locator")
    enclave_name: str = Field(min_length=1, description="Target enclave")
    config_yaml: str = Field(default="", description="Serialized package arguments")
    dry_run: bool = Field(default=False)
    parallelism: int = Field(default=4, ge=1, description="Parallel instruction limit")
    verbose: bool = Field(default=False)
    image_download: bool = Field(default=False, description="Always pull images")
    non_blocking: bool = Field(default=False, description="Return before completion")


@dataclass(frozen=True, slots=True)
class RunPackageResult:
    """Outcome of [Orchestrator.run_package()][ethnet.orchestrator.protocol.Orchestrator.run_package].

    Package-level failures are reported in the result rather than raised, so
    that a caller can still inspect the output lines.
    """

    enclave_name: str
    response_lines: tuple[str, ...] = ()
    interpretation_error: str = ""
    validation_errors: tuple[str, ...] = field(default=())
    execution_error: str = ""

    @property
    def succeeded(self) -> bool:
        return not (self.interpretation_error or self.validation_errors or self.execution_error)


@runtime_checkable
class Orchestrator(Protocol):
    """Async interface to the component that manages enclaves.

    Errors are raised as
    [OrchestratorError][ethnet.core.exceptions.OrchestratorError] subclasses
    or whatever the implementation's transport raises; ethnet never retries
    them.
    """

    async def run_package(self, config: RunPackageConfig) -> RunPackageResult:
        """Run a package in ``config.enclave_name``, creating it if needed."""
        ...

    async def get_services(self, enclave_name: str) -> Mapping[str, RawService]:
        """Return every service of the enclave keyed by service name."""
        ...

    async def stop_enclave(self, enclave_name: str) -> None:
        """Stop the enclave's services without destroying it."""
        ...

    async def destroy_enclave(self, enclave_name: str) -> None:
        """Destroy the enclave and everything in it."""
        ...

    async def wait_for_services(
        self,
        enclave_name: str,
        service_names: Sequence[str],
        timeout: float,  # noqa: ASYNC109
    ) -> None:
        """Block until all named services are running or *timeout* expires."""
        ...
