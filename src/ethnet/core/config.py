"""Discovery configuration models.

Pydantic models describing how a network is discovered and how long to wait
for services the caller asks to be ready. Typically loaded from YAML:

```yaml
network_params:
  network_id: "3151908"
orphan_on_exit: false
wait:
  timeout: 600
```

See Also:
    [ServiceMapper][ethnet.discovery.mapper.ServiceMapper]: Consumes
        [DiscoveryConfig][ethnet.core.config.DiscoveryConfig] during mapping.
    [load_yaml()][ethnet.core.yaml.load_yaml]: Safe YAML loading.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ConfigurationError
from .yaml import load_yaml


class NetworkParams(BaseModel):
    """Network parameters the package was started with.

    Only the fields that influence discovery are modelled; unknown keys from
    a full package config are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    network: str = Field(default="kurtosis", description="Network name")
    network_id: str = Field(
        default="",
        description="Numeric network id as a string (ethereum-package convention)",
    )
    chain_id: int = Field(default=0, ge=0, description="Explicit chain id (0 = unset)")
    seconds_per_slot: int | None = Field(default=None, ge=1, description="Slot duration")

    @field_validator("network_id", mode="before")
    @classmethod
    def _coerce_network_id(cls, v: Any) -> Any:
        # YAML reads unquoted ids as int
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    def explicit_chain_id(self) -> int:
        """Return the chain id the caller supplied, or 0 when none is usable.

        ``chain_id`` wins when non-zero; otherwise ``network_id`` is parsed as
        a base-10 integer. Non-numeric or zero values count as unset.
        """
        if self.chain_id:
            return self.chain_id
        try:
            parsed = int(self.network_id.strip(), 10)
        except ValueError:
            return 0
        return max(parsed, 0)


class WaitConfig(BaseModel):
    """Readiness wait applied before listing services.

    The polling interval belongs to the orchestrator (see
    [SnapshotOrchestrator][ethnet.orchestrator.snapshot.SnapshotOrchestrator]).
    """

    timeout: float = Field(default=300.0, gt=0, description="Seconds before giving up")


class DiscoveryConfig(BaseModel):
    """Top-level discovery configuration.

    Attributes:
        network_params: Chain/network parameters used for chain id resolution.
        orphan_on_exit: When True the discovered network is left running:
            no signal handlers, no finalizer cleanup.
        wait: Timeout for the services passed as ``wait_for`` to
            [map_to_network()][ethnet.discovery.mapper.ServiceMapper.map_to_network].
    """

    network_params: NetworkParams | None = Field(default=None)
    orphan_on_exit: bool = Field(default=False)
    wait: WaitConfig = Field(default_factory=WaitConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DiscoveryConfig:
        """Validate *data* into a config.

        Raises:
            ConfigurationError: If validation fails.
        """
        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid discovery config: {e}") from e

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> DiscoveryConfig:
        """Load and validate a YAML config file.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigurationError: If the YAML or its content is invalid.
        """
        return cls.from_dict(load_yaml(config_path))
