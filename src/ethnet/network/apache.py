"""Apache config server of an enclave: genesis and network config files."""

from __future__ import annotations

from dataclasses import dataclass

from ethnet.models._validation import validate_str


NETWORK_CONFIGS_PATH = "network-configs"


@dataclass(frozen=True, slots=True)
class ApacheConfigServer:
    """HTTP server distributing the generated network configuration.

    Attributes:
        url: Base URL, e.g. ``"http://172.16.0.5:80"``.

    Examples:
        ```python
        server = ApacheConfigServer("http://172.16.0.5:80")
        server.genesis_ssz_url  # 'http://172.16.0.5:80/network-configs/genesis.ssz'
        ```
    """

    url: str

    def __post_init__(self) -> None:
        validate_str(self.url, "url")

    def _file_url(self, filename: str) -> str:
        return f"{self.url.rstrip('/')}/{NETWORK_CONFIGS_PATH}/{filename}"

    @property
    def genesis_ssz_url(self) -> str:
        return self._file_url("genesis.ssz")

    @property
    def config_yaml_url(self) -> str:
        return self._file_url("config.yaml")

    @property
    def bootnodes_yaml_url(self) -> str:
        return self._file_url("boot_enr.yaml")

    @property
    def deposit_contract_block_url(self) -> str:
        return self._file_url("deposit_contract_block.txt")
