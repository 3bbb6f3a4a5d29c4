"""
Unit tests for core.config module.

Tests:
- NetworkParams defaults, network_id coercion, chain id resolution
- WaitConfig timeout bounds
- DiscoveryConfig from_dict()/from_yaml() and error wrapping
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from ethnet.core.config import DiscoveryConfig, NetworkParams, WaitConfig
from ethnet.core.exceptions import ConfigurationError


class TestNetworkParams:
    def test_defaults(self) -> None:
        params = NetworkParams()
        assert params.network == "kurtosis"
        assert params.network_id == ""
        assert params.chain_id == 0
        assert params.seconds_per_slot is None

    def test_int_network_id_coerced(self) -> None:
        assert NetworkParams(network_id=3151908).network_id == "3151908"  # type: ignore[arg-type]

    def test_unknown_keys_ignored(self) -> None:
        params = NetworkParams.model_validate({"network_id": "1", "preset": "minimal"})
        assert params.network_id == "1"

    def test_negative_chain_id_rejected(self) -> None:
        with pytest.raises(ValidationError):
            NetworkParams(chain_id=-1)

    @pytest.mark.parametrize(
        ("kwargs", "expected"),
        [
            ({}, 0),
            ({"network_id": "3151908"}, 3151908),
            ({"network_id": " 42 "}, 42),
            ({"network_id": "not-a-number"}, 0),
            ({"network_id": "0"}, 0),
            ({"network_id": "-5"}, 0),
            ({"chain_id": 7, "network_id": "42"}, 7),
        ],
    )
    def test_explicit_chain_id(self, kwargs: dict, expected: int) -> None:
        assert NetworkParams(**kwargs).explicit_chain_id() == expected


class TestWaitConfig:
    def test_default_timeout(self) -> None:
        assert WaitConfig().timeout == 300.0

    @pytest.mark.parametrize("timeout", [0, -1.5])
    def test_timeout_must_be_positive(self, timeout: float) -> None:
        with pytest.raises(ValidationError):
            WaitConfig(timeout=timeout)


class TestDiscoveryConfig:
    def test_defaults(self) -> None:
        config = DiscoveryConfig()
        assert config.network_params is None
        assert config.orphan_on_exit is False
        assert config.wait == WaitConfig()

    def test_from_dict(self) -> None:
        config = DiscoveryConfig.from_dict(
            {"network_params": {"network_id": 3151908}, "wait": {"timeout": 10}}
        )
        assert config.network_params is not None
        assert config.network_params.explicit_chain_id() == 3151908
        assert config.wait.timeout == 10

    def test_from_dict_invalid_wrapped(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid discovery config") as exc_info:
            DiscoveryConfig.from_dict({"wait": {"timeout": -1}})
        assert isinstance(exc_info.value.__cause__, ValidationError)

    def test_from_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "discovery.yaml"
        path.write_text("orphan_on_exit: true\nnetwork_params:\n  chain_id: 99\n")
        config = DiscoveryConfig.from_yaml(path)
        assert config.orphan_on_exit is True
        assert config.network_params is not None
        assert config.network_params.chain_id == 99

    def test_from_yaml_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert DiscoveryConfig.from_yaml(path) == DiscoveryConfig()

    def test_from_yaml_missing(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            DiscoveryConfig.from_yaml(tmp_path / "missing.yaml")
