"""YAML loading for discovery configs and enclave snapshot files.

Shared by [DiscoveryConfig.from_yaml()][ethnet.core.config.DiscoveryConfig.from_yaml]
and [SnapshotOrchestrator.from_yaml()][ethnet.orchestrator.snapshot.SnapshotOrchestrator.from_yaml].
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigurationError


def load_yaml(config_path: str | Path) -> dict[str, Any]:
    """Read *config_path* and return its top-level mapping.

    An empty document yields ``{}``. Schema validation is left to the caller.

    Raises:
        FileNotFoundError: The path does not exist.
        ConfigurationError: The document does not parse, or its top level
            is not a mapping.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    # safe_load: snapshot files may come from outside the test harness
    try:
        with path.open(encoding="utf-8") as f:
            document = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if document is None:
        return {}
    if isinstance(document, dict):
        return document
    raise ConfigurationError(
        f"{config_path} must contain a mapping at the top level, got {type(document).__name__}"
    )
