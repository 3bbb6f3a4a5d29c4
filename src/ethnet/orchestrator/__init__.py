"""Orchestrator collaborator: call contract, data shapes, and helpers.

Attributes:
    Orchestrator: Async protocol every orchestrator implementation satisfies.
    RunPackageConfig: Pydantic parameters for running a package.
    RunPackageResult: Outcome of a package run.
    wait_for_services: Reusable readiness poll loop.
    SnapshotOrchestrator: In-memory orchestrator over fixed service listings.
"""

from .protocol import Orchestrator, RunPackageConfig, RunPackageResult
from .snapshot import SnapshotOrchestrator
from .wait import DEFAULT_POLL_INTERVAL, wait_for_services


__all__ = [
    "DEFAULT_POLL_INTERVAL",
    "Orchestrator",
    "RunPackageConfig",
    "RunPackageResult",
    "SnapshotOrchestrator",
    "wait_for_services",
]
