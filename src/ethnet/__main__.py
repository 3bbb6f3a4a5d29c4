"""CLI entry point for ethnet.

Maps a captured service listing into a network and prints what was found.
The snapshot network is orphaned: inspecting never destroys anything.

Examples:
    ```bash
    python -m ethnet inspect snapshot.yaml
    python -m ethnet inspect snapshot.yaml --enclave devnet --json
    python -m ethnet inspect snapshot.yaml --config config/discovery.yaml --log-level DEBUG
    ```
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from ethnet.core.config import DiscoveryConfig
from ethnet.core.exceptions import EthnetError
from ethnet.core.logger import Logger, StructuredFormatter
from ethnet.discovery.mapper import ServiceMapper
from ethnet.network.network import Network
from ethnet.orchestrator.snapshot import SnapshotOrchestrator


logger = Logger("cli")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="ethnet",
        description="Ethereum test network discovery",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    inspect = subparsers.add_parser("inspect", help="Map a service snapshot and print it")
    inspect.add_argument("snapshot", type=Path, help="Service snapshot YAML file")
    inspect.add_argument(
        "--enclave",
        help="Enclave name (default: the snapshot's 'enclave' key)",
    )
    inspect.add_argument(
        "--config",
        type=Path,
        help="Discovery config YAML (network params, wait settings)",
    )
    inspect.add_argument(
        "--wait-for",
        action="append",
        default=[],
        metavar="SERVICE",
        help="Service that must be running before mapping (repeatable; bounded by wait.timeout)",
    )
    inspect.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Log level (default: WARNING)",
    )
    inspect.add_argument("--json", action="store_true", help="Print JSON instead of text")

    return parser.parse_args(argv)


def setup_logging(level: str) -> None:
    """Install a ``StructuredFormatter`` on the root handler."""
    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level))


def network_summary(network: Network) -> dict[str, Any]:
    """Return a JSON-compatible description of *network*."""
    apache = network.apache_config
    return {
        "name": network.name,
        "chain_id": network.chain_id,
        "enclave": network.enclave_name,
        "execution_clients": [
            {
                "name": c.name,
                "type": str(c.type),
                "rpc_url": c.rpc_url,
                "ws_url": c.ws_url,
                "engine_url": c.engine_url,
                "metrics_url": c.metrics_url,
                "p2p_port": c.p2p_port,
            }
            for c in network.execution_clients
        ],
        "consensus_clients": [
            {
                "name": c.name,
                "type": str(c.type),
                "beacon_api_url": c.beacon_api_url,
                "metrics_url": c.metrics_url,
                "p2p_port": c.p2p_port,
            }
            for c in network.consensus_clients
        ],
        "validators": [
            {
                "name": v.name,
                "api_url": v.api_url,
                "metrics_url": v.metrics_url,
                "validator_count": v.validator_count,
                "validator_start_index": v.validator_start_index,
            }
            for v in network.validators
        ],
        "services": [
            {"name": s.name, "type": str(s.type), "status": s.status} for s in network.services
        ],
        "apache_config": None
        if apache is None
        else {
            "url": apache.url,
            "genesis_ssz_url": apache.genesis_ssz_url,
            "config_yaml_url": apache.config_yaml_url,
            "bootnodes_yaml_url": apache.bootnodes_yaml_url,
            "deposit_contract_block_url": apache.deposit_contract_block_url,
        },
    }


def format_summary(summary: dict[str, Any]) -> str:
    """Render a summary from ``network_summary()`` as plain text."""
    lines = [f"{summary['name']} (chain id {summary['chain_id']})"]
    lines.append(f"execution clients: {len(summary['execution_clients'])}")
    lines.extend(
        f"  {c['name']} [{c['type']}] rpc={c['rpc_url']}" for c in summary["execution_clients"]
    )
    lines.append(f"consensus clients: {len(summary['consensus_clients'])}")
    lines.extend(
        f"  {c['name']} [{c['type']}] beacon={c['beacon_api_url']}"
        for c in summary["consensus_clients"]
    )
    lines.append(f"validators: {len(summary['validators'])}")
    lines.extend(f"  {v['name']} api={v['api_url']}" for v in summary["validators"])
    lines.append(f"services: {len(summary['services'])}")
    lines.extend(f"  {s['name']} [{s['type']}] {s['status']}" for s in summary["services"])
    if summary["apache_config"] is not None:
        lines.append(f"config server: {summary['apache_config']['url']}")
    return "\n".join(lines)


async def inspect(args: argparse.Namespace) -> int:
    """Map the snapshot and print it. Returns the exit code."""
    try:
        config = DiscoveryConfig.from_yaml(args.config) if args.config else DiscoveryConfig()
        config = config.model_copy(update={"orphan_on_exit": True})
        orchestrator = SnapshotOrchestrator.from_yaml(args.snapshot, enclave_name=args.enclave)
        (enclave_name,) = orchestrator.enclave_names
        network = await ServiceMapper(orchestrator, handle_signals=False).map_to_network(
            enclave_name, config, wait_for=args.wait_for
        )
    except (EthnetError, FileNotFoundError) as e:
        logger.error("inspect_failed", snapshot=str(args.snapshot), error=str(e))
        return 1

    summary = network_summary(network)
    if args.json:
        print(json.dumps(summary, indent=2))
    else:
        print(format_summary(summary))
    return 0


async def main(argv: list[str] | None = None) -> int:
    """Main entry point: parse args, set up logging, and run the command."""
    args = parse_args(argv)
    setup_logging(args.log_level)
    return await inspect(args)


def cli() -> None:
    """Synchronous entry point for console_scripts."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
