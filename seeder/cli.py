"""
KV Seeder command line

Usage:
    kv-seed
    kv-seed --consul-host 10.0.1.1 --seed-file seeds/dev.yaml --clear
    kv-seed --dry-run --hostname node1

Environment variables:
    CONSUL_HOST: Consul agent host (default: localhost)
    CONSUL_PORT: Consul HTTP port (default: 8500)
    KV_SEED_TIMEOUT: Request timeout in seconds (default: 10)
"""

import argparse
import logging
import sys
from typing import List, Optional

from seeder.config import SeederConfig, consul_host, consul_port, load_seed_file, request_timeout
from seeder.errors import PublishError
from seeder.models import SeedData
from seeder.publisher import client_from_config, resolve_hostname, seed_keys, seed_node
from shared.logging_config import setup_logging

logger = logging.getLogger(__name__)


LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def positive_float(raw: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {raw!r}")
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be greater than 0: {raw!r}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Publish node and cluster seed data into Consul KV")
    parser.add_argument("--consul-host", default=consul_host(), help="Consul host (default: $CONSUL_HOST or localhost)")
    parser.add_argument("--consul-port", type=int, default=consul_port(), help="Consul HTTP port (default: $CONSUL_PORT or 8500)")
    parser.add_argument("--timeout", type=positive_float, default=request_timeout(), help="Request timeout in seconds")
    parser.add_argument("--seed-file", help="YAML file with app, cluster, versions and deploy_config")
    parser.add_argument("--app", help="Application slug (overrides seed file)")
    parser.add_argument("--cluster", help="Cluster name (overrides seed file)")
    parser.add_argument("--hostname", help="Node hostname (default: this machine's hostname)")
    parser.add_argument("--clear", action="store_true", help="Delete the node and cluster trees before publishing")
    parser.add_argument("--dry-run", action="store_true", help="Print the requests without sending them")
    parser.add_argument("--strict", action="store_true", help="Exit non-zero if any key fails to publish")
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS, default="INFO", help="Logging level (default: INFO)")
    parser.add_argument("--log-file", help="Also write logs to this file")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging("kv-seed", level=args.log_level, log_file=args.log_file)

    try:
        seed = load_seed_file(args.seed_file) if args.seed_file else SeedData()
        seed = seed.with_overrides(app=args.app, cluster=args.cluster)
        hostname = args.hostname or resolve_hostname()
    except PublishError as e:
        logger.error(str(e))
        return 1

    config = SeederConfig(
        store_host=args.consul_host,
        store_port=args.consul_port,
        timeout=args.timeout,
        seed=seed
    )
    logger.info(f"Seeding {config.store_url}: host={hostname}, app={config.seed.app}, cluster={config.seed.cluster}")

    if args.dry_run:
        with client_from_config(config) as client:
            for key, value in seed_keys(config.seed, hostname):
                print(client.describe_put(key, value))
        return 0

    try:
        outcomes = seed_node(config, hostname, clear=args.clear, on_request=print)
    except PublishError as e:
        logger.error(f"Clearing old seed data failed: {e}")
        return 1

    for outcome in outcomes:
        if outcome.ok:
            print(f"PUT {outcome.key} -> {outcome.status_code}")
        else:
            print(f"PUT {outcome.key} -> FAILED ({outcome.error})")

    failed = [o for o in outcomes if not o.ok]
    if failed:
        logger.warning(f"{len(failed)} of {len(outcomes)} keys failed to publish")
        if args.strict:
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
