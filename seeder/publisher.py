"""
Seed Publisher

Pushes a node descriptor, version map and deploy config into the KV store
at the paths the preparer polls.
"""

import logging
import socket
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

from seeder.config import SeederConfig
from seeder.errors import HostnameResolutionError, PublishError
from seeder.kv_client import ConsulKVClient, PublishResult
from seeder.models import SeedData

logger = logging.getLogger(__name__)


@dataclass
class PublishOutcome:
    """Per-key result of a seeding run"""
    key: str
    status_code: Optional[int] = None
    error: Optional[PublishError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def resolve_hostname() -> str:
    """Return the local hostname"""
    try:
        hostname = socket.gethostname()
    except OSError as e:
        raise HostnameResolutionError(f"Could not resolve hostname: {e}") from e
    hostname = (hostname or "").strip()
    if not hostname:
        raise HostnameResolutionError("Hostname is empty")
    return hostname


def node_key(hostname: str, app: str) -> str:
    return f"nodes/{hostname}/{app}"


def versions_key(cluster: str) -> str:
    return f"clusters/{cluster}/versions"


def deploy_config_key(cluster: str) -> str:
    return f"clusters/{cluster}/deploy_config"


def seed_keys(seed: SeedData, hostname: str) -> List[Tuple[str, Any]]:
    """(key, payload) pairs in publish order"""
    return [
        (node_key(hostname, seed.app), seed.node),
        (versions_key(seed.cluster), seed.versions),
        (deploy_config_key(seed.cluster), seed.deploy_config),
    ]


def publish(client: ConsulKVClient, key: str, value: Any) -> PublishResult:
    """Publish a single value; raises PublishError on any failure"""
    result = client.put(key, value)
    logger.info(f"Published {key} (HTTP {result.status_code})")
    return result


def publish_all(
    client: ConsulKVClient,
    seed: SeedData,
    hostname: str,
    on_request: Optional[Callable[[str], None]] = None
) -> List[PublishOutcome]:
    """
    Publish the three seed keys.

    Each key is attempted even if an earlier one failed; failures are
    recorded on the returned outcomes.

    Args:
        client: KV client to publish through
        seed: Payloads to publish
        hostname: Node hostname used in the node key
        on_request: Called with the rendered request before each PUT
    """
    outcomes = []
    for key, value in seed_keys(seed, hostname):
        if on_request:
            on_request(client.describe_put(key, value))
        try:
            result = publish(client, key, value)
            outcomes.append(PublishOutcome(key=key, status_code=result.status_code))
        except PublishError as e:
            logger.error(f"Failed to publish {key}: {e}")
            outcomes.append(PublishOutcome(key=key, status_code=getattr(e, "status_code", None), error=e))
    return outcomes


def clear_seed(client: ConsulKVClient, seed: SeedData, hostname: str):
    """Delete this node's tree and the cluster's tree"""
    client.delete_tree(f"nodes/{hostname}/")
    client.delete_tree(f"clusters/{seed.cluster}/")


def client_from_config(config: SeederConfig) -> ConsulKVClient:
    return ConsulKVClient(host=config.store_host, port=config.store_port, timeout=config.timeout)


def seed_node(
    config: SeederConfig,
    hostname: str,
    clear: bool = False,
    on_request: Optional[Callable[[str], None]] = None
) -> List[PublishOutcome]:
    """
    Publish config.seed for hostname to the store described by config.

    Args:
        config: Store location, timeout and seed payloads
        hostname: Node hostname used in the node key
        clear: Delete the node and cluster trees first
        on_request: Called with the rendered request before each PUT

    Raises:
        PublishError: clearing old seed data failed
    """
    with client_from_config(config) as client:
        if clear:
            clear_seed(client, config.seed, hostname)
        return publish_all(client, config.seed, hostname, on_request=on_request)
