"""
Seeder configuration.

Store location comes from the environment; the seed payloads come from the
built-in defaults or a YAML seed file. Both end up in a SeederConfig which is
passed explicitly to the publisher.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from seeder.errors import SeedFileError
from seeder.models import DeployConfig, NodeDescriptor, SeedData

logger = logging.getLogger(__name__)

SEED_FILE_KEYS = {"app", "cluster", "versions", "deploy_config"}


def _int_env(name: str, default: int) -> int:
    raw = str(os.getenv(name, str(default))).strip()
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer {name}={raw!r}, using {default}")
        return default


def _positive_float_env(name: str, default: float) -> float:
    raw = str(os.getenv(name, str(default))).strip()
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {name}={raw!r}, using {default}")
        return default
    if value <= 0:
        logger.warning(f"Ignoring non-positive {name}={raw!r}, using {default}")
        return default
    return value


def consul_host() -> str:
    return str(os.getenv("CONSUL_HOST", "localhost")).strip()


def consul_port() -> int:
    return _int_env("CONSUL_PORT", 8500)


def request_timeout() -> float:
    return _positive_float_env("KV_SEED_TIMEOUT", 10.0)


@dataclass
class SeederConfig:
    """Where to publish and what to publish"""
    store_host: str = field(default_factory=consul_host)
    store_port: int = field(default_factory=consul_port)
    timeout: float = field(default_factory=request_timeout)
    seed: SeedData = field(default_factory=SeedData)

    @property
    def store_url(self) -> str:
        return f"http://{self.store_host}:{self.store_port}"


def load_seed_file(path: str) -> SeedData:
    """
    Load seed payloads from a YAML file.

    Recognised top-level keys are app, cluster, versions and deploy_config;
    anything left out keeps its default. An empty file yields the defaults.

    Raises:
        SeedFileError: file missing, invalid YAML, unknown keys or bad values
    """
    seed_path = Path(path)
    try:
        with seed_path.open("r") as f:
            raw = yaml.safe_load(f)
    except FileNotFoundError:
        raise SeedFileError(f"Seed file not found: {seed_path}")
    except yaml.YAMLError as e:
        raise SeedFileError(f"Invalid YAML in {seed_path}: {e}")

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise SeedFileError(f"Seed file {seed_path} must contain a mapping, got {type(raw).__name__}")

    unknown = set(raw) - SEED_FILE_KEYS
    if unknown:
        raise SeedFileError(f"Unknown keys in {seed_path}: {', '.join(sorted(unknown))}")

    values = {}
    if "app" in raw:
        values["app"] = raw["app"]
    if "versions" in raw:
        values["versions"] = raw["versions"]
    try:
        if "cluster" in raw:
            values["node"] = NodeDescriptor(cluster=raw["cluster"])
        if "deploy_config" in raw:
            values["deploy_config"] = DeployConfig.model_validate(raw["deploy_config"])
        seed = SeedData(**values)
    except ValidationError as e:
        raise SeedFileError(f"Invalid seed data in {seed_path}: {e}")

    logger.info(f"Loaded seed data from {seed_path} (app={seed.app}, cluster={seed.cluster})")
    return seed
