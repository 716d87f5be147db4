"""
Seed payload models.

These are the three values the preparer reads back from the store:
- NodeDescriptor at nodes/<hostname>/<app>
- VersionMap at clusters/<cluster>/versions
- DeployConfig at clusters/<cluster>/deploy_config
"""

from typing import Dict, Optional

from pydantic import BaseModel, Field

DEFAULT_APP = "slug"
DEFAULT_CLUSTER = "development"
DEFAULT_VERSIONS = {"e928e5ad8814441e7c503d7f6c9e55d72584c006": "prep"}
DEFAULT_BASEDIR = "/tmp/slug"

# commit hash -> label ("prep", "active", ...)
VersionMap = Dict[str, str]


class NodeDescriptor(BaseModel):
    """Which cluster a node belongs to"""
    cluster: str = DEFAULT_CLUSTER


class DeployConfig(BaseModel):
    """
    Where an artifact is unpacked and which user runs it.

    Deploy config cannot be changed by developers: it decides where things
    are installed and may run them as root. runas=None means no override.
    """
    basedir: str = DEFAULT_BASEDIR
    runas: Optional[str] = None


class SeedData(BaseModel):
    """Everything published in a single seeding run"""
    app: str = DEFAULT_APP
    node: NodeDescriptor = Field(default_factory=NodeDescriptor)
    versions: VersionMap = Field(default_factory=lambda: dict(DEFAULT_VERSIONS))
    deploy_config: DeployConfig = Field(default_factory=DeployConfig)

    @property
    def cluster(self) -> str:
        return self.node.cluster

    def with_overrides(self, app: Optional[str] = None, cluster: Optional[str] = None) -> "SeedData":
        """Return a copy with app and/or cluster replaced"""
        seed = self.model_copy(deep=True)
        if app:
            seed.app = app
        if cluster:
            seed.node = NodeDescriptor(cluster=cluster)
        return seed
