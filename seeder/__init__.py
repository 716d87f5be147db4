"""
KV Seeder

Publishes node and cluster metadata (node descriptor, version map, deploy
config) into a Consul key-value store for the preparer agent to pick up.
"""

__version__ = "0.1.0"
