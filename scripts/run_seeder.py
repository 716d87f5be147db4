"""
KV Seeder Launcher Script

Publishes the development seed data into a local Consul agent.

Usage:
    python scripts/run_seeder.py --seed-file seeds/development.yaml

Environment variables:
    CONSUL_HOST: Consul host (default: localhost)
    CONSUL_PORT: Consul HTTP port (default: 8500)
"""

import os
import sys

# Add project root to Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from seeder.cli import main


if __name__ == "__main__":
    sys.exit(main())
