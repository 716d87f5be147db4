"""
Shared utilities for the KV seeder.

This package contains functionality used by the CLI and launcher scripts:
- logging_config: consistent logging setup
"""
