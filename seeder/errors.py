"""Errors raised while building or publishing seed data."""

from typing import Optional


class PublishError(Exception):
    """Base class for all seeder failures"""


class HostnameResolutionError(PublishError):
    """Local hostname could not be determined"""


class SerializationError(PublishError):
    """Payload could not be encoded as JSON"""


class SeedFileError(PublishError):
    """Seed file is missing, not YAML, or has the wrong shape"""


class StoreError(PublishError):
    """Base class for key-value store failures"""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key


class StoreUnreachableError(StoreError):
    """Connection to the store failed or timed out"""


class StoreRejectedError(StoreError):
    """Store answered with a non-2xx status"""

    def __init__(self, status_code: int, key: Optional[str] = None, body: str = ""):
        super().__init__(f"Store rejected {key or 'request'}: HTTP {status_code}", key=key)
        self.status_code = status_code
        self.body = body
