"""
Consul KV Client

Thin wrapper around the Consul /v1/kv HTTP API used to publish seed data.
Values are stored as JSON documents.
"""

import base64
import json
import logging
import shlex
from urllib.parse import quote
from dataclasses import dataclass
from typing import Any, Optional

import requests
from pydantic import BaseModel

from seeder.errors import SerializationError, StoreRejectedError, StoreUnreachableError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


@dataclass
class PublishResult:
    """Outcome of a successful PUT"""
    key: str
    status_code: int
    body: str = ""


def encode_value(value: Any) -> str:
    """
    Serialize a value to a JSON document.

    Pydantic models are dumped first so optional fields keep explicit nulls.

    Raises:
        SerializationError: value is not JSON-serializable
    """
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json")
    try:
        return json.dumps(value)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Cannot encode value as JSON: {e}")


def decode_value(raw: Optional[str]) -> Any:
    """Base64 'Value' field from Consul -> JSON value (raw text if not JSON, bytes if not UTF-8)"""
    if raw is None:
        return None
    data = base64.b64decode(raw)
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        return data
    try:
        return json.loads(text)
    except ValueError:
        return text


def _is_success(response: requests.Response) -> bool:
    return 200 <= response.status_code < 300


class ConsulKVClient:
    """
    Client for the Consul key-value store.

    Usage:
        with ConsulKVClient("localhost", 8500) as kv:
            kv.put("nodes/node1/slug", {"cluster": "development"})
            kv.get("nodes/node1/slug")  # {'cluster': 'development'}
            kv.delete_tree("nodes/node1/")
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 8500,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize KV client.

        Args:
            host: Consul agent host
            port: Consul HTTP API port
            timeout: Request timeout in seconds
            session: Optional requests session (one is created if omitted)
        """
        self.host = host
        self.port = port
        self.timeout = timeout
        self.base_url = f"http://{host}:{port}/v1/kv"
        self.session = session or requests.Session()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def close(self):
        self.session.close()

    def url_for(self, key: str) -> str:
        return f"{self.base_url}/{quote(key.lstrip('/'), safe='/')}"

    def describe_put(self, key: str, value: Any) -> str:
        """Render the PUT for key as an equivalent curl command line"""
        return " ".join([
            "curl", "-X", "PUT",
            shlex.quote(self.url_for(key)),
            "-d", shlex.quote(encode_value(value)),
        ])

    def _request(self, method: str, key: str, **kwargs) -> requests.Response:
        url = self.url_for(key)
        try:
            return self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise StoreUnreachableError(f"Cannot reach store at {self.host}:{self.port}: {e}", key=key) from e

    def put(self, key: str, value: Any) -> PublishResult:
        """
        Store value at key as JSON.

        Returns:
            PublishResult with the HTTP status and response body

        Raises:
            SerializationError: value is not JSON-serializable
            StoreUnreachableError: connection failure or timeout
            StoreRejectedError: non-2xx response
        """
        body = encode_value(value)
        response = self._request(
            "PUT", key,
            data=body.encode("utf-8"),
            headers={"Content-Type": "application/json"}
        )
        if not _is_success(response):
            logger.error(f"PUT {key} rejected: HTTP {response.status_code}")
            raise StoreRejectedError(response.status_code, key=key, body=response.text)

        logger.debug(f"PUT {key} -> {response.status_code}")
        return PublishResult(key=key, status_code=response.status_code, body=response.text)

    def get(self, key: str) -> Any:
        """
        Fetch and decode the value at key.

        Returns:
            Decoded JSON value, raw string for non-JSON values, bytes for
            non-UTF-8 values, or None if the key does not exist
        """
        response = self._request("GET", key)
        if response.status_code == 404:
            return None
        if not _is_success(response):
            raise StoreRejectedError(response.status_code, key=key, body=response.text)

        entries = response.json()
        if not entries:
            return None
        return decode_value(entries[0].get("Value"))

    def delete_tree(self, prefix: str) -> int:
        """
        Recursively delete every key under prefix.

        Consul matches prefixes literally, so end prefix with "/" to
        delete a single subtree.

        Returns:
            HTTP status code
        """
        response = self._request("DELETE", prefix, params={"recurse": ""})
        if not _is_success(response):
            raise StoreRejectedError(response.status_code, key=prefix, body=response.text)
        logger.info(f"Deleted tree {prefix}")
        return response.status_code
