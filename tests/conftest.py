"""
Pytest configuration: in-process mock Consul KV server
"""

import base64
import json
import socket
import threading
import time
from http.server import BaseHTTPRequestHandler, HTTPServer
from urllib.parse import parse_qs, urlparse

import pytest

from seeder.kv_client import ConsulKVClient

KV_PREFIX = "/v1/kv/"


def get_free_port():
    """Get a free port for testing"""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('', 0))
        s.listen(1)
        port = s.getsockname()[1]
    return port


class MockConsulState:
    """Stored keys, received requests and an optional forced status"""

    def __init__(self):
        self.store = {}
        self.requests = []
        self.reject_status = None

    def reset(self):
        self.store.clear()
        self.requests.clear()
        self.reject_status = None


class MockConsulHandler(BaseHTTPRequestHandler):
    """Mock Consul agent exposing the /v1/kv API"""

    state = None

    def _key(self):
        return urlparse(self.path).path[len(KV_PREFIX):]

    def _reply(self, status_code=200, payload=None):
        body = json.dumps(payload).encode() if payload is not None else b""
        self.send_response(status_code)
        self.send_header('Content-Type', 'application/json')
        self.send_header('Content-Length', str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def _record(self, body=b""):
        self.state.requests.append({
            "method": self.command,
            "path": urlparse(self.path).path,
            "query": parse_qs(urlparse(self.path).query, keep_blank_values=True),
            "headers": dict(self.headers),
            "body": body.decode(),
        })

    def do_PUT(self):
        length = int(self.headers.get('Content-Length', 0))
        body = self.rfile.read(length)
        self._record(body)
        if self.state.reject_status:
            self._reply(self.state.reject_status, {"error": "rejected"})
            return
        self.state.store[self._key()] = body
        self._reply(200, True)

    def do_GET(self):
        self._record()
        if self.state.reject_status:
            self._reply(self.state.reject_status, {"error": "rejected"})
            return
        key = self._key()
        if key not in self.state.store:
            self._reply(404)
            return
        self._reply(200, [{
            "Key": key,
            "Value": base64.b64encode(self.state.store[key]).decode(),
        }])

    def do_DELETE(self):
        self._record()
        if self.state.reject_status:
            self._reply(self.state.reject_status, {"error": "rejected"})
            return
        prefix = self._key()
        for key in [k for k in self.state.store if k.startswith(prefix)]:
            del self.state.store[key]
        self._reply(200, True)

    def log_message(self, format, *args):
        """Suppress log messages during testing"""
        pass


@pytest.fixture(scope="session")
def mock_consul_server():
    """Session-wide mock Consul server; yields (host, port, state)"""
    state = MockConsulState()
    handler = type("BoundConsulHandler", (MockConsulHandler,), {"state": state})
    port = get_free_port()
    server = HTTPServer(('localhost', port), handler)
    thread = threading.Thread(target=server.serve_forever)
    thread.daemon = True
    thread.start()
    time.sleep(0.2)  # Give server time to start
    yield "localhost", port, state
    server.shutdown()


@pytest.fixture
def consul(mock_consul_server):
    """Mock Consul state, emptied for each test"""
    _, _, state = mock_consul_server
    state.reset()
    return state


@pytest.fixture
def kv_client(mock_consul_server, consul):
    host, port, _ = mock_consul_server
    with ConsulKVClient(host=host, port=port, timeout=5) as client:
        yield client


@pytest.fixture
def unreachable_client():
    """Client pointed at a port nothing listens on"""
    with ConsulKVClient(host="127.0.0.1", port=get_free_port(), timeout=1) as client:
        yield client
