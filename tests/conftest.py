"""Shared fakes for the sheet session, subscription store and push transport."""

import threading
from http.server import HTTPServer

import pytest
import requests

from pizzeria.errors import PushDeliveryError
from pizzeria.subscriptions import validate


def make_response(url: str, status: int = 200, text: str = "") -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response._content = text.encode("utf-8")
    response.url = url
    response.reason = "OK" if status < 400 else "Error"
    return response


class FakeSession:
    """Stands in for requests.Session: url → CSV text, status code or exception."""

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        route = self.routes.get(url, 404)
        if isinstance(route, Exception):
            raise route
        if isinstance(route, int):
            return make_response(url, status=route)
        return make_response(url, text=route)


class FakeStore:
    """In-memory subscription store with the same contract as Firestore's."""

    def __init__(self, subscriptions=None):
        self.subscriptions = {}
        self.removed = []
        for descriptor in subscriptions or []:
            self.save(descriptor)

    def save(self, descriptor):
        subscription = validate(descriptor)
        created = subscription.endpoint not in self.subscriptions
        self.subscriptions[subscription.endpoint] = subscription
        return created

    def list(self):
        return list(self.subscriptions.values())

    def remove(self, endpoint):
        self.removed.append(endpoint)
        self.subscriptions.pop(endpoint, None)


class FakeTransport:
    """Records every send; endpoints listed in `statuses` fail with that code."""

    def __init__(self, statuses=None):
        self.statuses = dict(statuses or {})
        self.sent = []
        self._lock = threading.Lock()

    def send(self, subscription, payload):
        with self._lock:
            self.sent.append((subscription.endpoint, payload))
        status = self.statuses.get(subscription.endpoint)
        if status is not None:
            raise PushDeliveryError(subscription.endpoint, status, "refused")


def subscription(n: int) -> dict:
    return {
        "endpoint": f"https://push.example.com/send/{n}",
        "keys": {"p256dh": f"key-{n}", "auth": f"auth-{n}"},
    }


@pytest.fixture
def serve():
    """Run a handler class on a local HTTP server and return its base URL."""
    servers = []

    def _serve(handler_cls):
        server = HTTPServer(("127.0.0.1", 0), handler_cls)
        threading.Thread(target=server.serve_forever, daemon=True).start()
        servers.append(server)
        return f"http://127.0.0.1:{server.server_port}"

    yield _serve

    for server in servers:
        server.shutdown()
        server.server_close()
