"""HTTP handlers served by the Vercel functions in api/.

Vercel's Python runtime looks for a module-level `handler` class derived
from BaseHTTPRequestHandler. The factories below build those classes around
collaborators created once per process (HTTP session, subscription store,
push transport), so nothing here reaches for a global client.
"""

import json
import logging
from http.server import BaseHTTPRequestHandler
from typing import Optional, Sequence

import requests

from . import config
from .catalog import load_catalog
from .errors import SourceFetchError, StoreError, SubscriptionInvalid
from .models import SheetSpec
from .notifications import fetch_active_notifications
from .push import dispatch

logger = logging.getLogger("pizzeria.handlers")


def menu_cache_control(
    max_age: int = config.MENU_CACHE_MAX_AGE,
    stale_while_revalidate: int = config.MENU_CACHE_SWR,
) -> str:
    return f"public, s-maxage={max_age}, stale-while-revalidate={stale_while_revalidate}"


class JsonHandler(BaseHTTPRequestHandler):
    """Base for JSON endpoints: CORS, method checks, body parsing."""

    allowed_methods: Sequence[str] = ("GET",)

    def do_GET(self):
        self._route("GET")

    def do_POST(self):
        self._route("POST")

    def do_PUT(self):
        self._route("PUT")

    def do_PATCH(self):
        self._route("PATCH")

    def do_DELETE(self):
        self._route("DELETE")

    def do_OPTIONS(self):
        """Handle CORS preflight."""
        self.send_response(200)
        self._send_cors_headers()
        self.end_headers()

    def _route(self, method: str):
        if method not in self.allowed_methods:
            self._json_response(
                405,
                {"message": "Method Not Allowed"},
                extra_headers={"Allow": ", ".join(self.allowed_methods)},
            )
            return
        try:
            getattr(self, f"handle_{method.lower()}")()
        except Exception as e:
            logger.exception(f"Unhandled error in {type(self).__name__}")
            self._json_response(500, {"message": "Internal Server Error", "error": str(e)})

    def _read_json(self):
        """Request body as JSON. Raises ValueError when it is not valid JSON."""
        content_length = max(0, int(self.headers.get("Content-Length", 0) or 0))
        body = self.rfile.read(content_length) if content_length else b""
        return json.loads(body.decode("utf-8") or "null")

    def _json_response(self, status, data, cache: Optional[str] = None, extra_headers=None):
        body = json.dumps(data, ensure_ascii=False).encode("utf-8")
        self.send_response(status)
        self._send_cors_headers()
        self.send_header("Content-Type", "application/json; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        if cache:
            self.send_header("Cache-Control", cache)
        for name, value in (extra_headers or {}).items():
            self.send_header(name, value)
        self.end_headers()
        self.wfile.write(body)

    def _send_cors_headers(self):
        methods = ", ".join(list(self.allowed_methods) + ["OPTIONS"])
        self.send_header("Access-Control-Allow-Origin", "*")
        self.send_header("Access-Control-Allow-Methods", methods)
        self.send_header("Access-Control-Allow-Headers", "Content-Type, Authorization")

    def log_message(self, format, *args):
        logger.info(f"{self.address_string()} {format % args}")


def make_menu_handler(
    session: requests.Session,
    sheets: Optional[Sequence[SheetSpec]] = None,
    timeout: float = config.SHEET_FETCH_TIMEOUT,
):
    """GET /api/menu: all storefront tabs as parsed records."""

    class handler(JsonHandler):
        allowed_methods = ("GET",)

        def handle_get(self):
            try:
                payload = load_catalog(session, sheets, timeout)
            except SourceFetchError as e:
                logger.error(f"Menu load failed: {e}")
                return self._json_response(500, {"error": "Erro ao carregar dados."}, cache="no-store")
            self._json_response(200, payload, cache=menu_cache_control())

    return handler


def make_subscribe_handler(store):
    """POST /api/subscribe: store a browser push subscription.

    201 for a new endpoint. A duplicate endpoint is not rejected: its keys are
    refreshed and the answer is 200 with `"duplicate": true`, so a browser
    that re-subscribes after a key rotation keeps receiving messages.
    """

    class handler(JsonHandler):
        allowed_methods = ("POST",)

        def handle_post(self):
            try:
                descriptor = self._read_json()
            except (json.JSONDecodeError, ValueError):
                return self._json_response(400, {"message": "Invalid JSON"})

            try:
                created = store.save(descriptor)
            except SubscriptionInvalid as e:
                logger.error(f"Rejected subscription: {e}")
                return self._json_response(400, {"message": str(e)})
            except StoreError as e:
                logger.error(str(e))
                return self._json_response(500, {"message": "Failed to save subscription to database."})

            if created:
                return self._json_response(201, {"message": "Push subscription saved.", "duplicate": False})
            self._json_response(200, {"message": "Push subscription already registered.", "duplicate": True})

    return handler


def make_dispatch_handler(
    session: requests.Session,
    store,
    transport,
    notifications_sheet: Optional[SheetSpec] = None,
    token: str = config.DISPATCH_TOKEN,
):
    """GET|POST /api/send_notification: push active notifications to everyone."""

    class handler(JsonHandler):
        allowed_methods = ("GET", "POST")

        def handle_get(self):
            self._send_notifications()

        def handle_post(self):
            self._send_notifications()

        def _send_notifications(self):
            if token and self.headers.get("Authorization", "") != f"Bearer {token}":
                return self._json_response(401, {"message": "Unauthorized"})

            try:
                notifications = fetch_active_notifications(session, notifications_sheet)
            except SourceFetchError as e:
                logger.error(f"Notification sheet failed: {e}")
                return self._json_response(500, {"message": "Internal Server Error", "error": str(e)})

            if not notifications:
                logger.info("No active notifications in the sheet")
                return self._json_response(200, {"message": "No active notifications to send."})

            try:
                subscriptions = store.list()
            except StoreError as e:
                logger.error(str(e))
                return self._json_response(500, {"message": "Internal Server Error", "error": str(e)})

            if not subscriptions:
                logger.info("No push subscriptions stored")
                return self._json_response(200, {"message": "No push subscriptions found."})

            report = dispatch(notifications, subscriptions, transport, store)
            self._json_response(200, report.to_dict())

    return handler
