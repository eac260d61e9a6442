"""Configuration for the pizzeria menu API.

All values come from environment variables (set them in the Vercel project
settings) and fall back to the published spreadsheet the site was built on.
"""

import logging
import os
import sys

# ---------------------------------------------------------------------------
# Published Google Sheet tabs
# File → Share → Publish to web → select the tab → CSV → Publish
# ---------------------------------------------------------------------------
_SHEET_BASE = (
    "https://docs.google.com/spreadsheets/d/e/"
    "2PACX-1vQJeo2AAETdXC08x9EQlkIG1FiVLEosMng4IvaQYJAdZnIDHJw8CT8J5RAJNtJ5GWHOKHkUsd5V8OSL"
    "/pub?single=true&output=csv&gid="
)

MENU_CSV_URL = os.environ.get("MENU_CSV_URL", _SHEET_BASE + "0")
PROMOTIONS_CSV_URL = os.environ.get("PROMOTIONS_CSV_URL", _SHEET_BASE + "2119939811")
DELIVERY_FEES_CSV_URL = os.environ.get("DELIVERY_FEES_CSV_URL", _SHEET_BASE + "303326494")
BURGER_INGREDIENTS_CSV_URL = os.environ.get("BURGER_INGREDIENTS_CSV_URL", _SHEET_BASE + "1816106560")
# No default tab: contact info is served only once a tab is published
CONTACT_CSV_URL = os.environ.get("CONTACT_CSV_URL", "")
NOTIFICATIONS_CSV_URL = os.environ.get("NOTIFICATIONS_CSV_URL", _SHEET_BASE + "1983804831")

# Seconds per sheet request. Failed fetches are never retried.
SHEET_FETCH_TIMEOUT = float(os.environ.get("SHEET_FETCH_TIMEOUT", "10"))

# ---------------------------------------------------------------------------
# Response caching (Vercel edge cache)
# ---------------------------------------------------------------------------
MENU_CACHE_MAX_AGE = int(os.environ.get("MENU_CACHE_MAX_AGE", "60"))
MENU_CACHE_SWR = int(os.environ.get("MENU_CACHE_SWR", "300"))

# ---------------------------------------------------------------------------
# Firebase service account (Firestore holds push subscriptions)
# ---------------------------------------------------------------------------
FIREBASE_PROJECT_ID = os.environ.get("FIREBASE_PROJECT_ID", "")
FIREBASE_ADMIN_CLIENT_EMAIL = os.environ.get("FIREBASE_ADMIN_CLIENT_EMAIL", "")
# Vercel stores the key on one line, so newlines arrive as literal "\n"
FIREBASE_ADMIN_PRIVATE_KEY = os.environ.get("FIREBASE_ADMIN_PRIVATE_KEY", "").replace("\\n", "\n")
SUBSCRIPTIONS_COLLECTION = os.environ.get("SUBSCRIPTIONS_COLLECTION", "pushSubscriptions")

# ---------------------------------------------------------------------------
# Web push (VAPID)
# ---------------------------------------------------------------------------
VAPID_PRIVATE_KEY = os.environ.get("VAPID_PRIVATE_KEY", "")
VAPID_SUBJECT = os.environ.get("VAPID_SUBJECT", "mailto:contato@pizzaria.example")
PUSH_TTL = int(os.environ.get("PUSH_TTL", "86400"))
PUSH_TIMEOUT = float(os.environ.get("PUSH_TIMEOUT", "10"))

# Optional shared secret for the dispatch trigger (e.g. Apps Script webhook)
DISPATCH_TOKEN = os.environ.get("DISPATCH_TOKEN", "")

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


def setup_logging(level: str = LOG_LEVEL) -> None:
    """Route every pizzeria logger to stdout, where Vercel collects it."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
