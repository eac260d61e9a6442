#!/usr/bin/env python3
"""Pizzeria menu API — local runner

Runs one ingestion cycle against the published sheets and prints what the
site would receive. Handy for checking a spreadsheet edit before deploying.

Usage:
    python -m pizzeria.main            # Summary of every tab
    python -m pizzeria.main --json     # Full /api/menu payload
    python -m pizzeria.main --send     # Also push active notifications
"""

import json
import logging
import sys
from typing import Dict

import requests

from .catalog import BURGER_INGREDIENTS, CONTRACT_VERSION, MENU, load_catalog
from .config import setup_logging
from .errors import PizzeriaError
from .notifications import fetch_active_notifications
from .push import WebPushTransport, dispatch
from .subscriptions import FirestoreSubscriptionStore

logger = logging.getLogger("pizzeria")


def _print_summary(payload: Dict[str, object]) -> None:
    print(f"\n{'='*60}")
    print(f"CATALOG ({CONTRACT_VERSION})")
    print(f"{'='*60}")
    for key, records in payload.items():
        if isinstance(records, list):
            print(f"  {key}: {len(records)} record(s)")

    buildable = [item for item in payload.get(MENU, []) if "ingredients" in item]
    for item in buildable:
        print(f"\n  {item['name']} — {len(item['ingredients'])} ingredient(s)")
    if not buildable and payload.get(BURGER_INGREDIENTS):
        print("\n  ⚠️  Ingredients listed but no buildable burger on the menu")
    print(f"\n{'='*60}\n")


def run(as_json: bool = False, send: bool = False) -> int:
    """Fetch → parse → print, optionally followed by a push dispatch."""
    session = requests.Session()

    try:
        payload = load_catalog(session)
    except PizzeriaError as e:
        logger.error(f"❌ {e}")
        return 1

    if as_json:
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        _print_summary(payload)

    if not send:
        return 0

    try:
        notifications = fetch_active_notifications(session)
        if not notifications:
            logger.info("No active notifications to send")
            return 0
        store = FirestoreSubscriptionStore.from_config()
        report = dispatch(notifications, store.list(), WebPushTransport(), store)
    except PizzeriaError as e:
        logger.error(f"❌ {e}")
        return 1

    logger.info(f"✅ {report.status_line}")
    return 0


if __name__ == "__main__":
    setup_logging()
    sys.exit(run(as_json="--json" in sys.argv, send="--send" in sys.argv))
