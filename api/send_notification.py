"""Vercel serverless function pushing the active sheet notifications.

Trigger with GET for a manual test or POST from the spreadsheet's Apps Script
webhook. Set DISPATCH_TOKEN to require `Authorization: Bearer <token>`.
"""

import sys
from pathlib import Path

import requests

# Make the project root importable from the function bundle
sys.path.insert(0, str(Path(__file__).parent.parent))

from pizzeria.config import setup_logging
from pizzeria.handlers import make_dispatch_handler
from pizzeria.push import WebPushTransport
from pizzeria.subscriptions import FirestoreSubscriptionStore

setup_logging()

handler = make_dispatch_handler(
    session=requests.Session(),
    store=FirestoreSubscriptionStore.from_config(),
    transport=WebPushTransport(),
)
