"""Vercel serverless function storing browser push subscriptions."""

import sys
from pathlib import Path

# Make the project root importable from the function bundle
sys.path.insert(0, str(Path(__file__).parent.parent))

from pizzeria.config import setup_logging
from pizzeria.handlers import make_subscribe_handler
from pizzeria.subscriptions import FirestoreSubscriptionStore

setup_logging()

handler = make_subscribe_handler(FirestoreSubscriptionStore.from_config())
