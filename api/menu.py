"""Vercel serverless function serving the menu, promotions and delivery fees."""

import sys
from pathlib import Path

import requests

# Make the project root importable from the function bundle
sys.path.insert(0, str(Path(__file__).parent.parent))

from pizzeria.config import setup_logging
from pizzeria.handlers import make_menu_handler

setup_logging()

handler = make_menu_handler(requests.Session())
