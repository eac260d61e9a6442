"""Download published Google Sheet tabs as CSV text.

Setup for each tab:
1. File → Share → Publish to web → select the tab → CSV → Publish
2. Copy the URL into the matching *_CSV_URL environment variable
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Sequence

import requests

from .config import SHEET_FETCH_TIMEOUT
from .errors import SourceFetchError
from .models import SheetSpec

logger = logging.getLogger("pizzeria.sheets")


def fetch_csv(
    sheet: SheetSpec,
    session: requests.Session,
    timeout: float = SHEET_FETCH_TIMEOUT,
) -> str:
    """Fetch one tab. Any transport error or non-2xx status raises SourceFetchError."""
    try:
        response = session.get(sheet.url, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        raise SourceFetchError(sheet.key, sheet.url, str(e)[:200]) from e

    # Sheets serves CSV without a charset, which requests reads as latin-1
    response.encoding = "utf-8"
    return response.text


def fetch_all(
    sheets: Sequence[SheetSpec],
    session: requests.Session,
    timeout: float = SHEET_FETCH_TIMEOUT,
) -> Dict[str, str]:
    """Fetch every tab concurrently and return {sheet key: csv text}.

    Waits for all requests to finish. If any of them failed, the first
    failure (in sheet order) is raised and no partial result is returned.
    """
    if not sheets:
        return {}

    with ThreadPoolExecutor(max_workers=len(sheets)) as pool:
        futures = [
            (sheet, pool.submit(fetch_csv, sheet, session, timeout))
            for sheet in sheets
        ]

    texts = {}
    errors = []
    for sheet, future in futures:
        try:
            texts[sheet.key] = future.result()
        except SourceFetchError as e:
            logger.error(f"  ❌ {sheet.key}: {e.reason}")
            errors.append(e)

    if errors:
        raise errors[0]
    return texts
