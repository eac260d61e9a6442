"""Notifications tab: messages the staff want pushed to subscribers.

Sheet columns: ID Notificacao | Titulo | Mensagem | URL de Destino (Opcional)
| Ativo (SIM/NAO) | Data de Criacao. Only rows marked SIM are sent.
"""

import logging
from typing import List, Optional

import requests

from . import config
from .headers import NOTIFICATION_HEADERS
from .models import Record, SheetSpec
from .records import build_records
from .sheets import fetch_csv

logger = logging.getLogger("pizzeria.notifications")

NOTIFICATIONS = "notificacoes"


def notifications_sheet(url: str = config.NOTIFICATIONS_CSV_URL) -> SheetSpec:
    return SheetSpec(NOTIFICATIONS, url, NOTIFICATION_HEADERS, name_field="title")


def active_notifications(records: List[Record]) -> List[Record]:
    return [r for r in records if r.get("active") is True]


def fetch_active_notifications(
    session: requests.Session,
    sheet: Optional[SheetSpec] = None,
    timeout: float = config.SHEET_FETCH_TIMEOUT,
) -> List[Record]:
    """Fetch and parse the notifications tab, keeping active rows only."""
    sheet = sheet or notifications_sheet()
    records = build_records(fetch_csv(sheet, session, timeout), sheet)
    active = active_notifications(records)
    logger.info(f"{len(active)} active notification(s) of {len(records)}")
    return active


def push_payload(notification: Record) -> dict:
    """What the service worker's push listener reads."""
    return {
        "title": notification.get("title", ""),
        "body": notification.get("message", ""),
        "url": notification.get("url") or "/",
    }
