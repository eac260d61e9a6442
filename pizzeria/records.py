"""Row typing and record assembly.

Turns CSV text into a list of typed records. Bad data never raises:
rows of the wrong width are dropped with a warning, unparseable cells fall
back to a per-field default, and records without an id or a name are left
out.
"""

import logging
import math
from datetime import datetime
from typing import Any, List, Optional

from .csv_parser import parse_numbered_rows
from .headers import map_headers
from .models import UNLIMITED, Record, SheetSpec

logger = logging.getLogger("pizzeria.records")

MONEY_FIELDS = {
    "price",
    "price_small",
    "price_medium",
    "price_large",
    "price_family",
    "price_4_slices",
    "price_6_slices",
    "price_8_slices",
    "price_10_slices",
    "original_price",
    "promo_price",
    "delivery_fee",
}

FLAG_FIELDS = {
    "available",
    "active",
    "is_pizza",
    "is_customizable",
    "is_single_choice",
    "is_required",
}

LIMIT_FIELD = "limit"
MAX_QUANTITY_FIELD = "max_quantity"
DATE_FIELDS = {"created_at"}

AFFIRMATIVE = "SIM"

DATE_FORMATS = [
    "%d/%m/%Y %H:%M:%S",
    "%d/%m/%Y %H:%M",
    "%d/%m/%Y",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d",
]


def to_money(value: str, field: str = "price") -> float:
    """'12,50' → 12.5, 'R$ 8' → 8.0, anything unparseable → 0."""
    text = value.strip().replace("R$", "").strip().replace(",", ".")
    try:
        amount = float(text)
    except ValueError:
        amount = math.nan
    if not math.isfinite(amount):
        logger.debug(f"Unparseable {field} {value!r}, using 0")
        return 0.0
    return amount


def to_flag(value: str) -> bool:
    """True only for SIM-like answers ('sim', 'SIM', 'Sim ')."""
    return value.strip().upper().startswith(AFFIRMATIVE)


def to_limit(value: str, field: str = LIMIT_FIELD) -> Optional[int]:
    try:
        return int(value.strip())
    except ValueError:
        logger.debug(f"Unparseable {field} {value!r}, treating as unlimited")
        return UNLIMITED


def to_max_quantity(value: str, field: str = MAX_QUANTITY_FIELD) -> int:
    try:
        quantity = int(value.strip())
    except ValueError:
        logger.debug(f"Unparseable {field} {value!r}, using 1")
        return 1
    if quantity < 1:
        logger.debug(f"{field} {quantity} below 1, using 1")
        return 1
    return quantity


def to_timestamp(value: str) -> str:
    """Sheet dates ('25/12/2024 18:30') as ISO-8601; unknown formats untouched."""
    text = value.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).isoformat()
        except ValueError:
            continue
    return text


def coerce(field_name: str, value: str) -> Any:
    """Apply the type rule for a stable field name."""
    if field_name in MONEY_FIELDS:
        return to_money(value, field_name)
    if field_name == LIMIT_FIELD:
        return to_limit(value, field_name)
    if field_name == MAX_QUANTITY_FIELD:
        return to_max_quantity(value, field_name)
    if field_name in FLAG_FIELDS:
        return to_flag(value)
    if field_name in DATE_FIELDS:
        return to_timestamp(value)
    return value.strip()


def build_records(text: str, sheet: SheetSpec) -> List[Record]:
    """Parse a sheet's CSV export into typed records, in row order."""
    rows = parse_numbered_rows(text)
    if not rows:
        logger.info(f"Sheet '{sheet.key}' is empty")
        return []

    fields = map_headers(rows[0][1], sheet.headers)
    records = []
    for row_number, cells in rows[1:]:
        if len(cells) != len(fields):
            logger.warning(
                f"Dropping row {row_number} of '{sheet.key}': "
                f"expected {len(fields)} fields, got {len(cells)}"
            )
            continue

        record = {name: coerce(name, cell) for name, cell in zip(fields, cells)}

        if not record.get(sheet.id_field) or not record.get(sheet.name_field):
            logger.debug(f"Skipping row {row_number} of '{sheet.key}': no id or name")
            continue
        records.append(record)

    logger.info(f"Sheet '{sheet.key}': {len(records)} record(s) from {len(rows) - 1} row(s)")
    return records
