"""Storefront catalog: every tab the menu page needs, in one response.

One ingestion cycle fetches all configured tabs in parallel, parses them,
and attaches the burger ingredient list to the build-your-own burger. Nothing
is stored; the edge cache in front of /api/menu keeps the spreadsheet from
being hit on every page load.
"""

import logging
from typing import Dict, List, Optional, Sequence

import requests

from . import config
from .headers import (
    CONTACT_HEADERS,
    DELIVERY_FEE_HEADERS,
    INGREDIENT_HEADERS,
    MENU_HEADERS,
    PROMOTION_HEADERS,
)
from .models import IngredientOption, Record, SheetSpec
from .records import build_records
from .sheets import fetch_all

logger = logging.getLogger("pizzeria.catalog")

# Bumped whenever the shape of the /api/menu payload changes
CONTRACT_VERSION = "parsed-v1"

MENU = "cardapio"
PROMOTIONS = "promocoes"
DELIVERY_FEES = "deliveryFees"
BURGER_INGREDIENTS = "ingredientesHamburguer"
CONTACT = "contato"

# Menu items whose name contains this get the ingredient list attached
BUILDABLE_BURGER_MARKER = "hambúrguer montável"


def default_sheets() -> List[SheetSpec]:
    """Storefront tabs as configured by environment."""
    return [
        SheetSpec(MENU, config.MENU_CSV_URL, MENU_HEADERS),
        SheetSpec(PROMOTIONS, config.PROMOTIONS_CSV_URL, PROMOTION_HEADERS),
        SheetSpec(
            DELIVERY_FEES,
            config.DELIVERY_FEES_CSV_URL,
            DELIVERY_FEE_HEADERS,
            id_field="neighborhood",
            name_field="neighborhood",
        ),
        SheetSpec(
            BURGER_INGREDIENTS,
            config.BURGER_INGREDIENTS_CSV_URL,
            INGREDIENT_HEADERS,
            id_field="name",
        ),
        SheetSpec(
            CONTACT,
            config.CONTACT_CSV_URL,
            CONTACT_HEADERS,
            id_field="field",
            name_field="field",
        ),
    ]


def to_ingredient_options(records: Sequence[Record]) -> List[IngredientOption]:
    return [IngredientOption(name=r["name"], price=r.get("price", 0.0)) for r in records]


def inject_ingredients(menu: List[Record], ingredients: Sequence[IngredientOption]) -> int:
    """Attach the ingredient list to every buildable burger on the menu.

    Matching is a case-insensitive substring test on the item name, so zero
    or several items may match. Returns how many items were enriched.
    """
    options = [option.to_dict() for option in ingredients]
    matched = 0
    for item in menu:
        if BUILDABLE_BURGER_MARKER in str(item.get("name", "")).casefold():
            item["ingredients"] = list(options)
            matched += 1
    return matched


def load_catalog(
    session: requests.Session,
    sheets: Optional[Sequence[SheetSpec]] = None,
    timeout: float = config.SHEET_FETCH_TIMEOUT,
) -> Dict[str, object]:
    """Run one ingestion cycle and return the /api/menu payload.

    Raises SourceFetchError if any tab could not be fetched.
    """
    if sheets is None:
        sheets = default_sheets()

    active = [s for s in sheets if s.configured]
    for sheet in sheets:
        if not sheet.configured:
            logger.info(f"Sheet '{sheet.key}' has no URL configured, serving it empty")

    texts = fetch_all(active, session, timeout)

    payload: Dict[str, object] = {"contract": CONTRACT_VERSION}
    for sheet in sheets:
        payload[sheet.key] = build_records(texts[sheet.key], sheet) if sheet.key in texts else []

    ingredients = to_ingredient_options(payload.get(BURGER_INGREDIENTS, []))
    payload[BURGER_INGREDIENTS] = [option.to_dict() for option in ingredients]

    matched = inject_ingredients(payload.get(MENU, []), ingredients)
    logger.info(f"Attached {len(ingredients)} ingredient(s) to {matched} menu item(s)")
    return payload
