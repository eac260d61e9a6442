"""
Tests for pizzeria/records.py

Covers:
  - Money cells: decimal comma, R$ prefix, garbage → 0
  - Flag cells: SIM-prefixed answers only
  - limit → unbounded (None) on garbage, max_quantity floored at 1
  - Coercion fallbacks logged at DEBUG with the field name
  - Notification dates normalized to ISO-8601
  - Rows of the wrong width dropped with a warning naming the sheet row
  - A stray quote costs one row, not the rest of the sheet
  - Records without id or name dropped, order preserved
"""

import logging

import pytest

from pizzeria.headers import DELIVERY_FEE_HEADERS, MENU_HEADERS
from pizzeria.models import UNLIMITED, SheetSpec
from pizzeria.records import (
    build_records,
    coerce,
    to_flag,
    to_limit,
    to_max_quantity,
    to_money,
    to_timestamp,
)

MENU = SheetSpec("cardapio", "https://sheet/menu", MENU_HEADERS)


# ═══════════════════════════════════════════════════════════════════════════
# Cell coercion
# ═══════════════════════════════════════════════════════════════════════════

class TestMoney:

    @pytest.mark.parametrize("cell, expected", [
        ("12,50", 12.5),
        ("12.50", 12.5),
        ("R$ 8,00", 8.0),
        (" 40 ", 40.0),
    ])
    def test_parses(self, cell, expected):
        assert to_money(cell) == expected

    @pytest.mark.parametrize("cell", ["abc", "", "nan", "inf", "1.234,56"])
    def test_garbage_is_zero(self, cell):
        assert to_money(cell) == 0


class TestFlags:

    @pytest.mark.parametrize("cell", ["sim", "SIM", "Sim ", " Sim, sempre"])
    def test_true(self, cell):
        assert to_flag(cell) is True

    @pytest.mark.parametrize("cell", ["não", "", "no", "NAO", "s"])
    def test_false(self, cell):
        assert to_flag(cell) is False


class TestQuantities:

    def test_limit_parses_integer(self):
        assert to_limit("3") == 3

    def test_limit_garbage_is_unbounded(self):
        assert to_limit("abc") is UNLIMITED
        assert to_limit("") is UNLIMITED

    def test_max_quantity_zero_becomes_one(self):
        assert to_max_quantity("0") == 1

    def test_max_quantity_negative_becomes_one(self):
        assert to_max_quantity("-4") == 1

    def test_max_quantity_garbage_becomes_one(self):
        assert to_max_quantity("muitos") == 1

    def test_max_quantity_kept(self):
        assert to_max_quantity("5") == 5


class TestFallbackLogging:

    def test_money_and_limit_fallbacks_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="pizzeria"):
            to_money("abc")
            to_limit("abc")
        assert len(caplog.records) == 2
        assert all(r.levelno == logging.DEBUG for r in caplog.records)
        assert "price" in caplog.records[0].getMessage()
        assert "limit" in caplog.records[1].getMessage()

    def test_max_quantity_floor_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="pizzeria"):
            to_max_quantity("0")
        assert "max_quantity 0 below 1" in caplog.text

    def test_coerce_names_the_field(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="pizzeria"):
            coerce("delivery_fee", "grátis")
        assert "delivery_fee" in caplog.text
        assert "grátis" in caplog.text

    def test_clean_values_not_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="pizzeria"):
            to_money("12,50")
            to_limit("3")
            to_max_quantity("2")
        assert caplog.records == []


class TestDates:

    def test_brazilian_date_time(self):
        assert to_timestamp("25/12/2024 18:30:00") == "2024-12-25T18:30:00"

    def test_brazilian_date(self):
        assert to_timestamp("01/02/2025") == "2025-02-01T00:00:00"

    def test_unknown_format_passes_through(self):
        assert to_timestamp(" ontem ") == "ontem"


class TestCoerceDispatch:

    def test_by_field_name(self):
        assert coerce("delivery_fee", "5,5") == 5.5
        assert coerce("is_pizza", "SIM") is True
        assert coerce("limit", "x") is UNLIMITED
        assert coerce("max_quantity", "0") == 1
        assert coerce("description", "  Molho  ") == "Molho"


# ═══════════════════════════════════════════════════════════════════════════
# Record assembly
# ═══════════════════════════════════════════════════════════════════════════

MENU_CSV = (
    "ID,Nome do Item,Categoria,Preço,Disponível,Limite,Quantidade Máxima\n"
    "1,Pizza Margherita,Pizzas,\"39,90\",SIM,2,3\n"
    "2,Pizza Calabresa,Pizzas,abc,não,abc,0\n"
)


class TestBuildRecords:

    def test_stable_names_and_types(self):
        records = build_records(MENU_CSV, MENU)
        assert records[0] == {
            "id": "1",
            "name": "Pizza Margherita",
            "category": "Pizzas",
            "price": 39.9,
            "available": True,
            "limit": 2,
            "max_quantity": 3,
        }

    def test_defaults_on_bad_cells(self):
        second = build_records(MENU_CSV, MENU)[1]
        assert second["price"] == 0
        assert second["available"] is False
        assert second["limit"] is UNLIMITED
        assert second["max_quantity"] == 1

    def test_at_most_one_record_per_row(self):
        assert len(build_records(MENU_CSV, MENU)) <= 2

    def test_row_of_wrong_width_dropped_with_warning(self, caplog):
        csv_text = "ID,Nome do Item,Preço\n1,Mussarela,30\n2,Portuguesa\n3,Quatro Queijos,45\n"
        with caplog.at_level(logging.WARNING, logger="pizzeria.records"):
            records = build_records(csv_text, MENU)
        assert [r["id"] for r in records] == ["1", "3"]
        assert "row 3" in caplog.text
        assert "expected 3 fields, got 2" in caplog.text

    def test_warning_counts_blank_sheet_rows(self, caplog):
        csv_text = "ID,Nome do Item,Preço\n\n1,Mussarela,30\n2,Portuguesa\n"
        with caplog.at_level(logging.WARNING, logger="pizzeria.records"):
            build_records(csv_text, MENU)
        assert "row 4" in caplog.text

    def test_stray_quote_drops_only_its_row(self):
        csv_text = (
            "ID,Nome do Item,Preço\n"
            "1,Mussarela,30\n"
            "2,\"Calabresa,35\n"
            "3,Portuguesa,40\n"
            "4,Quatro Queijos,45\n"
        )
        assert [r["id"] for r in build_records(csv_text, MENU)] == ["1", "3", "4"]

    def test_missing_id_or_name_dropped(self):
        csv_text = "ID,Nome do Item\n,Sem ID\n9,\n10,Napolitana\n"
        assert build_records(csv_text, MENU) == [{"id": "10", "name": "Napolitana"}]

    def test_order_preserved(self):
        csv_text = "ID,Nome do Item\n3,C\n1,A\n2,B\n"
        assert [r["id"] for r in build_records(csv_text, MENU)] == ["3", "1", "2"]

    def test_header_only_sheet(self):
        assert build_records("ID,Nome do Item\n", MENU) == []

    def test_empty_sheet(self):
        assert build_records("", MENU) == []

    def test_sheet_keyed_by_name(self):
        fees = SheetSpec(
            "deliveryFees", "https://sheet/fees", DELIVERY_FEE_HEADERS,
            id_field="neighborhood", name_field="neighborhood",
        )
        records = build_records("Bairro,Taxa de Entrega\nCentro,\"5,00\"\n,3\n", fees)
        assert records == [{"neighborhood": "Centro", "delivery_fee": 5.0}]
