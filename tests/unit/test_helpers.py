"""
Тесты для вспомогательных функций
"""
from datetime import datetime
from decimal import Decimal

import pytest

from shoe_repair.utils.helpers import (
    BERLIN_TZ,
    escape_html,
    format_datetime,
    format_order_number,
    format_quantity,
    get_customer_display_name,
    get_now,
    strip_html,
)


class TestDates:
    def test_now_is_berlin_time(self):
        now = get_now()
        assert now.tzinfo is BERLIN_TZ

    def test_format_datetime(self):
        dt = datetime(2025, 12, 24, 14, 30, tzinfo=BERLIN_TZ)
        assert format_datetime(dt) == "24.12.2025 14:30"

    def test_format_none(self):
        assert format_datetime(None) == "-"


class TestFormatting:
    @pytest.mark.parametrize(
        ("order_id", "expected"), [(1, "#000001"), (42, "#000042"), (1234567, "#1234567")]
    )
    def test_order_number(self, order_id, expected):
        assert format_order_number(order_id) == expected

    @pytest.mark.parametrize(
        ("quantity", "expected"),
        [(Decimal("0.5"), "0,5"), (Decimal("1.0"), "1"), ("2.5", "2,5"), (10, "10"), (1.5, "1,5")],
    )
    def test_quantity(self, quantity, expected):
        assert format_quantity(quantity) == expected

    def test_escape_html(self):
        assert escape_html("<b>&</b>") == "&lt;b&gt;&amp;&lt;/b&gt;"
        assert escape_html(None) == ""

    def test_display_name(self):
        assert get_customer_display_name("Max", "Mustermann") == "Max Mustermann"
        assert get_customer_display_name(None, "Mustermann", "Herr") == "Herr Mustermann"
        assert get_customer_display_name() == "Unbekannt"
        assert get_customer_display_name("", "", default="lena@example.com") == "lena@example.com"


class TestStripHtml:
    def test_tags_removed(self):
        html = "<h2>Titel</h2><p>Guten Tag <b>Lena</b>,<br>alles &amp; gut</p>"
        assert strip_html(html) == "Titel\nGuten Tag Lena,\nalles & gut"

    def test_style_removed(self):
        assert strip_html("<style>p { color: red; }</style><p>Text</p>") == "Text"

    def test_blank_lines_collapsed(self):
        assert strip_html("<p>A</p>\n\n\n\n<p>B</p>") == "A\n\nB"
