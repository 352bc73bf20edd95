# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for rate_parser."""

from datetime import date
from decimal import Decimal

import pytest

from src.services.exceptions import ParseError
from src.services.rate_parser import (
    RateRecord,
    parse_daily_rates,
    parse_decimal,
    parse_feed_date,
)


def _feed(body: str, root_attrs: str = 'Date="02.03.2024"') -> str:
    declaration = '<?xml version="1.0" encoding="windows-1251"?>'
    return f"{declaration}<ValCurs {root_attrs}>{body}</ValCurs>"


class TestParseDecimal:
    """Tests for the numeric normalizer."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("75,5000", Decimal("75.5")),
            ("75.5000", Decimal("75.5")),
            ("1", Decimal("1")),
            (" 90,0000 ", Decimal("90")),
            ("1 234,56", Decimal("1234.56")),
        ],
    )
    def test_accepts_both_separators(self, raw, expected):
        """Comma-decimal and dot-decimal numbers normalize to the same Decimal."""
        assert parse_decimal(raw) == expected

    @pytest.mark.parametrize(
        "raw", ["", "abc", "1,2.3", "1.234,56", "75,", "NaN", "Infinity", None]
    )
    def test_rejects_invalid_numbers(self, raw):
        """Anything outside the two conventions is a ParseError."""
        with pytest.raises(ParseError):
            parse_decimal(raw)


class TestParseFeedDate:
    """Tests for the root date attribute."""

    def test_parses_day_month_year(self):
        assert parse_feed_date("02.03.2024") == date(2024, 3, 2)

    @pytest.mark.parametrize("raw", [None, "", "2024-03-02", "2.3.2024", "31.02.2024"])
    def test_rejects_bad_dates(self, raw):
        with pytest.raises(ParseError):
            parse_feed_date(raw)


class TestParseDailyRates:
    """Tests for parse_daily_rates."""

    def test_parses_two_entries(self, feed_xml):
        """Both entries parse regardless of which separator each field uses."""
        rates = parse_daily_rates(feed_xml)

        assert len(rates) == 2
        usd, eur = rates
        assert usd == RateRecord(
            id="R01235",
            num_code=840,
            char_code="USD",
            nominal=1,
            name="Доллар США",
            value=Decimal("75.5000"),
            vunit_rate=Decimal("75.5000"),
            date=date(2024, 3, 2),
        )
        assert usd.value == Decimal("75.5")
        assert eur.id == "R01239"
        assert eur.value == Decimal("90.0")
        assert eur.vunit_rate == Decimal("90.0")
        assert eur.date == date(2024, 3, 2)

    def test_keeps_feed_order(self):
        body = "".join(
            f'<Valute ID="R{i}"><NumCode>{i}</NumCode><Value>1,0</Value></Valute>'
            for i in (3, 1, 2)
        )
        rates = parse_daily_rates(_feed(body))
        assert [r.id for r in rates] == ["R3", "R1", "R2"]

    def test_empty_root_yields_no_records(self):
        assert parse_daily_rates(_feed("")) == []

    def test_optional_fields_default(self):
        """Missing CharCode/Name are None, Nominal defaults to 1, NumCode to 0."""
        rates = parse_daily_rates(_feed('<Valute ID="R1"><Value>5,5</Value></Valute>'))

        assert rates[0].char_code is None
        assert rates[0].name is None
        assert rates[0].nominal == 1
        assert rates[0].num_code == 0

    def test_missing_unit_rate_falls_back_to_value_per_unit(self):
        body = (
            '<Valute ID="R01375"><NumCode>156</NumCode><CharCode>CNY</CharCode>'
            "<Nominal>10</Nominal><Value>125,0000</Value></Valute>"
        )
        rates = parse_daily_rates(_feed(body))
        assert rates[0].vunit_rate == Decimal("12.5")

    def test_unit_rate_is_taken_from_feed_when_present(self):
        body = (
            '<Valute ID="R01375"><Nominal>10</Nominal>'
            "<Value>125,0000</Value><VunitRate>12,4999</VunitRate></Valute>"
        )
        rates = parse_daily_rates(_feed(body))
        assert rates[0].vunit_rate == Decimal("12.4999")

    def test_accepts_text_without_declaration(self):
        rates = parse_daily_rates(
            '<ValCurs Date="01.01.2024">'
            '<Valute ID="R1"><Value>1</Value></Valute></ValCurs>'
        )
        assert rates[0].date == date(2024, 1, 1)

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "not xml at all",
            '<Rates Date="02.03.2024"></Rates>',
        ],
    )
    def test_missing_root_raises(self, text):
        with pytest.raises(ParseError):
            parse_daily_rates(text)

    def test_missing_id_raises(self):
        with pytest.raises(ParseError, match="ID"):
            parse_daily_rates(_feed("<Valute><Value>1,0</Value></Valute>"))

    def test_unparseable_value_raises(self):
        with pytest.raises(ParseError):
            parse_daily_rates(_feed('<Valute ID="R1"><Value>n/a</Value></Valute>'))

    def test_unparseable_nominal_raises(self):
        body = '<Valute ID="R1"><Nominal>ten</Nominal><Value>1,0</Value></Valute>'
        with pytest.raises(ParseError):
            parse_daily_rates(_feed(body))

    def test_missing_value_raises(self):
        with pytest.raises(ParseError):
            parse_daily_rates(_feed('<Valute ID="R1"><NumCode>1</NumCode></Valute>'))

    def test_missing_root_date_raises(self):
        with pytest.raises(ParseError):
            parse_daily_rates(_feed("", root_attrs='name="Foreign Currency Market"'))

    def test_malformed_root_date_raises(self):
        with pytest.raises(ParseError):
            parse_daily_rates(_feed("", root_attrs='Date="2024/03/02"'))

    def test_entity_declarations_are_rejected(self):
        document = (
            '<!DOCTYPE ValCurs [<!ENTITY usd "R01235">]>'
            '<ValCurs Date="02.03.2024"><Valute ID="&usd;">'
            "<Value>1</Value></Valute></ValCurs>"
        )
        with pytest.raises(ParseError, match="Forbidden"):
            parse_daily_rates(document)
