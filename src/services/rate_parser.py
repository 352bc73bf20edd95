# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Parser for the central bank daily rates XML document."""

import datetime
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from defusedxml import DefusedXmlException
from defusedxml import ElementTree as SafeET

from src.services.exceptions import ParseError

ROOT_TAG = "ValCurs"
ENTRY_TAG = "Valute"

_COMMA_DECIMAL = re.compile(r"^[+-]?\d+(,\d+)?$")
_DOT_DECIMAL = re.compile(r"^[+-]?\d+(\.\d+)?$")
_FEED_DATE = re.compile(r"^\d{2}\.\d{2}\.\d{4}$")
_XML_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>")


@dataclass(frozen=True)
class RateRecord:
    """One currency's quote as published by the feed."""

    id: str
    num_code: int
    char_code: str | None
    nominal: int
    name: str | None
    value: Decimal
    vunit_rate: Decimal
    date: datetime.date


def parse_decimal(raw: str | None) -> Decimal:
    """Parse a feed number written with either a comma or a dot separator.

    "75,5000" and "75.5000" both give Decimal("75.5000"). Whitespace,
    including non-breaking spaces used as digit grouping, is ignored.

    Raises:
        ParseError: If the text matches neither convention.
    """
    if raw is None:
        raise ParseError("Missing numeric value")

    text = "".join(raw.split())
    if _COMMA_DECIMAL.match(text):
        text = text.replace(",", ".")
    elif not _DOT_DECIMAL.match(text):
        raise ParseError(f"Invalid numeric value: {raw!r}")

    try:
        return Decimal(text)
    except InvalidOperation as e:
        raise ParseError(f"Invalid numeric value: {raw!r}") from e


def parse_feed_date(raw: str | None) -> datetime.date:
    """Parse the root Date attribute (dd.mm.yyyy)."""
    if raw is None:
        raise ParseError("Root element has no Date attribute")
    if not _FEED_DATE.match(raw.strip()):
        raise ParseError(f"Invalid feed date: {raw!r}")
    try:
        return datetime.datetime.strptime(raw.strip(), "%d.%m.%Y").date()
    except ValueError as e:
        raise ParseError(f"Invalid feed date: {raw!r}") from e


def _child_text(element: ET.Element, tag: str) -> str | None:
    child = element.find(tag)
    if child is None or child.text is None:
        return None
    return child.text.strip()


def _parse_int(raw: str | None, field: str, default: int) -> int:
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ParseError(f"Invalid {field}: {raw!r}") from e


def _parse_entry(element: ET.Element, rate_date: datetime.date) -> RateRecord:
    rate_id = element.get("ID")
    if not rate_id:
        raise ParseError(f"{ENTRY_TAG} entry without ID attribute")

    nominal = _parse_int(_child_text(element, "Nominal"), "Nominal", default=1)
    if nominal <= 0:
        raise ParseError(f"Invalid Nominal for {rate_id}: {nominal}")

    value = parse_decimal(_child_text(element, "Value"))

    # Older documents carry no VunitRate; it is Value per single unit
    raw_unit_rate = _child_text(element, "VunitRate")
    if raw_unit_rate is None:
        vunit_rate = value / nominal
    else:
        vunit_rate = parse_decimal(raw_unit_rate)

    return RateRecord(
        id=rate_id,
        num_code=_parse_int(_child_text(element, "NumCode"), "NumCode", default=0),
        char_code=_child_text(element, "CharCode") or None,
        nominal=nominal,
        name=_child_text(element, "Name") or None,
        value=value,
        vunit_rate=vunit_rate,
        date=rate_date,
    )


def parse_daily_rates(text: str) -> list[RateRecord]:
    """Parse a daily rates document into records, keeping feed order.

    Args:
        text: Decoded XML document.

    Returns:
        List of RateRecord, one per currency entry.

    Raises:
        ParseError: If the root element, an entry ID, a number or the
            root date is missing or malformed.
    """
    # The declared encoding no longer applies once the body is decoded
    document = _XML_DECLARATION.sub("", text, count=1)
    try:
        root = SafeET.fromstring(document)
    except SafeET.ParseError as e:
        raise ParseError(f"Malformed XML: {e}") from e
    except DefusedXmlException as e:
        raise ParseError(f"Forbidden XML construct: {e}") from e

    if root.tag != ROOT_TAG:
        raise ParseError(f"XML does not contain {ROOT_TAG} root")

    rate_date = parse_feed_date(root.get("Date"))
    return [_parse_entry(element, rate_date) for element in root.findall(ENTRY_TAG)]
