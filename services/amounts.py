"""
services.amounts - Monetary strings → numbers.

Amounts are stored exactly as typed in the workbook ("1 234,56 €");
anything that needs arithmetic re-parses them here.
"""

from __future__ import annotations

import math
import re
from typing import Any

_WHITESPACE = re.compile(r"\s+")      # includes NBSP / narrow NBSP
_LEADING_NUMBER = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def parse_amount(value: Any) -> float:
    """
    '1 234,56 €' → 1234.56.  Empty, None or unparseable → 0.0.

    Whitespace is removed, the first comma becomes the decimal point and
    the euro sign is dropped; the leading number is then read.
    """
    if value is None or value == "" or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else 0.0

    text = _WHITESPACE.sub("", str(value)).replace(",", ".", 1).replace("€", "", 1)
    m = _LEADING_NUMBER.match(text)
    if not m:
        return 0.0
    amount = float(m.group(0))
    return amount if math.isfinite(amount) else 0.0


def format_currency(value: Any) -> str:
    """French euro display, at most two decimals: 1234.5 → '1 234,5 €', 1500 → '1 500 €'."""
    amount = round(parse_amount(value), 2)
    text = f"{abs(amount):,.2f}".rstrip("0").rstrip(".")
    text = text.replace(",", " ").replace(".", ",")
    sign = "-" if amount < 0 else ""
    return f"{sign}{text} €"
