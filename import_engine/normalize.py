"""
import_engine.normalize - Best-effort cell normalisation.

None of these helpers raise: anything they cannot interpret degrades
to an empty string.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Any

from openpyxl.utils.datetime import from_excel

# Tried in order after ISO-8601
DATE_FORMATS = (
    "%d/%m/%Y",
    "%d/%m/%y",
    "%d-%m-%Y",
    "%d.%m.%Y",
    "%Y/%m/%d",
    "%d/%m/%Y %H:%M",
    "%d/%m/%Y %H:%M:%S",
)

# Excel serials beyond 9999-12-31 are not dates
_MAX_SERIAL = 2958465


def _iso_day(value: datetime) -> str:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.date().isoformat()


def normalize_date(value: Any) -> str:
    """
    Return *value* as 'YYYY-MM-DD', or '' when it is not a date.

    Accepts native datetime/date objects, Excel serial numbers and
    strings (ISO-8601 or day-first French notations).
    """
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, datetime):
        return _iso_day(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (int, float)):
        if not 0 < value <= _MAX_SERIAL:
            return ""
        try:
            converted = from_excel(value)
        except (ValueError, OverflowError, TypeError):
            return ""
        if isinstance(converted, datetime):
            return _iso_day(converted)
        if isinstance(converted, date):
            return converted.isoformat()
        return ""

    text = str(value).strip()
    if not text:
        return ""
    try:
        return _iso_day(datetime.fromisoformat(text))
    except ValueError:
        pass
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date().isoformat()
        except ValueError:
            continue
    return ""


def cell_text(value: Any) -> str:
    """Render a raw cell as text without reformatting it."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (datetime, date)):
        return normalize_date(value)
    if isinstance(value, time):
        return value.isoformat()
    return str(value)
