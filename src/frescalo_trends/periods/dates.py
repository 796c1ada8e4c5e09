"""Parsing of textual record dates into DateRange values."""

from __future__ import annotations

import math
from datetime import date, datetime

from frescalo_trends.config import DEFAULT_DATE_FORMAT
from frescalo_trends.errors import DataFormatError
from frescalo_trends.periods.models import DateRange


def _is_blank(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def parse_date(
    value: object,
    date_format: str = DEFAULT_DATE_FORMAT,
    *,
    field: str = "date",
) -> date | None:
    """Parse one textual date. Blank values mean an unknown bound (None).

    Raises:
        DataFormatError: If the value is present but does not match the format.
    """
    if _is_blank(value):
        return None
    text = str(value).strip()
    try:
        return datetime.strptime(text, date_format).date()
    except ValueError:
        msg = f"Unparseable {field} (expected format {date_format})"
        raise DataFormatError(msg, field=field, value=text) from None


def parse_date_range(
    start: object,
    end: object,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> DateRange:
    """Parse a start/end pair into a DateRange.

    Raises:
        DataFormatError: If either date is malformed or start is after end.
    """
    start_date = parse_date(start, date_format, field="start_date")
    end_date = parse_date(end, date_format, field="end_date")
    if start_date is not None and end_date is not None and start_date > end_date:
        msg = "start_date is after end_date"
        raise DataFormatError(msg, field="start_date", value=str(start).strip())
    return DateRange(start_date, end_date)
