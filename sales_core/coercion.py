"""Lenient cell coercion.

Spreadsheet cells arrive as whatever the reader produced: python numbers,
strings formatted in Brazilian locale ("R$ 1.234,56"), datetimes, or empty
values.  Every helper here returns a usable value and never raises; garbage
coerces to ``0`` (numbers) or ``None`` (dates).
"""

from __future__ import annotations

import math
import re
import warnings
from datetime import date, datetime
from typing import Optional

import numpy as np
import pandas as pd
from openpyxl.utils.datetime import from_excel

_CURRENCY_MARKER = re.compile(r"R\$\s?")
_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")


def is_number(value: object) -> bool:
    if isinstance(value, (bool, np.bool_)):
        return False
    return isinstance(value, (int, float, np.integer, np.floating))


def is_missing(value: object) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def is_blank(value: object) -> bool:
    """True for None/NaN and strings that are empty after trimming."""
    if is_missing(value):
        return True
    return isinstance(value, str) and not value.strip()


def to_text(value: object) -> str:
    if isinstance(value, (bool, np.bool_)):
        return "true" if value else "false"
    if is_number(value):
        num = float(value)
        if math.isfinite(num) and num.is_integer():
            return str(int(num))
        return str(value)
    return str(value)


def cell_label(value: object, default: str, *, strip: bool = True) -> str:
    """Stringify a dimension cell; empty or falsy cells fall back to ``default``."""
    if is_missing(value) or value is False or (isinstance(value, str) and value == ""):
        return default
    if is_number(value) and value == 0:
        return default
    text = to_text(value)
    return text.strip() if strip else text


def parse_currency(value: object) -> float:
    if is_number(value):
        if is_missing(value):
            return 0.0
        return float(value)
    if isinstance(value, str):
        cleaned = _CURRENCY_MARKER.sub("", value)
        comma = cleaned.find(",")
        if comma != -1:
            # dots before the decimal comma are thousands separators
            cleaned = cleaned[:comma].replace(".", "") + cleaned[comma:]
        cleaned = cleaned.replace(",", ".")
        match = _FLOAT_PREFIX.match(cleaned)
        if not match:
            return 0.0
        return float(match.group(1))
    return 0.0


def parse_integer(value: object) -> int:
    if is_number(value):
        num = float(value)
        if not math.isfinite(num):
            return 0
        return math.floor(num)
    if isinstance(value, str):
        match = _INT_PREFIX.match(value)
        return int(match.group(1)) if match else 0
    return 0


def parse_calendar_date(value: object) -> Optional[pd.Timestamp]:
    if is_missing(value):
        return None
    if is_number(value):
        if value <= 0:
            return None
        try:
            return pd.Timestamp(from_excel(float(value)))
        except (ValueError, OverflowError, TypeError):
            return None
    if isinstance(value, str):
        if not value.strip():
            return None
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            try:
                parsed = pd.to_datetime(value, errors="coerce")
            except (ValueError, TypeError, OverflowError):
                return None
        return None if is_missing(parsed) else pd.Timestamp(parsed)
    if isinstance(value, (datetime, date)):
        try:
            return pd.Timestamp(value)
        except (ValueError, OverflowError):
            return None
    return None
