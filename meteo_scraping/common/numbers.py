"""Decimal normalisation for temperatures."""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation

_NUMBER_RE = re.compile(r"[-+−]?\d+(?:[.,]\d+)?")


def parse_decimal(raw: str | None) -> Decimal | None:
    """Return the first number found in ``raw``, accepting ``,`` or ``.`` as separator."""
    if raw is None:
        return None
    match = _NUMBER_RE.search(raw)
    if not match:
        return None
    text = match.group(0).replace("−", "-").replace(",", ".")
    try:
        return Decimal(text)
    except InvalidOperation:
        return None


def format_decimal(value: Decimal, separator: str = ".") -> str:
    text = format(value, "f")
    if separator != ".":
        text = text.replace(".", separator)
    return text
