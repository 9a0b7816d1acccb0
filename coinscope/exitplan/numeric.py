"""Parse-with-fallback for user-typed numeric fields"""

import math
import re
from typing import Any

# ASCII decimal or exponent notation only
DECIMAL_PATTERN = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def parse_numeric(raw: Any, fallback: float = 0.0) -> float:
    """
    Coerce user input to a finite float.

    Blank text reads as 0; anything unparseable or non-finite reads as the
    fallback. Never raises.
    """
    if raw is None or isinstance(raw, bool):
        return fallback
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = str(raw).strip()
        if not text:
            return 0.0
        if not DECIMAL_PATTERN.fullmatch(text):
            return fallback
        value = float(text)

    return value if math.isfinite(value) else fallback


def format_entry_price(price: float) -> str:
    """Entry text for a market price: 6 decimals below 1, else 2."""
    return f"{price:.6f}" if price < 1 else f"{price:.2f}"


def looks_default_entry(raw: str) -> bool:
    """True while the entry field still holds a placeholder value."""
    text = str(raw if raw is not None else "").strip()
    return text in ("", "0", "1") or parse_numeric(text) == 0
