import math
from typing import Optional


def parse_number(value: str) -> Optional[float]:
    """Strict, locale-free decimal parse. Returns None for anything that is not a finite number.

    Non-ASCII digits, surrounding whitespace, digit-group underscores and inf/nan
    spellings are rejected.
    """
    if not value or not value.isascii() or value != value.strip() or "_" in value:
        return None
    try:
        num = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(num):
        return None
    return num


def coerce_number(value: str) -> float:
    num = parse_number(value)
    return 0.0 if num is None else num
