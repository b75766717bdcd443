"""Parse human-readable magnitude strings such as ``"120K Tweets"``."""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional

_VOLUME_PATTERN = re.compile(
    r"(?P<sign>-?)(?P<number>\d[\d,]*(?:\.\d+)?|\.\d+)"
    r"(?:\s*(?P<unit>[KM])(?![a-z]))?",
    re.IGNORECASE,
)

_UNIT_MULTIPLIERS = {
    "": Decimal(1),
    "K": Decimal(1_000),
    "M": Decimal(1_000_000),
}


def parse_volume(text: Optional[str]) -> int:
    """Convert a magnitude string into an integer count.

    The first number in *text* is scaled by its optional unit letter
    (``K`` = thousand, ``M`` = million, case-insensitive) and then rounded
    half-up, so fractional values are scaled before rounding::

        parse_volume("120K Tweets")  # 120000
        parse_volume("2.3M Tweets")  # 2300000
        parse_volume("950")          # 950
        parse_volume("950 mentions") # 950, the "m" starts a word

    Args:
        text: Arbitrary text, e.g. the volume cell of a trends table.

    Returns:
        The parsed count, or ``0`` when no non-negative number is found.
        ``0`` means "no volume data" and is never an error.
    """
    if not text:
        return 0

    match = _VOLUME_PATTERN.search(text)
    if match is None or match.group("sign"):
        return 0

    try:
        value = Decimal(match.group("number").replace(",", ""))
    except InvalidOperation:
        return 0

    unit = (match.group("unit") or "").upper()
    scaled = value * _UNIT_MULTIPLIERS[unit]
    return int(scaled.quantize(Decimal(1), rounding=ROUND_HALF_UP))
