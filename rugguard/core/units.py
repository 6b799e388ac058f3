"""Fixed-point token amount parsing.

Token amounts arrive as decimal strings in whole-token units and routinely
exceed 64 bits once scaled to 18 decimals. They are parsed straight into
Python ``int`` base units; floats never enter the picture.
"""

from __future__ import annotations

import re

_AMOUNT_RE = re.compile(r"^(?P<whole>\d*)(?:\.(?P<frac>\d*))?$", re.ASCII)


class InvalidAmountError(ValueError):
    """Raised when an amount string is not a non-negative decimal number."""

    def __init__(self, value: object, reason: str = "not a decimal number") -> None:
        self.value = value
        super().__init__(f"Invalid amount {value!r}: {reason}")


def parse_units(value: str | int | None, decimals: int = 18) -> int:
    """Convert a decimal token amount to integer base units.

    ``None`` and the empty string count as zero. ``"1.5"`` with 18 decimals
    becomes ``1_500_000_000_000_000_000``. Fractional digits beyond
    ``decimals`` must be zero.

    Raises:
        InvalidAmountError: the value is negative or not a decimal number.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        raise InvalidAmountError(value)
    if isinstance(value, int):
        if value < 0:
            raise InvalidAmountError(value, "negative")
        return value * 10**decimals

    text = value.strip()
    if not text:
        return 0

    match = _AMOUNT_RE.match(text)
    if match is None or not (match.group("whole") or match.group("frac")):
        raise InvalidAmountError(value)

    whole = match.group("whole") or "0"
    frac = match.group("frac") or ""
    if len(frac) > decimals:
        if frac[decimals:].strip("0"):
            raise InvalidAmountError(value, f"more than {decimals} decimals")
        frac = frac[:decimals]

    return int(whole) * 10**decimals + int(frac.ljust(decimals, "0") or "0")


def format_units(amount: int, decimals: int = 18) -> str:
    """Render integer base units as a decimal string without trailing zeros."""
    sign = "-" if amount < 0 else ""
    whole, frac = divmod(abs(amount), 10**decimals)
    if not frac:
        return f"{sign}{whole}"
    return f"{sign}{whole}.{str(frac).rjust(decimals, '0').rstrip('0')}"
