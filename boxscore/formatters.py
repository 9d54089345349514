# /// script
# requires-python = ">=3.12"
# dependencies = []
# ///
"""Display formatting for rate statistics.

Conventions:
- ``None`` is the "no data" sentinel (no at-bats, no innings pitched) and
  renders as a fixed placeholder, never as ``0.000``.
- Rounding is half-up at the last displayed digit, applied to the shortest
  decimal representation of the value so binary float noise cannot flip
  a digit (``0.1235`` -> ``.124``).
- Each formatter accepts its own output as input and returns it unchanged.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

NO_AVERAGE = ".---"
NO_ERA = "-.--"

_PLACEHOLDERS = {NO_AVERAGE, NO_ERA, "", "-", "--", "---"}


def _to_decimal(value: float | int | str | None) -> Decimal | None:
    """Normalise a rate value (or a previously formatted string) to Decimal."""
    if value is None:
        return None
    if isinstance(value, str):
        text = value.strip().rstrip("%")
        if text in _PLACEHOLDERS:
            return None
        try:
            result = Decimal(text)
        except InvalidOperation:
            raise ValueError(f"Not a rate statistic: {value!r}") from None
    else:
        # repr() gives the shortest string that round-trips the float.
        result = Decimal(repr(float(value)))
    if not result.is_finite():
        return None
    return result


def _round_half_up(value: Decimal, places: int) -> Decimal:
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def format_average(value: float | str | None) -> str:
    """Format a batting average: ``.333``, ``1.000``, ``.---`` for no at-bats."""
    d = _to_decimal(value)
    if d is None:
        return NO_AVERAGE
    text = f"{_round_half_up(d, 3):.3f}"
    if text.startswith("0."):
        return text[1:]
    return text


def format_era(value: float | str | None) -> str:
    """Format an ERA with two decimals: ``13.50``, ``-.--`` for no innings."""
    d = _to_decimal(value)
    if d is None:
        return NO_ERA
    return f"{_round_half_up(d, 2):.2f}"


def format_percentage(value: float | str | None) -> str:
    """Format a 0-1 ratio as a percentage with one decimal, e.g. ``33.3%``."""
    d = _to_decimal(value)
    if d is None:
        return "-"
    if not (isinstance(value, str) and value.strip().endswith("%")):
        d = d * 100
    return f"{_round_half_up(d, 1):.1f}%"
