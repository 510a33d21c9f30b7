"""Conversions between human-readable ether amounts and integer wei."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

ETHER_DECIMALS = 18


def parse_units(amount: str | int, decimals: int = ETHER_DECIMALS) -> int:
    """Convert a decimal string such as ``"0.025"`` to integer base units.

    Raises
    ------
    ValueError
        If *amount* is not a number, is negative, or has more fractional
        digits than *decimals* allows.

    Examples
    --------
    >>> parse_units("100")
    100000000000000000000
    >>> parse_units("0.025")
    25000000000000000
    """
    try:
        value = Decimal(str(amount).strip())
    except InvalidOperation as exc:
        raise ValueError(f"Invalid amount: {amount!r}") from exc

    if not value.is_finite() or value < 0:
        raise ValueError(f"Invalid amount: {amount!r}")

    scaled = value.scaleb(decimals)
    if scaled != scaled.to_integral_value():
        raise ValueError(
            f"Amount {amount!r} has more than {decimals} decimal places"
        )
    return int(scaled)


def format_units(value: int, decimals: int = ETHER_DECIMALS) -> str:
    """Render integer base units as a trimmed decimal string.

    >>> format_units(25000000000000000)
    '0.025'
    >>> format_units(100000000000000000000)
    '100'
    """
    text = format(Decimal(value).scaleb(-decimals), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
