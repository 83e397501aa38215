"""Jinja2 filters available in every document template."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any


def number_format(
    value: Any,
    decimals: int = 2,
    dec_point: str = ".",
    thousands_sep: str = " ",
) -> str:
    """Format a number with grouped thousands.

    Rounds half up, the way amounts are printed on invoices and receipts.
    Values that are not numeric are returned unchanged as strings.

    Args:
        value: Number or numeric string
        decimals: Digits after the decimal point
        dec_point: Decimal separator
        thousands_sep: Thousands separator

    Returns:
        Formatted number

    Examples:
        >>> number_format(1234567.891)
        '1 234 567.89'
        >>> number_format("12.5", 0)
        '13'
    """
    if value is None or value == "":
        return ""

    try:
        number = Decimal(str(value))
    except InvalidOperation:
        return str(value)

    # NaN and infinity cannot be quantized
    if not number.is_finite():
        return str(value)

    quantum = Decimal(1).scaleb(-decimals) if decimals > 0 else Decimal(1)
    rounded = number.quantize(quantum, rounding=ROUND_HALF_UP)

    sign = "-" if rounded < 0 else ""
    integer_part, _, fraction_part = f"{abs(rounded):f}".partition(".")

    groups = []
    while len(integer_part) > 3:
        groups.insert(0, integer_part[-3:])
        integer_part = integer_part[:-3]
    groups.insert(0, integer_part)

    result = sign + thousands_sep.join(groups)
    if decimals > 0:
        result += dec_point + fraction_part
    return result
