"""
Numeric Helpers

Float primitives shared by the state cell and the protocol layer:

- parse_float(): strict operand parsing
- ieee_pow(): IEEE-754 pow that never raises
- format_number(): positional rendering used on the wire

Python's own float operators diverge from IEEE-754 in a few places
(``0.0 ** -1`` raises, ``(-8.0) ** 0.5`` is complex, ``math.pow`` raises
on domain errors and overflow). These helpers map every such case to the
value a C/IEEE ``pow`` returns, so NaN and infinities propagate instead
of exceptions.
"""

import math
from decimal import Decimal


def parse_float(token: str) -> float:
    """
    Parse a protocol operand into a float.

    Accepts decimal and exponent notation with an optional sign, plus
    ``inf``, ``infinity`` and ``nan`` in any case.

    Raises:
        ValueError: If the token is not a number. Non-ASCII digits
            ("١٢", "１"), digit-group underscores ("1_000") and embedded
            separator characters are rejected even though float()
            accepts them.

    Examples:
        >>> parse_float("1.23")
        1.23
        >>> parse_float("-2e3")
        -2000.0
    """
    if not token.isascii() or "_" in token or token != token.strip():
        raise ValueError(f"could not convert string to float: {token!r}")
    return float(token)


def _is_odd_integer(value: float) -> bool:
    return math.isfinite(value) and value.is_integer() and value % 2 == 1


def ieee_pow(base: float, exponent: float) -> float:
    """
    Raise base to exponent with IEEE-754 semantics.

    Examples:
        >>> ieee_pow(5.0, 2.0)
        25.0
        >>> ieee_pow(-8.0, 0.5)
        nan
        >>> ieee_pow(0.0, -1.0)
        inf
        >>> ieee_pow(-0.0, -3.0)
        -inf
    """
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and _is_odd_integer(exponent):
            return -math.inf
        return math.inf
    except ValueError:
        # Pole error: zero raised to a negative power
        if base == 0.0:
            if _is_odd_integer(exponent):
                return math.copysign(math.inf, base)
            return math.inf
        # Domain error: negative base, non-integer exponent
        return math.nan


def format_number(value: float) -> str:
    """
    Render a float the way responses print it.

    Shortest round-trip digits in positional notation (never exponent
    notation), integral values without a fractional part.

    Examples:
        >>> format_number(5.0)
        '5'
        >>> format_number(0.1)
        '0.1'
        >>> format_number(1e-7)
        '0.0000001'
        >>> format_number(float("nan"))
        'NaN'
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"

    text = format(Decimal(repr(value)), "f")
    if text.endswith(".0"):
        text = text[:-2]
    return text
