"""Core value types for traits and expression results.

This module defines the typed values a script can carry in its traits
mapping, the inference rules turning unquoted trait text into those
values, and the canonical text rendering of expression results.
"""

from decimal import Decimal
from math import isinf, isnan
from re import IGNORECASE
from re import compile as regexp
from typing import Any

#: A trait value is a scalar, a list of trait values or (only through
#: the full JSON traits form) a nested mapping or null.
type TraitValue = str | int | float | bool | list['TraitValue'] | dict[str, 'TraitValue'] | None

#: Trait mapping accumulated across a whole script.
type Traits = dict[str, TraitValue]

#: Expression results rendered without conversion.
type ExpressionResult = str | bool | int | float

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

BOOLEAN_LITERALS = {
    'true': True,
    'false': False,
}

INTEGER_PATTERN = regexp(r'^[+-]?[0-9]+$')
FLOAT_PATTERN = regexp(
    r'^[+-]?(?:'
    r'(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:e[+-]?[0-9]+)?'
    r'|inf(?:inity)?|nan'
    r')$',
    flags=IGNORECASE,
)


def infer_type(value: str, quoted: bool = False) -> TraitValue:
    """Infer the typed value of trait text.

    Quoted text is always a string. Otherwise the exact literals `true`
    and `false` become booleans, base-10 text fitting a signed 64-bit
    integer becomes an integer, float text becomes a float and anything
    else (including the empty string) stays a string.

    Args:
        value: Decoded trait text.
        quoted: Whether the text was written inside quotes.

    Returns:
        The inferred value.
    """
    if quoted or not value:
        return value

    if value in BOOLEAN_LITERALS:
        return BOOLEAN_LITERALS[value]

    if INTEGER_PATTERN.match(value):
        number = int(value)
        if INT64_MIN <= number <= INT64_MAX:
            return number

    if FLOAT_PATTERN.match(value):
        return float(value)

    return value


def format_float(value: float) -> str:
    """Render a float in positional notation.

    Uses the shortest digits that round-trip, never an exponent, and
    drops trailing zeros and a bare decimal point.

    Args:
        value: Float to render.

    Returns:
        Text such as `2.5`, `4` or `100000000000000000000`.
    """
    if isnan(value):
        return 'NaN'

    if isinf(value):
        return '+Inf' if value > 0 else '-Inf'

    text = format(Decimal(repr(value)), 'f')
    if '.' in text:
        text = text.rstrip('0').rstrip('.')

    return text


def format_result(value: Any) -> str | None:  # noqa: ANN401
    """Render an expression result as text.

    Args:
        value: Value returned by an expression engine.

    Returns:
        Rendered text, or None if the type is not supported.
    """
    if isinstance(value, str):
        return value

    if isinstance(value, bool):
        return 'true' if value else 'false'

    if isinstance(value, int):
        return str(value)

    if isinstance(value, float):
        return format_float(value)

    return None
