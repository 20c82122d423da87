# utils/units.py
"""Text <-> Decimal conversion for the units column."""
import logging
import re
from decimal import Context, Decimal, ROUND_HALF_UP

from utils.exceptions import MalformedNumericInput

logger = logging.getLogger(__name__)

_NOT_NUMERIC = re.compile(r"[^0-9.\-]")
# Longest leading literal, the same prefix a browser's parseFloat would read.
_LEADING_NUMBER = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")
_CENTS = Decimal("0.01")


def parse_units_strict(text: str) -> Decimal:
    """Parse units text, raising MalformedNumericInput when nothing is readable."""
    cleaned = _NOT_NUMERIC.sub("", str(text))
    match = _LEADING_NUMBER.match(cleaned)
    if not match:
        raise MalformedNumericInput(text)
    return Decimal(match.group(0))


def parse_units(text: str) -> Decimal:
    """
    Best-effort parse of free-form units text.

    Anything that isn't a digit, '-' or '.' is dropped first ("+4.5u" -> 4.5).
    Input with no readable number falls back to exactly Decimal("0").
    """
    try:
        return parse_units_strict(text)
    except MalformedNumericInput:
        logger.debug("Units input %r unreadable, using 0", text)
        return Decimal("0")


def round_cents(value) -> Decimal:
    """Round half up to two decimals, however large the value."""
    value = Decimal(value)
    # enough precision for the whole integer part plus cents
    context = Context(prec=max(28, value.adjusted() + 4))
    return value.quantize(_CENTS, rounding=ROUND_HALF_UP, context=context)


def format_units(value) -> str:
    """Two decimals with an explicit sign: 0 -> '+0.00', -2.45 -> '-2.45'."""
    value = Decimal(value)
    rounded = round_cents(value)
    if value >= 0:
        # copy_abs() drops the sign Decimal keeps on -0
        return f"+{rounded.copy_abs():.2f}"
    return f"{rounded:.2f}"


def to_units(value) -> Decimal:
    """
    Coerce a seed or imported value to units.

    Numbers are taken as they are (non-finite ones become 0); only text goes
    through parse_units, which would strip an exponent ("1e+20" -> 120).
    """
    if isinstance(value, bool) or value is None:
        return parse_units(str(value or ""))
    if isinstance(value, float):
        # repr keeps the shortest literal: 173.27, not 173.2699999...
        value = Decimal(repr(value))
    elif isinstance(value, (int, Decimal)):
        value = Decimal(value)
    else:
        return parse_units(str(value))
    return value if value.is_finite() else Decimal("0")
