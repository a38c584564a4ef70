from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN
from typing import Optional

from exceptions import InvalidAmount

PRECISION = Decimal("0.0001")
ZERO = Decimal("0")


def round_amount(value: Decimal) -> Decimal:
    """
    Round to the canonical 4 decimal places.
    Raises InvalidAmount when the value has too many digits to keep 4 places.
    """
    try:
        return Decimal(value).quantize(PRECISION, rounding=ROUND_HALF_EVEN)
    except InvalidOperation as e:
        raise InvalidAmount(f"The amount is invalid: {value} exceeds the supported precision", cause=e)


def parse_amount(text: Optional[str]) -> Optional[Decimal]:
    """
    Parse an amount cell. Empty or missing cells mean "no amount".
    Raises ValueError for anything that is not a finite decimal number
    representable at 4 decimal places.
    """
    if text is None or not text.strip():
        return None

    try:
        amount = Decimal(text.strip())
    except InvalidOperation:
        raise ValueError(f"invalid amount {text!r}")

    if not amount.is_finite():
        raise ValueError(f"invalid amount {text!r}")

    try:
        return round_amount(amount)
    except InvalidAmount as e:
        raise ValueError(f"invalid amount {text!r}") from e


def format_amount(value: Decimal) -> str:
    """Format decimal with up to 4 decimal places, removing trailing zeros."""
    normalized = round_amount(value).normalize()
    if normalized == ZERO:
        return "0"
    return f"{normalized:f}"
