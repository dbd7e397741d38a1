"""Kubernetes resource quantities ("500m", "1.5Gi", "2", "1e3")."""

import re
from decimal import Decimal, InvalidOperation

_QUANTITY_RE = re.compile(
    r"^(?P<number>\+?(?:\d+(?:\.\d*)?|\.\d+))"
    r"(?P<suffix>Ki|Mi|Gi|Ti|Pi|Ei|[numkMGTPE]|[eE][+-]?\d+)?$"
)

_BINARY = {
    "Ki": Decimal(2) ** 10,
    "Mi": Decimal(2) ** 20,
    "Gi": Decimal(2) ** 30,
    "Ti": Decimal(2) ** 40,
    "Pi": Decimal(2) ** 50,
    "Ei": Decimal(2) ** 60,
}

_DECIMAL = {
    "n": Decimal("1e-9"),
    "u": Decimal("1e-6"),
    "m": Decimal("1e-3"),
    "k": Decimal("1e3"),
    "M": Decimal("1e6"),
    "G": Decimal("1e9"),
    "T": Decimal("1e12"),
    "P": Decimal("1e15"),
    "E": Decimal("1e18"),
}


def parse_quantity(value: str | int | float) -> Decimal:
    """Parse a quantity into its base-unit value (cores, bytes, ...).

    Raises:
        ValueError: If the value is negative, malformed or has an unknown suffix.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid quantity: {value!r}")
    if isinstance(value, (int, float)):
        amount = Decimal(str(value))
        if not amount.is_finite():
            raise ValueError(f"Invalid quantity: {value!r}")
        if amount < 0:
            raise ValueError(f"Quantity must not be negative: {value}")
        return amount

    text = value.strip()
    if text.startswith("-"):
        raise ValueError(f"Quantity must not be negative: {value}")

    match = _QUANTITY_RE.match(text)
    if not match:
        raise ValueError(f"Invalid quantity: {value!r}")

    try:
        amount = Decimal(match.group("number"))
    except InvalidOperation as e:
        raise ValueError(f"Invalid quantity: {value!r}") from e

    suffix = match.group("suffix")
    match suffix:
        case None:
            return amount
        case s if s in _BINARY:
            return amount * _BINARY[s]
        case s if s in _DECIMAL:
            return amount * _DECIMAL[s]
        case _:
            return amount * (Decimal(10) ** int(suffix[1:]))


def normalize_quantity(value: str | int | float) -> str:
    """Validate a quantity and return it in the string form sent to the cluster."""
    parse_quantity(value)
    if isinstance(value, str):
        return value.strip()
    return str(value)


def format_quantity(amount: Decimal) -> str:
    """Base-unit value -> plain decimal quantity ("7.5", "16777216")."""
    return f"{amount.normalize():f}"
