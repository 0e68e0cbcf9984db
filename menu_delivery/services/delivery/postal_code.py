"""Brazilian postal code (CEP) normalization."""

import re
from typing import Optional

from menu_delivery.services.delivery.errors import InvalidPostalCodeError

POSTAL_CODE_LENGTH = 8

# ASCII digits only; \D keeps any Unicode decimal digit
_NON_DIGITS = re.compile(r"[^0-9]")


def normalize_postal_code(raw: Optional[str]) -> Optional[str]:
    """
    Strip formatting from a CEP.

    Returns the 8-digit string, or None when any other number of digits
    remains ("01310-100" -> "01310100", "0131010" -> None).
    """
    if raw is None:
        return None
    digits = _NON_DIGITS.sub("", str(raw))
    if len(digits) != POSTAL_CODE_LENGTH:
        return None
    return digits


def format_postal_code(postal_code: str) -> str:
    """Render a normalized CEP as nnnnn-nnn."""
    return f"{postal_code[:5]}-{postal_code[5:]}"


def require_postal_code(raw: Optional[str]) -> str:
    """Normalize a customer CEP or raise InvalidPostalCodeError."""
    postal_code = normalize_postal_code(raw)
    if postal_code is None:
        raise InvalidPostalCodeError("Invalid CEP. Please enter 8 digits.")
    return postal_code
