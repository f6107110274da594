"""
Input normalization utilities for the Storefront API.

Request models handle shape validation; these helpers normalize values that
are stored in a canonical form (zip codes, state codes, card numbers).
"""
import re

from domain.constants import ZIP_CODE_DIGITS
from domain.errors import ValidationError

_NON_DIGITS = re.compile(r"\D")
_STATE_CODE = re.compile(r"^[A-Z]{2}$")


def format_zip_code(zip_code: str) -> str:
    """
    Normalize a CEP to 00000-000.

    Raises:
        ValidationError(400) unless the value holds exactly 8 digits
    """
    cleaned = _NON_DIGITS.sub("", zip_code or "")
    if len(cleaned) != ZIP_CODE_DIGITS:
        raise ValidationError("Invalid zip code", field="zip_code")
    return f"{cleaned[:5]}-{cleaned[5:]}"


def normalize_state(state: str) -> str:
    """Uppercase a two-letter state code (UF)."""
    normalized = (state or "").strip().upper()
    if not _STATE_CODE.match(normalized):
        raise ValidationError("State must be a two-letter code (e.g. SP, RJ)", field="state")
    return normalized


def card_number_digits(card_number: str | None) -> str:
    """Strip spaces and dashes from a card number; returns '' for None."""
    if not card_number:
        return ""
    return _NON_DIGITS.sub("", card_number)
