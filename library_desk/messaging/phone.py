"""
Phone number handling for outbound messages.

normalize_phone is the lenient form used to address a message: it never
rejects input. The E.164 helpers apply Indian mobile rules and return None
for numbers that do not look valid.
"""

import re
from dataclasses import dataclass
from typing import Optional

from library_desk.core.config import settings

_NON_DIGITS = re.compile(r"\D")
_INDIAN_MOBILE_LEADS = ("6", "7", "8", "9")


def digits_only(raw: str) -> str:
    return _NON_DIGITS.sub("", raw or "")


def normalize_phone(raw: str, country_code: Optional[str] = None) -> str:
    """
    Strip everything but digits and make sure the country code is present.

    Numbers already starting with the country code are returned as is, bare
    10-digit numbers get it prepended, anything else is returned stripped.
    """
    if country_code is None:
        country_code = settings.default_country_code
    digits = digits_only(raw)
    if digits.startswith(country_code):
        return digits
    if len(digits) == 10:
        return country_code + digits
    return digits


def normalize_to_e164(raw: str, default_country: str = "IN") -> Optional[str]:
    digits = digits_only(raw)
    if not digits:
        return None

    if default_country == "IN":
        if digits.startswith("91") and len(digits) == 12:
            return f"+{digits}"
        local = digits[1:] if digits.startswith("0") else digits
        if len(local) == 10 and local[0] in _INDIAN_MOBILE_LEADS:
            return f"+91{local}"
        return None

    if 10 <= len(digits) <= 15:
        return f"+{digits}"
    return None


@dataclass(frozen=True)
class PhoneValidationResult:
    is_valid: bool
    e164: Optional[str]
    error: Optional[str] = None


def validate_phone(raw: str, default_country: str = "IN") -> PhoneValidationResult:
    e164 = normalize_to_e164(raw, default_country)
    if e164 is None:
        return PhoneValidationResult(is_valid=False, e164=None, error="Invalid phone number format")
    return PhoneValidationResult(is_valid=True, e164=e164)


def is_likely_duplicate(phone_a: str, phone_b: str) -> bool:
    a = normalize_to_e164(phone_a)
    b = normalize_to_e164(phone_b)
    return a is not None and a == b


def format_for_display(raw: str) -> str:
    """+91 98765 43210 for valid Indian numbers, the input unchanged otherwise."""
    e164 = normalize_to_e164(raw)
    if e164 is None:
        return raw
    if e164.startswith("+91"):
        number = e164[3:]
        return f"+91 {number[:5]} {number[5:]}"
    return e164


def format_for_whatsapp(raw: str) -> Optional[str]:
    e164 = normalize_to_e164(raw)
    return e164[1:] if e164 else None
