"""
Amount-in-words for fee receipts, Indian numbering scale.

Digits are grouped as ones (last three), thousands (two), lakhs (two), then
whatever remains counts crores. A crore count of 100 or more is itself spelled
on the same scale, so 1_000_00_00_000 reads "One Thousand Crore".
"""

from decimal import ROUND_FLOOR, Decimal
from typing import List, Union

ONES = ["", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine"]
TEENS = [
    "Ten", "Eleven", "Twelve", "Thirteen", "Fourteen",
    "Fifteen", "Sixteen", "Seventeen", "Eighteen", "Nineteen",
]
TENS = ["", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety"]

CURRENCY_PHRASE = "Rupees Only"

CRORE = 10_000_000
LAKH = 100_000
THOUSAND = 1_000


def _below_thousand(n: int) -> List[str]:
    words: List[str] = []
    if n >= 100:
        words += [ONES[n // 100], "Hundred"]
        n %= 100
    if n >= 20:
        words.append(TENS[n // 10])
        n %= 10
    elif n >= 10:
        words.append(TEENS[n - 10])
        return words
    if n > 0:
        words.append(ONES[n])
    return words


def _indian_words(n: int) -> List[str]:
    crores, n = divmod(n, CRORE)
    lakhs, n = divmod(n, LAKH)
    thousands, n = divmod(n, THOUSAND)

    words: List[str] = []
    if crores:
        words += _indian_words(crores) + ["Crore"]
    if lakhs:
        words += _below_thousand(lakhs) + ["Lakh"]
    if thousands:
        words += _below_thousand(thousands) + ["Thousand"]
    words += _below_thousand(n)
    return words


def amount_in_words(amount: Union[int, Decimal, float]) -> str:
    """
    Spell a non-negative amount in English words followed by "Rupees Only".

    Fractions (paise) are floored away. Zero is returned as the bare word
    "Zero" without the currency phrase.

    Examples:
        1250   -> One Thousand Two Hundred Fifty Rupees Only
        100000 -> One Lakh Rupees Only
    """
    if not isinstance(amount, int):
        amount = int(Decimal(str(amount)).to_integral_value(rounding=ROUND_FLOOR))
    if amount < 0:
        raise ValueError("amount must be non-negative")
    if amount == 0:
        return "Zero"
    return " ".join(_indian_words(amount) + [CURRENCY_PHRASE])
