"""Unit tests for amount-in-words conversion."""

from decimal import Decimal

import pytest

from library_desk.receipts.amount_words import amount_in_words


def test_zero_has_no_currency_phrase() -> None:
    assert amount_in_words(0) == "Zero"


@pytest.mark.parametrize(
    "amount, expected",
    [
        (1, "One Rupees Only"),
        (15, "Fifteen Rupees Only"),
        (20, "Twenty Rupees Only"),
        (99, "Ninety Nine Rupees Only"),
        (500, "Five Hundred Rupees Only"),
        (1250, "One Thousand Two Hundred Fifty Rupees Only"),
        (12_019, "Twelve Thousand Nineteen Rupees Only"),
        (100_000, "One Lakh Rupees Only"),
        (2_50_000, "Two Lakh Fifty Thousand Rupees Only"),
        (10_000_000, "One Crore Rupees Only"),
        (12_34_56_789, "Twelve Crore Thirty Four Lakh Fifty Six Thousand Seven Hundred Eighty Nine Rupees Only"),
    ],
)
def test_indian_scale(amount: int, expected: str) -> None:
    assert amount_in_words(amount) == expected


def test_crore_count_above_hundred_is_spelled_out() -> None:
    """Amounts past 99 crore keep every digit instead of dropping a scale word."""
    assert amount_in_words(1_000_00_00_000) == "One Thousand Crore Rupees Only"
    assert amount_in_words(9_999_999_999) == (
        "Nine Hundred Ninety Nine Crore Ninety Nine Lakh Ninety Nine Thousand "
        "Nine Hundred Ninety Nine Rupees Only"
    )


def test_fractions_are_floored() -> None:
    assert amount_in_words(Decimal("1250.99")) == "One Thousand Two Hundred Fifty Rupees Only"
    assert amount_in_words(499.5) == "Four Hundred Ninety Nine Rupees Only"
    assert amount_in_words(Decimal("0.75")) == "Zero"


def test_output_is_deterministic_and_non_empty() -> None:
    for n in (0, 7, 1_001, 10_01_001, 99_99_99_999, 9_999_999_999):
        words = amount_in_words(n)
        assert words
        assert words == amount_in_words(n)
        assert "  " not in words


def test_negative_amount_rejected() -> None:
    with pytest.raises(ValueError):
        amount_in_words(-5)
