"""Compose a ReceiptDocument from a student, a payment and receipt settings."""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

from library_desk.core.exceptions import ValidationError
from library_desk.core.schemas import (
    PaymentRecord,
    ReceiptDocument,
    ReceiptSettings,
    StudentRecord,
)

from .amount_words import amount_in_words
from .numbering import generate_receipt_number


def _checked_amount(value) -> Decimal:
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"Receipt amount must be a number, got {value!r}")
    if not amount.is_finite() or amount <= 0:
        raise ValidationError("Receipt amount must be a positive finite number")
    return amount


def compose_receipt(
    student: StudentRecord,
    payment: PaymentRecord,
    settings: ReceiptSettings,
    *,
    now: Optional[datetime] = None,
) -> ReceiptDocument:
    """Pure apart from the clock read. Raises ValidationError for a non-positive amount."""
    amount = _checked_amount(payment.amount)
    if now is None:
        now = datetime.now()

    return ReceiptDocument(
        receipt_number=generate_receipt_number(now),
        issue_date=now,
        student=student,
        payment=payment,
        amount_in_words=amount_in_words(amount),
        settings=settings,
    )
