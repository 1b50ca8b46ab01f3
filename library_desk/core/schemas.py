"""Records consumed and produced by the receipt pipeline."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from library_desk.core.enums import PaperSize, PaymentMethod


class StudentRecord(BaseModel):
    """Billing-relevant view of a student. Read-only to the receipt pipeline."""

    name: str
    father_name: str = ""
    enrollment_no: str
    seat_number: str = ""
    shift: str = ""
    timing: str = ""
    address: str = ""
    contact: str = ""
    monthly_fees: Decimal = Decimal("0")
    join_date: Optional[date] = None
    fees_paid_till: Optional[date] = None
    photo_reference: Optional[str] = None

    class Config:
        frozen = True


class PaymentRecord(BaseModel):
    # Positivity is enforced by compose_receipt, not here.
    amount: Decimal
    payment_date: date
    month: str
    year: int
    transaction_reference: Optional[str] = None
    payment_method: PaymentMethod = PaymentMethod.CASH

    class Config:
        frozen = True


class ReceiptSettings(BaseModel):
    logo_reference: Optional[str] = None
    accent_color: str = Field("#1A2C42", pattern=r"^#[0-9A-Fa-f]{6}$")
    use_styled_layout: bool = True
    include_photo: bool = False
    paper_size: PaperSize = PaperSize.A4

    class Config:
        frozen = True


class ReceiptDocument(BaseModel):
    """Everything the renderer needs for one receipt. Never mutated after composition."""

    receipt_number: str
    issue_date: datetime
    student: StudentRecord
    payment: PaymentRecord
    amount_in_words: str
    settings: ReceiptSettings

    class Config:
        frozen = True
