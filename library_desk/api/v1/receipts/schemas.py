"""Receipts schemas."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from library_desk.core.schemas import PaymentRecord, ReceiptSettings, StudentRecord


class ReceiptRequest(BaseModel):
    student: StudentRecord
    payment: PaymentRecord
    settings: ReceiptSettings = Field(default_factory=ReceiptSettings)


class BatchItem(BaseModel):
    student: StudentRecord
    payment: PaymentRecord


class BatchReceiptRequest(BaseModel):
    items: List[BatchItem] = Field(..., min_length=1)
    settings: ReceiptSettings = Field(default_factory=ReceiptSettings)


class BatchItemOutcome(BaseModel):
    index: int
    student_name: str
    succeeded: bool
    receipt_number: Optional[str] = None
    file_name: Optional[str] = None
    error: Optional[str] = None


class BatchReceiptResponse(BaseModel):
    total: int
    succeeded: int
    failed: int
    outcomes: List[BatchItemOutcome]
    documents: List[str] = Field(default_factory=list, description="Base64-encoded PDFs, successful items only")


# --- Receipt log ---
class ReceiptLogResponse(BaseModel):
    id: UUID
    receipt_number: str
    student_name: str
    enrollment_no: str
    file_name: str
    amount: Decimal
    month: str
    year: int
    generated_at: datetime
    whatsapp_sent: bool
    whatsapp_sent_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class WhatsAppStatusUpdate(BaseModel):
    sent: bool = True
