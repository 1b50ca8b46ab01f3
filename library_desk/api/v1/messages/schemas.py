"""Messages schemas."""

from typing import List, Optional

from pydantic import BaseModel, Field

from library_desk.core.schemas import PaymentRecord, StudentRecord


class MessagePreviewRequest(BaseModel):
    template: str = Field(..., min_length=1, max_length=2000)
    student: StudentRecord


class ReceiptMessageRequest(BaseModel):
    student: StudentRecord
    payment: PaymentRecord
    receipt_number: str = Field(..., min_length=1, max_length=32)


class MessagePreviewResponse(BaseModel):
    target: str
    text: str
    link: str
    placeholders: List[str] = Field(default_factory=list)
    valid_phone: bool
    display_phone: Optional[str] = None
