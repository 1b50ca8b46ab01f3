"""Receipt log: one row per generated receipt. Metadata only, never the PDF bytes."""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, Numeric, String, Uuid

from library_desk.db.session import Base


class ReceiptLog(Base):
    __tablename__ = "receipt_logs"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    receipt_number = Column(String(32), nullable=False, unique=True, index=True)
    student_name = Column(String(255), nullable=False)
    enrollment_no = Column(String(50), nullable=False, index=True)
    file_name = Column(String(255), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    month = Column(String(20), nullable=False)
    year = Column(Integer, nullable=False)
    generated_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    whatsapp_sent = Column(Boolean, default=False, nullable=False)
    whatsapp_sent_at = Column(DateTime(timezone=True), nullable=True)
