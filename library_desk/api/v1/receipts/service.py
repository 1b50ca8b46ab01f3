"""Receipts service: single and batch generation, plus the receipt log."""

import base64
import logging
from datetime import datetime
from typing import List, Optional, Tuple

from fastapi import status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from library_desk.core.exceptions import ServiceError
from library_desk.core.models import ReceiptLog
from library_desk.core.schemas import PaymentRecord, ReceiptDocument, StudentRecord
from library_desk.receipts.batch import BatchReceiptOrchestrator
from library_desk.receipts.composer import compose_receipt
from library_desk.receipts.renderer import DocumentRenderer

from .schemas import (
    BatchItemOutcome,
    BatchReceiptRequest,
    BatchReceiptResponse,
    ReceiptLogResponse,
    ReceiptRequest,
)

logger = logging.getLogger(__name__)


def generate_receipt_file_name(
    student: StudentRecord, payment: PaymentRecord, now: Optional[datetime] = None
) -> str:
    if now is None:
        now = datetime.now()
    millis = int(now.timestamp() * 1000)
    return f"RECEIPT_{student.enrollment_no}_{payment.month}_{payment.year}_{millis}.pdf"


# --- Receipt log ---
def _log_to_response(log: ReceiptLog) -> ReceiptLogResponse:
    return ReceiptLogResponse.model_validate(log)


async def save_receipt_log(
    db: AsyncSession, document: ReceiptDocument, file_name: str
) -> ReceiptLogResponse:
    log = ReceiptLog(
        receipt_number=document.receipt_number,
        student_name=document.student.name,
        enrollment_no=document.student.enrollment_no,
        file_name=file_name,
        amount=document.payment.amount,
        month=document.payment.month,
        year=document.payment.year,
        generated_at=document.issue_date,
        whatsapp_sent=False,
    )
    try:
        db.add(log)
        await db.commit()
        await db.refresh(log)
    except IntegrityError:
        await db.rollback()
        raise ServiceError(
            f"Receipt number {document.receipt_number} has already been issued",
            status.HTTP_409_CONFLICT,
        )
    return _log_to_response(log)


async def list_receipt_logs(
    db: AsyncSession,
    enrollment_no: Optional[str] = None,
    limit: int = 100,
) -> List[ReceiptLogResponse]:
    stmt = select(ReceiptLog)
    if enrollment_no is not None:
        stmt = stmt.where(ReceiptLog.enrollment_no == enrollment_no)
    stmt = stmt.order_by(ReceiptLog.generated_at.desc()).limit(limit)
    result = await db.execute(stmt)
    return [_log_to_response(log) for log in result.scalars().all()]


async def _get_log_row(db: AsyncSession, receipt_number: str) -> ReceiptLog:
    result = await db.execute(
        select(ReceiptLog).where(ReceiptLog.receipt_number == receipt_number)
    )
    log = result.scalar_one_or_none()
    if log is None:
        raise ServiceError("Receipt not found", status.HTTP_404_NOT_FOUND)
    return log


async def get_receipt_log(db: AsyncSession, receipt_number: str) -> ReceiptLogResponse:
    return _log_to_response(await _get_log_row(db, receipt_number))


async def mark_whatsapp_sent(
    db: AsyncSession, receipt_number: str, sent: bool = True
) -> ReceiptLogResponse:
    log = await _get_log_row(db, receipt_number)
    log.whatsapp_sent = sent
    log.whatsapp_sent_at = datetime.utcnow() if sent else None
    await db.commit()
    await db.refresh(log)
    return _log_to_response(log)


# --- Generation ---
async def generate_receipt(
    db: AsyncSession,
    renderer: DocumentRenderer,
    payload: ReceiptRequest,
) -> Tuple[ReceiptDocument, bytes, str]:
    """Compose, render and log one receipt. Returns (document, pdf bytes, file name)."""
    document = compose_receipt(payload.student, payload.payment, payload.settings)
    pdf = await renderer.render(document, payload.settings.paper_size)
    file_name = generate_receipt_file_name(payload.student, payload.payment, document.issue_date)
    await save_receipt_log(db, document, file_name)
    logger.info("Generated receipt %s for %s", document.receipt_number, payload.student.name)
    return document, pdf, file_name


async def generate_batch(
    db: AsyncSession,
    renderer: DocumentRenderer,
    payload: BatchReceiptRequest,
    delay_seconds: Optional[float] = None,
) -> BatchReceiptResponse:
    orchestrator = BatchReceiptOrchestrator(renderer, delay_seconds=delay_seconds)
    result = await orchestrator.generate(
        [(item.student, item.payment) for item in payload.items],
        payload.settings,
    )

    file_names = {}
    succeeded = [o for o in result.outcomes if o.succeeded]
    for outcome, document in zip(succeeded, result.receipts):
        file_name = generate_receipt_file_name(document.student, document.payment, document.issue_date)
        file_names[outcome.index] = file_name
        try:
            await save_receipt_log(db, document, file_name)
        except ServiceError as e:
            # The PDF exists either way; only the log row is lost.
            logger.warning("Could not log receipt %s: %s", document.receipt_number, e.message)

    outcomes = [
        BatchItemOutcome(
            index=o.index,
            student_name=o.student_name,
            succeeded=o.succeeded,
            receipt_number=o.receipt_number,
            file_name=file_names.get(o.index),
            error=o.error,
        )
        for o in result.outcomes
    ]
    return BatchReceiptResponse(
        total=result.total,
        succeeded=result.succeeded,
        failed=result.failed,
        outcomes=outcomes,
        documents=[base64.b64encode(pdf).decode("ascii") for pdf in result.documents],
    )
