"""Receipts router: single receipt PDF, batch generation, receipt log."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from library_desk.core.exceptions import ServiceError
from library_desk.db.session import get_db
from library_desk.receipts.renderer import DocumentRenderer, get_renderer

from .schemas import (
    BatchReceiptRequest,
    BatchReceiptResponse,
    ReceiptLogResponse,
    ReceiptRequest,
    WhatsAppStatusUpdate,
)
from . import service

router = APIRouter(prefix="/api/v1/receipts", tags=["receipts"])


@router.post(
    "",
    response_class=Response,
    responses={200: {"content": {"application/pdf": {}}}},
)
async def generate_receipt(
    payload: ReceiptRequest,
    db: AsyncSession = Depends(get_db),
    renderer: DocumentRenderer = Depends(get_renderer),
) -> Response:
    try:
        document, pdf, file_name = await service.generate_receipt(db, renderer, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{file_name}"',
            "X-Receipt-Number": document.receipt_number,
        },
    )


@router.post("/batch", response_model=BatchReceiptResponse)
async def generate_batch(
    payload: BatchReceiptRequest,
    db: AsyncSession = Depends(get_db),
    renderer: DocumentRenderer = Depends(get_renderer),
) -> BatchReceiptResponse:
    return await service.generate_batch(db, renderer, payload)


# --- Receipt log ---
@router.get("/logs", response_model=List[ReceiptLogResponse])
async def list_receipt_logs(
    enrollment_no: Optional[str] = Query(None),
    limit: int = Query(100, ge=1, le=1000),
    db: AsyncSession = Depends(get_db),
) -> List[ReceiptLogResponse]:
    return await service.list_receipt_logs(db, enrollment_no=enrollment_no, limit=limit)


@router.get("/logs/{receipt_number}", response_model=ReceiptLogResponse)
async def get_receipt_log(
    receipt_number: str,
    db: AsyncSession = Depends(get_db),
) -> ReceiptLogResponse:
    try:
        return await service.get_receipt_log(db, receipt_number)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post(
    "/logs/{receipt_number}/whatsapp",
    response_model=ReceiptLogResponse,
    status_code=status.HTTP_200_OK,
)
async def update_whatsapp_status(
    receipt_number: str,
    payload: WhatsAppStatusUpdate,
    db: AsyncSession = Depends(get_db),
) -> ReceiptLogResponse:
    try:
        return await service.mark_whatsapp_sent(db, receipt_number, sent=payload.sent)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
