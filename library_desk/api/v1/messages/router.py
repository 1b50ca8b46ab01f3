"""Messages router: templates and outbound message previews."""

from typing import List

from fastapi import APIRouter

from library_desk.messaging.delivery import (
    OutboundMessage,
    prepare_message,
    prepare_receipt_message,
    whatsapp_link,
)
from library_desk.messaging.phone import format_for_display, validate_phone
from library_desk.messaging.templates import DEFAULT_TEMPLATES, MessageTemplate, placeholders_in

from .schemas import MessagePreviewRequest, MessagePreviewResponse, ReceiptMessageRequest

router = APIRouter(prefix="/api/v1/messages", tags=["messages"])


def _preview(message: OutboundMessage, contact: str, placeholders: List[str]) -> MessagePreviewResponse:
    return MessagePreviewResponse(
        target=message.target,
        text=message.text,
        link=whatsapp_link(message),
        placeholders=placeholders,
        valid_phone=validate_phone(contact).is_valid,
        display_phone=format_for_display(contact),
    )


@router.get("/templates", response_model=List[MessageTemplate])
async def list_templates() -> List[MessageTemplate]:
    return DEFAULT_TEMPLATES


@router.post("/preview", response_model=MessagePreviewResponse)
async def preview_message(payload: MessagePreviewRequest) -> MessagePreviewResponse:
    message = prepare_message(payload.template, payload.student)
    return _preview(message, payload.student.contact, placeholders_in(payload.template))


@router.post("/receipt", response_model=MessagePreviewResponse)
async def preview_receipt_message(payload: ReceiptMessageRequest) -> MessagePreviewResponse:
    message = prepare_receipt_message(payload.student, payload.payment, payload.receipt_number)
    return _preview(message, payload.student.contact, [])
