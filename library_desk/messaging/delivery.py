"""
Outbound message preparation.

This module only builds the target address and the message text. Sending is
left to a MessageSender supplied by the caller.
"""

from typing import Protocol
from urllib.parse import quote

from pydantic import BaseModel

from library_desk.core.schemas import PaymentRecord, StudentRecord

from .phone import normalize_phone
from .templates import render_template

WHATSAPP_BASE_URL = "https://wa.me"


class OutboundMessage(BaseModel):
    target: str
    text: str

    class Config:
        frozen = True


class MessageSender(Protocol):
    async def send(self, message: OutboundMessage) -> None:
        ...


def prepare_message(template: str, student: StudentRecord) -> OutboundMessage:
    return OutboundMessage(
        target=normalize_phone(student.contact),
        text=render_template(template, student),
    )


def receipt_message_text(student: StudentRecord, payment: PaymentRecord, receipt_number: str) -> str:
    return (
        f"Dear {student.name},\n\n"
        f"Your fee receipt for {payment.month} {payment.year}:\n\n"
        f"Amount: ₹{payment.amount}\n"
        f"Receipt: {receipt_number}\n"
        f"Seat: {student.seat_number}\n\n"
        "Thank you for your payment!\n"
        "- PATCH Library"
    )


def prepare_receipt_message(
    student: StudentRecord, payment: PaymentRecord, receipt_number: str
) -> OutboundMessage:
    return OutboundMessage(
        target=normalize_phone(student.contact),
        text=receipt_message_text(student, payment, receipt_number),
    )


def whatsapp_link(message: OutboundMessage) -> str:
    """Click-to-chat URL that opens a chat with the text pre-filled."""
    return f"{WHATSAPP_BASE_URL}/{message.target}?text={quote(message.text, safe='')}"
