"""
Document rendering for receipts.

DocumentRenderer is the seam to whatever produces the final bytes; the
batch orchestrator and the API only depend on the protocol. The default
implementation lays the receipt out with reportlab platypus.
"""

import asyncio
import logging
from io import BytesIO
from typing import List, Optional, Protocol
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_RIGHT
from reportlab.lib.pagesizes import A4, letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.platypus import Image, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from library_desk.core.config import settings as app_settings
from library_desk.core.enums import PaperSize
from library_desk.core.exceptions import RenderError
from library_desk.core.schemas import ReceiptDocument

logger = logging.getLogger(__name__)

PAGE_SIZES = {
    PaperSize.A4: A4,
    PaperSize.LETTER: letter,
}

DATE_FORMAT = "%d/%m/%Y"
MUTED = colors.HexColor("#6B7280")
RULE = colors.HexColor("#D1D5DB")
PANEL = colors.HexColor("#F9FAFB")
CELL_STYLE = ParagraphStyle("Cell", parent=getSampleStyleSheet()["Normal"], fontSize=9, leading=11)


class DocumentRenderer(Protocol):
    async def render(self, document: ReceiptDocument, paper_size: PaperSize) -> bytes:
        """Return the finished document bytes or raise RenderError."""
        ...


def _fmt_date(value) -> str:
    return value.strftime(DATE_FORMAT) if value else "-"


def _fmt_amount(value) -> str:
    return f"Rs. {value:,.2f}"


def _load_image(reference: Optional[str], size: float) -> Optional[Image]:
    if not reference:
        return None
    try:
        ImageReader(reference)
    except Exception as exc:
        logger.warning("Could not load image %s: %s", reference, exc)
        return None
    return Image(reference, width=size, height=size)


class ReportLabReceiptRenderer:
    """Renders a ReceiptDocument into a single-page PDF."""

    def __init__(self, library_name: Optional[str] = None) -> None:
        self.library_name = library_name or app_settings.library_name

    async def render(self, document: ReceiptDocument, paper_size: PaperSize) -> bytes:
        return await asyncio.to_thread(self.render_sync, document, paper_size)

    def render_sync(self, document: ReceiptDocument, paper_size: PaperSize) -> bytes:
        buffer = BytesIO()
        try:
            doc = SimpleDocTemplate(
                buffer,
                pagesize=PAGE_SIZES[PaperSize(paper_size)],
                rightMargin=20 * mm,
                leftMargin=20 * mm,
                topMargin=20 * mm,
                bottomMargin=20 * mm,
                title=f"Fee Receipt {document.receipt_number}",
            )
            doc.build(self._story(document, doc.width))
            pdf = buffer.getvalue()
        except RenderError:
            raise
        except Exception as exc:
            raise RenderError(f"Failed to render receipt {document.receipt_number}: {exc}") from exc
        finally:
            buffer.close()

        logger.debug("Rendered receipt %s (%d bytes)", document.receipt_number, len(pdf))
        return pdf

    # --- Layout ---
    def _story(self, document: ReceiptDocument, width: float) -> List:
        styled = document.settings.use_styled_layout
        accent = colors.HexColor(document.settings.accent_color) if styled else colors.black
        on_accent = colors.white if styled else colors.black

        styles = getSampleStyleSheet()
        title_style = ParagraphStyle(
            "ReceiptTitle",
            parent=styles["Heading1"],
            fontSize=20,
            textColor=on_accent,
            alignment=TA_CENTER,
            spaceAfter=2,
        )
        subtitle_style = ParagraphStyle(
            "ReceiptSubtitle",
            parent=styles["Normal"],
            fontSize=10,
            textColor=on_accent,
            alignment=TA_CENTER,
        )
        heading_style = ParagraphStyle(
            "SectionHeading",
            parent=styles["Heading3"],
            fontSize=12,
            spaceBefore=8,
            spaceAfter=4,
        )
        body = styles["Normal"]
        right = ParagraphStyle("Right", parent=body, alignment=TA_RIGHT)
        small = ParagraphStyle("Small", parent=body, fontSize=7, textColor=MUTED)

        student = document.student
        payment = document.payment
        elements: List = []

        # Header band
        header_cells = [
            Paragraph(escape(self.library_name.upper()), title_style),
            Paragraph("Smart Library Management System", subtitle_style),
        ]
        logo = _load_image(document.settings.logo_reference, 14 * mm)
        header = Table(
            [[logo if logo is not None else "", header_cells]],
            colWidths=[18 * mm, width - 18 * mm],
        )
        header_style = [
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("TOPPADDING", (0, 0), (-1, -1), 8),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 8),
        ]
        if styled:
            header_style.append(("BACKGROUND", (0, 0), (-1, -1), accent))
        else:
            header_style.append(("BOX", (0, 0), (-1, -1), 1, colors.black))
        header.setStyle(TableStyle(header_style))
        elements.append(header)
        elements.append(Spacer(1, 6 * mm))

        # Receipt number / issue date
        info = Table(
            [[
                Paragraph(
                    f"<b>FEE RECEIPT</b><br/>Receipt No: <b>{escape(document.receipt_number)}</b>",
                    body,
                ),
                Paragraph(f"Date of Issue<br/><b>{_fmt_date(payment.payment_date)}</b>", right),
            ]],
            colWidths=[width / 2, width / 2],
        )
        info.setStyle(TableStyle([("LINEBELOW", (0, 0), (-1, -1), 1.5, RULE)]))
        elements.append(info)
        elements.append(Spacer(1, 4 * mm))

        # Student identity, optionally next to the photo
        identity = self._rows_table(
            [
                ("Student Name:", student.name),
                ("Father's Name:", student.father_name),
                ("Enrollment No:", student.enrollment_no),
                ("Contact:", student.contact),
            ],
            width - (30 * mm if document.settings.include_photo else 0),
        )
        if document.settings.include_photo:
            photo = _load_image(student.photo_reference, 24 * mm)
            if photo is None:
                initial = ParagraphStyle("Initial", parent=title_style, textColor=MUTED, fontSize=24)
                photo = Paragraph(escape(student.name[:1].upper()), initial)
            row = Table([[photo, identity]], colWidths=[30 * mm, width - 30 * mm])
            row.setStyle(TableStyle([("VALIGN", (0, 0), (-1, -1), "TOP")]))
            elements.append(row)
        else:
            elements.append(identity)

        # Student / payment details side by side
        half = width / 2
        details = Table(
            [[
                [
                    Paragraph("Student Details", heading_style),
                    self._rows_table(
                        [
                            ("Seat Number:", student.seat_number),
                            ("Shift:", student.shift),
                            ("Timing:", student.timing),
                            ("Address:", student.address),
                        ],
                        half - 4 * mm,
                    ),
                ],
                [
                    Paragraph("Payment Details", heading_style),
                    self._rows_table(
                        [
                            ("Fee Period:", f"{payment.month} {payment.year}"),
                            ("Payment Date:", _fmt_date(payment.payment_date)),
                            ("Payment Mode:", payment.payment_method.value),
                            ("Reference:", payment.transaction_reference or "-"),
                            ("Monthly Fee:", _fmt_amount(student.monthly_fees)),
                        ],
                        half - 4 * mm,
                    ),
                ],
            ]],
            colWidths=[half, half],
        )
        details.setStyle(TableStyle([("VALIGN", (0, 0), (-1, -1), "TOP")]))
        elements.append(details)

        # Duration
        elements.append(Paragraph("Duration", heading_style))
        duration = Table(
            [[
                Paragraph(f"From<br/><b>{_fmt_date(student.join_date)}</b>", body),
                Paragraph(f"To<br/><b>{_fmt_date(student.fees_paid_till)}</b>", right),
            ]],
            colWidths=[half, half],
        )
        duration.setStyle(TableStyle([("BACKGROUND", (0, 0), (-1, -1), PANEL)]))
        elements.append(duration)
        elements.append(Spacer(1, 6 * mm))

        # Amount
        amount_style = ParagraphStyle("Amount", parent=body, fontSize=18, leading=22, textColor=on_accent)
        words_style = ParagraphStyle("Words", parent=right, textColor=on_accent)
        amount = Table(
            [[
                Paragraph(f"Amount Paid<br/><b>{_fmt_amount(payment.amount)}</b>", amount_style),
                Paragraph(f"In Words<br/><b>{escape(document.amount_in_words)}</b>", words_style),
            ]],
            colWidths=[half, half],
        )
        amount_table_style = [
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("TOPPADDING", (0, 0), (-1, -1), 10),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 10),
        ]
        if styled:
            amount_table_style.append(("BACKGROUND", (0, 0), (-1, -1), accent))
        else:
            amount_table_style.append(("BOX", (0, 0), (-1, -1), 1, colors.black))
        amount.setStyle(TableStyle(amount_table_style))
        elements.append(amount)
        elements.append(Spacer(1, 18 * mm))

        # Signatures
        signatures = Table(
            [["Student Signature", "Authorized Signature"]],
            colWidths=[half, half],
        )
        signatures.setStyle(TableStyle([
            ("LINEABOVE", (0, 0), (0, 0), 1, MUTED),
            ("LINEABOVE", (1, 0), (1, 0), 1, MUTED),
            ("ALIGN", (1, 0), (1, 0), "RIGHT"),
            ("FONTNAME", (0, 0), (-1, -1), "Helvetica-Bold"),
        ]))
        elements.append(signatures)
        elements.append(Spacer(1, 8 * mm))

        # Footer
        elements.append(Paragraph(
            f"Thank you for choosing {escape(self.library_name)}",
            ParagraphStyle("Thanks", parent=body, alignment=TA_CENTER, textColor=MUTED),
        ))
        elements.append(Paragraph(
            f"Generated on: {document.issue_date:%d/%m/%Y %H:%M:%S}",
            small,
        ))
        return elements

    @staticmethod
    def _rows_table(rows, width: float) -> Table:
        label_width = min(32 * mm, width / 2)
        table = Table(
            [[label, Paragraph(escape(str(value or "-")), CELL_STYLE)] for label, value in rows],
            colWidths=[label_width, width - label_width],
        )
        table.setStyle(TableStyle([
            ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
            ("FONTSIZE", (0, 0), (-1, -1), 9),
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
        ]))
        return table


def get_renderer() -> DocumentRenderer:
    """FastAPI dependency; override it to swap the rendering backend."""
    return ReportLabReceiptRenderer()
