"""
Batch receipt generation.

Items are processed one at a time, in input order. A failure while composing
or rendering one item is logged and recorded in the outcome list; the batch
always runs to the end of its input.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

from library_desk.core.config import settings as app_settings
from library_desk.core.schemas import PaymentRecord, ReceiptDocument, ReceiptSettings, StudentRecord

from .composer import compose_receipt
from .renderer import DocumentRenderer

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True)
class ItemOutcome:
    index: int
    student_name: str
    succeeded: bool
    receipt_number: Optional[str] = None
    error: Optional[str] = None


@dataclass
class BatchResult:
    """Successful documents in input order, plus one outcome per input item."""

    documents: List[bytes] = field(default_factory=list)
    receipts: List[ReceiptDocument] = field(default_factory=list)
    outcomes: List[ItemOutcome] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return len(self.documents)

    @property
    def failed(self) -> int:
        return self.total - self.succeeded


class BatchReceiptOrchestrator:
    def __init__(self, renderer: DocumentRenderer, delay_seconds: Optional[float] = None) -> None:
        self.renderer = renderer
        self.delay_seconds = app_settings.batch_delay_seconds if delay_seconds is None else delay_seconds

    async def generate(
        self,
        items: Sequence[Tuple[StudentRecord, PaymentRecord]],
        settings: ReceiptSettings,
        on_progress: Optional[ProgressCallback] = None,
    ) -> BatchResult:
        result = BatchResult()
        total = len(items)

        for index, (student, payment) in enumerate(items):
            receipt_number: Optional[str] = None
            try:
                document = compose_receipt(student, payment, settings)
                receipt_number = document.receipt_number
                pdf = await self.renderer.render(document, settings.paper_size)
            except Exception as exc:
                logger.error(
                    "Receipt %d/%d for %s failed: %s", index + 1, total, student.name, exc
                )
                result.outcomes.append(
                    ItemOutcome(
                        index=index,
                        student_name=student.name,
                        succeeded=False,
                        receipt_number=receipt_number,
                        error=str(exc),
                    )
                )
            else:
                result.documents.append(pdf)
                result.receipts.append(document)
                result.outcomes.append(
                    ItemOutcome(
                        index=index,
                        student_name=student.name,
                        succeeded=True,
                        receipt_number=receipt_number,
                    )
                )
                if on_progress is not None:
                    on_progress(result.succeeded, total)

            if index < total - 1:
                await asyncio.sleep(self.delay_seconds)

        logger.info("Batch finished: %d of %d receipts generated", result.succeeded, total)
        return result
