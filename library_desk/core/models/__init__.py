from library_desk.core.models.receipt_log import ReceiptLog

__all__ = [
    "ReceiptLog",
]
