"""
Receipt number generation.
Format: prefix + YY + MM + DD + last 4 digits of the epoch-millisecond clock.
Two receipts issued in the same millisecond-modulo-10000 window collide.
"""

from datetime import datetime
from typing import Optional

from library_desk.core.config import settings


def generate_receipt_number(now: Optional[datetime] = None, prefix: Optional[str] = None) -> str:
    """
    Build a receipt number such as PATCH2610171234.

    `now` defaults to the current local time; `prefix` defaults to the
    configured RECEIPT_PREFIX.
    """
    if now is None:
        now = datetime.now()
    if prefix is None:
        prefix = settings.receipt_prefix

    millis = int(now.timestamp()) * 1000 + now.microsecond // 1000
    return f"{prefix}{now:%y%m%d}{millis % 10000:04d}"
