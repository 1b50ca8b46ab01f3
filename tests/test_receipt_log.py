"""Receipt log service tests against an in-memory database."""

from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from library_desk.api.v1.receipts import service
from library_desk.core.exceptions import ServiceError
from library_desk.receipts.composer import compose_receipt

from conftest import make_payment, make_student


async def test_duplicate_receipt_number_conflicts(db_session: AsyncSession, receipt_settings) -> None:
    now = datetime(2026, 10, 17, 10, 0, 0)
    first = compose_receipt(make_student(), make_payment(), receipt_settings, now=now)
    second = compose_receipt(make_student(enrollment_no="PL-002"), make_payment(), receipt_settings, now=now)
    assert first.receipt_number == second.receipt_number

    await service.save_receipt_log(db_session, first, "a.pdf")
    with pytest.raises(ServiceError) as exc_info:
        await service.save_receipt_log(db_session, second, "b.pdf")
    assert exc_info.value.status_code == 409


async def test_list_is_newest_first_and_filterable(db_session: AsyncSession, receipt_settings) -> None:
    for minute, enrollment in [(1, "PL-001"), (2, "PL-002"), (3, "PL-001")]:
        document = compose_receipt(
            make_student(enrollment_no=enrollment),
            make_payment(amount=Decimal(100 * minute)),
            receipt_settings,
            now=datetime(2026, 10, 17, 10, minute, minute),
        )
        await service.save_receipt_log(db_session, document, f"{minute}.pdf")

    logs = await service.list_receipt_logs(db_session)
    assert [log.file_name for log in logs] == ["3.pdf", "2.pdf", "1.pdf"]

    only_first = await service.list_receipt_logs(db_session, enrollment_no="PL-001")
    assert [log.amount for log in only_first] == [Decimal("300"), Decimal("100")]

    assert len(await service.list_receipt_logs(db_session, limit=1)) == 1


def test_receipt_file_name() -> None:
    now = datetime(2026, 10, 17, 10, 0, 0)
    name = service.generate_receipt_file_name(make_student(), make_payment(), now)
    assert name == f"RECEIPT_PL-001_October_2026_{int(now.timestamp() * 1000)}.pdf"
