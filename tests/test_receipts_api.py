import base64

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from library_desk.core.models import ReceiptLog

from conftest import FakeRenderer


def _student(enrollment_no: str = "PL-001", name: str = "Asha Verma") -> dict:
    return {
        "name": name,
        "father_name": "Raj Verma",
        "enrollment_no": enrollment_no,
        "seat_number": "A12",
        "shift": "Morning",
        "contact": "9876543210",
        "monthly_fees": "500",
        "join_date": "2026-01-05",
        "fees_paid_till": "2026-11-05",
    }


def _payment(amount: str = "1250") -> dict:
    return {
        "amount": amount,
        "payment_date": "2026-10-05",
        "month": "October",
        "year": 2026,
        "payment_method": "UPI",
    }


@pytest.mark.asyncio
async def test_generate_receipt_returns_pdf_and_logs_it(client: AsyncClient, db_session: AsyncSession) -> None:
    response = await client.post(
        "/api/v1/receipts",
        json={"student": _student(), "payment": _payment(), "settings": {"paper_size": "Letter"}},
    )
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    receipt_number = response.headers["x-receipt-number"]
    assert receipt_number.startswith("PATCH")
    assert response.content == f"%PDF-fake {receipt_number} Letter".encode()
    assert 'filename="RECEIPT_PL-001_October_2026_' in response.headers["content-disposition"]

    result = await db_session.execute(select(ReceiptLog).where(ReceiptLog.receipt_number == receipt_number))
    log = result.scalar_one_or_none()
    assert log is not None
    assert log.student_name == "Asha Verma"
    assert log.whatsapp_sent is False


@pytest.mark.asyncio
async def test_non_positive_amount_is_rejected(client: AsyncClient, renderer: FakeRenderer) -> None:
    response = await client.post("/api/v1/receipts", json={"student": _student(), "payment": _payment("0")})
    assert response.status_code == 422
    assert response.json()["detail"] == "Receipt amount must be a positive finite number"
    assert renderer.rendered == []


@pytest.mark.asyncio
async def test_render_failure_maps_to_bad_gateway(client: AsyncClient, renderer: FakeRenderer) -> None:
    renderer.fail_for.add("PL-009")
    response = await client.post(
        "/api/v1/receipts", json={"student": _student("PL-009"), "payment": _payment()}
    )
    assert response.status_code == 502
    assert "cannot render PL-009" in response.json()["detail"]


@pytest.mark.asyncio
async def test_batch_continues_past_failures(client: AsyncClient, renderer: FakeRenderer) -> None:
    renderer.fail_for.add("PL-003")
    items = [
        {"student": _student(f"PL-00{i}", f"Student {i}"), "payment": _payment()}
        for i in range(1, 6)
    ]
    response = await client.post("/api/v1/receipts/batch", json={"items": items})
    assert response.status_code == 200
    data = response.json()

    assert data["total"] == 5
    assert data["succeeded"] == 4
    assert data["failed"] == 1
    assert len(data["documents"]) == 4
    for encoded in data["documents"]:
        assert base64.b64decode(encoded).startswith(b"%PDF-fake")

    failed = data["outcomes"][2]
    assert failed["succeeded"] is False
    assert failed["student_name"] == "Student 3"
    assert failed["file_name"] is None
    assert all(o["file_name"] for i, o in enumerate(data["outcomes"]) if i != 2)

    logs = await client.get("/api/v1/receipts/logs")
    assert logs.status_code == 200
    assert sorted(log["enrollment_no"] for log in logs.json()) == ["PL-001", "PL-002", "PL-004", "PL-005"]


@pytest.mark.asyncio
async def test_batch_requires_items(client: AsyncClient) -> None:
    response = await client.post("/api/v1/receipts/batch", json={"items": []})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_whatsapp_status_flow(client: AsyncClient) -> None:
    created = await client.post("/api/v1/receipts", json={"student": _student(), "payment": _payment()})
    receipt_number = created.headers["x-receipt-number"]

    marked = await client.post(f"/api/v1/receipts/logs/{receipt_number}/whatsapp", json={"sent": True})
    assert marked.status_code == 200
    assert marked.json()["whatsapp_sent"] is True
    assert marked.json()["whatsapp_sent_at"] is not None

    fetched = await client.get(f"/api/v1/receipts/logs/{receipt_number}")
    assert fetched.status_code == 200
    assert fetched.json()["whatsapp_sent"] is True

    unmarked = await client.post(f"/api/v1/receipts/logs/{receipt_number}/whatsapp", json={"sent": False})
    assert unmarked.json()["whatsapp_sent"] is False
    assert unmarked.json()["whatsapp_sent_at"] is None


@pytest.mark.asyncio
async def test_unknown_receipt_log(client: AsyncClient) -> None:
    response = await client.get("/api/v1/receipts/logs/PATCH0000000000")
    assert response.status_code == 404
    assert response.json()["detail"] == "Receipt not found"

    response = await client.post("/api/v1/receipts/logs/PATCH0000000000/whatsapp", json={})
    assert response.status_code == 404
