from datetime import date
from decimal import Decimal
from typing import AsyncGenerator, Iterable

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from library_desk.core.enums import PaperSize, PaymentMethod
from library_desk.core.exceptions import RenderError
from library_desk.core.schemas import PaymentRecord, ReceiptDocument, ReceiptSettings, StudentRecord
from library_desk.db.session import Base, get_db
from library_desk.main import app
from library_desk.receipts.renderer import get_renderer


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class FakeRenderer:
    """Renderer double: records calls and fails for the given enrollment numbers."""

    def __init__(self, fail_for: Iterable[str] = ()) -> None:
        self.fail_for = set(fail_for)
        self.rendered = []

    async def render(self, document: ReceiptDocument, paper_size: PaperSize) -> bytes:
        self.rendered.append(document.student.enrollment_no)
        if document.student.enrollment_no in self.fail_for:
            raise RenderError(f"cannot render {document.student.enrollment_no}")
        return f"%PDF-fake {document.receipt_number} {paper_size.value}".encode()


def make_student(**overrides) -> StudentRecord:
    data = {
        "name": "Asha Verma",
        "father_name": "Raj Verma",
        "enrollment_no": "PL-001",
        "seat_number": "A12",
        "shift": "Morning",
        "timing": "7 AM - 1 PM",
        "address": "12 MG Road, Jaipur",
        "contact": "98765 43210",
        "monthly_fees": Decimal("500"),
        "join_date": date(2026, 1, 5),
        "fees_paid_till": date(2026, 11, 5),
    }
    data.update(overrides)
    return StudentRecord(**data)


def make_payment(**overrides) -> PaymentRecord:
    data = {
        "amount": Decimal("1250"),
        "payment_date": date(2026, 10, 5),
        "month": "October",
        "year": 2026,
        "payment_method": PaymentMethod.UPI,
        "transaction_reference": "UPI-778812",
    }
    data.update(overrides)
    return PaymentRecord(**data)


@pytest.fixture()
def student() -> StudentRecord:
    return make_student()


@pytest.fixture()
def payment() -> PaymentRecord:
    return make_payment()


@pytest.fixture()
def receipt_settings() -> ReceiptSettings:
    return ReceiptSettings()


@pytest.fixture()
def renderer() -> FakeRenderer:
    return FakeRenderer()


@pytest.fixture()
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """In-memory SQLite session with all tables; overrides the FastAPI dependency."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:

        async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
            yield session

        app.dependency_overrides[get_db] = override_get_db
        yield session

    app.dependency_overrides.pop(get_db, None)
    await engine.dispose()


@pytest.fixture()
async def client(db_session: AsyncSession, renderer: FakeRenderer) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the FastAPI app, with the fake renderer."""
    app.dependency_overrides[get_renderer] = lambda: renderer
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.pop(get_renderer, None)
