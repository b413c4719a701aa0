"""Shared fixtures: an isolated in-memory SQLite database per test."""

import os

# required settings without defaults; must be set before app modules import `settings`
os.environ.setdefault("JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("ADMIN_PASSWORD", "test-admin-password")

from decimal import Decimal

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.config import settings
from app.core.dependencies import get_notifier
from app.core.security import create_access_token
from app.db.schemas.order import OrderCreateRequest
from app.db.session import Base, get_db
from app.main import app
from app.services.content_service import ContentStore
from app.services.order_service import OrderService
from app.services.order_store import OrderStore
from app.services.revenue_ledger import RevenueLedger
from tests.fakes import RecordingNotifier


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def order_store(db) -> OrderStore:
    return OrderStore(db)


@pytest.fixture
def content_store(db) -> ContentStore:
    return ContentStore(db)


@pytest.fixture
def ledger(content_store) -> RevenueLedger:
    return RevenueLedger(content_store)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def service(order_store, ledger, notifier) -> OrderService:
    return OrderService(order_store, ledger, notifier, enforce_transitions=False)


@pytest.fixture
def make_request():
    def _make(**overrides) -> OrderCreateRequest:
        data = {
            "customerName": "Jane",
            "customerPhone": "555-1111",
            "items": "2x Señorita Bread",
            "total": Decimal("15.00"),
        }
        data.update(overrides)
        return OrderCreateRequest(**data)
    return _make


@pytest.fixture
async def client(session_factory, notifier):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def staff_token() -> str:
    return create_access_token(settings.ADMIN_USERNAME)


@pytest.fixture
def auth_headers(staff_token) -> dict:
    return {"Authorization": f"Bearer {staff_token}"}
