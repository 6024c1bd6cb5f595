"""Pytest configuration and fixtures."""

import asyncio
import os
import sys

# Settings are read at import time; configure them before importing the app
os.environ.setdefault("ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("ADMIN_EMAILS", "admin@example.com, Support@Example.com")
os.environ.setdefault("CRON_SECRET", "test-cron-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("SIGNUP_STALE_AFTER_HOURS", "72")
os.environ.setdefault("EVENT_ACCOUNT_DAYS", "14")
os.environ.setdefault("EVENT_DEMO_CREDITS", "100")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import models  # noqa: F401
from auth.jwt import create_admin_token
from db import Base
from main import app

# Fix Windows asyncio event loop
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

TEST_DATABASE_URL = "sqlite+aiosqlite://"

ADMIN_EMAIL = "admin@example.com"
STRONG_PASSWORD = "Secret-Pass1"


def _enable_sqlite_transactions(engine) -> None:
    """Let SQLAlchemy emit BEGIN itself so SAVEPOINTs behave like PostgreSQL."""

    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    _enable_sqlite_transactions(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine):
    """Create a test database session."""
    session_factory = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def override_get_db(db_session):
    """Override get_db dependency for testing."""
    from api.deps import get_db

    async def _get_db():
        yield db_session

    app.dependency_overrides[get_db] = _get_db
    yield
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(override_get_db):
    """Create test client bound to the test event loop."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


def make_auth_headers(token: str) -> dict:
    """Helper function to create bearer auth headers."""
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers() -> dict:
    """Headers carrying a valid admin token."""
    return make_auth_headers(create_admin_token(ADMIN_EMAIL))


@pytest.fixture
def cron_headers() -> dict:
    return make_auth_headers(os.environ["CRON_SECRET"])


def make_signup_payload(email: str = "a@x.com", **overrides) -> dict:
    """Build a valid signup submission."""
    payload = {
        "organization_name": "Acme ApS",
        "contact_name": "Alex Jensen",
        "phone": "12 34 56 78",
        "email": email,
        "password": STRONG_PASSWORD,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def signup_payload():
    """Factory for valid signup submissions."""
    return make_signup_payload
