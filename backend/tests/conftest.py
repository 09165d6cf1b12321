"""
Pytest configuration and fixtures for Chirpy API tests.

Provides:
- Async SQLite in-memory database setup
- FastAPI app with dependency overrides (cheap bcrypt cost for speed)
- AsyncClient for testing async endpoints
- Helpers for creating users and minting tokens
"""

import uuid
from datetime import timedelta

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker

from auth.dependencies import get_password_hasher
from auth.jwt_service import TokenService
from auth.password import PasswordHasher
from config import settings
from database import Base, get_db
from main import app
from models import User
from services.metrics import fileserver_hits

# bcrypt's minimum work factor keeps endpoint tests fast
TEST_BCRYPT_COST = 4


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(cost=TEST_BCRYPT_COST)


@pytest.fixture
def token_service() -> TokenService:
    return TokenService(issuer=settings.JWT_ISSUER)


@pytest_asyncio.fixture
async def async_client():
    """
    Create an AsyncClient pointing to the FastAPI app with an in-memory
    test database. The database is created fresh for each test and cleaned
    up after the test completes.

    Yields:
        httpx.AsyncClient: Async HTTP client for making requests to the app.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        future=True,
    )

    async_session = sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        future=True,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async def override_get_db():
        async with async_session() as session:
            yield session

    test_hasher = PasswordHasher(cost=TEST_BCRYPT_COST)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_password_hasher] = lambda: test_hasher
    fileserver_hits.reset()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    # Cleanup
    app.dependency_overrides.clear()
    fileserver_hits.reset()
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(async_client):
    """Session on the same in-memory database the client talks to."""
    db_gen = app.dependency_overrides[get_db]()
    db = await db_gen.__anext__()
    yield db
    await db_gen.aclose()


@pytest_asyncio.fixture
async def create_user(db_session, hasher):
    """Factory inserting a user row directly; returns the User."""

    async def _create(email: str = "walt@breakingbad.com", password: str = "04234"):
        user = User(email=email, hashed_password=hasher.hash(password))
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _create


@pytest.fixture
def auth_header(token_service):
    """Build an Authorization header carrying a token for ``user_id``."""

    def _header(user_id: uuid.UUID, lifetime: timedelta = timedelta(minutes=5), secret=None):
        token = token_service.mint(user_id, secret or settings.CHIRPY_SECRET, lifetime)
        return {"Authorization": f"Bearer {token}"}

    return _header

