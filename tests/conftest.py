"""Shared fixtures: in-memory SQLite database, stored actors and an API client."""

import os

# Settings are read at import time, so the environment goes first
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_FORMAT", "console")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("SENTRY_DSN", "")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.api.deps import get_db
from app.db.base import Base
from app.main import app
from app.utils.constants import Role

from factories import make_job, make_user


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
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    """API client whose requests each get their own session on the test database."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def employer(db):
    return await make_user(db, "employer@acme.com", Role.EMPLOYER)


@pytest.fixture
async def other_employer(db):
    return await make_user(db, "other@globex.com", Role.EMPLOYER)


@pytest.fixture
async def admin(db):
    return await make_user(db, "admin@portal.com", Role.ADMIN)


@pytest.fixture
async def student(db):
    """Applicant with both documents uploaded."""
    return await make_user(
        db,
        "student@uni.edu",
        Role.STUDENT,
        resume_url="https://files.test/resume.pdf",
        certificate_url="https://files.test/certificate.pdf",
        mbti_type="INTJ",
    )


@pytest.fixture
async def job(db, employer):
    return await make_job(db, employer, mbti_types="INTJ, ENTP")
