"""Pytest fixtures for the notice dismissal backend."""

from __future__ import annotations

import shutil
from collections.abc import AsyncIterator, Iterator
from pathlib import Path

from alembic import command
from alembic.config import Config
import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from api.deps import get_db
from app import create_app
from core.config import settings
from services import RateLimiter
from support import InMemoryRedis
from services.notices import DismissalScope, NoticeDismissal


def _run_alembic_migrations(database_url: str) -> None:
    """Apply Alembic migrations to the given database URL."""
    backend_dir = Path(__file__).resolve().parents[1]
    alembic_cfg = Config(str(backend_dir / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(backend_dir / "alembic"))

    original_database_url = settings.database_url
    try:
        settings.database_url = database_url
        command.upgrade(alembic_cfg, "head")
    finally:
        settings.database_url = original_database_url


@pytest.fixture(scope="session")
def migrated_database_path(tmp_path_factory) -> Path:
    """Migrate a template SQLite database once per session."""
    db_path = tmp_path_factory.mktemp("sqlite") / "template.db"
    _run_alembic_migrations(f"sqlite+aiosqlite:///{db_path}")
    return db_path


@pytest.fixture()
def test_database_url(migrated_database_path: Path, tmp_path: Path) -> str:
    """Copy the migrated template so every test starts from empty tables."""
    db_path = tmp_path / "backend-test.db"
    shutil.copyfile(migrated_database_path, db_path)
    return f"sqlite+aiosqlite:///{db_path}"


@pytest_asyncio.fixture()
async def test_engine(test_database_url: str) -> AsyncIterator:
    engine = create_async_engine(
        test_database_url,
        connect_args={"check_same_thread": False},
    )
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_maker(test_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(test_engine, expire_on_commit=False)


@pytest_asyncio.fixture()
async def db_session(session_maker) -> AsyncIterator[AsyncSession]:
    """Provide a raw database session to tests."""
    async with session_maker() as session:
        yield session


@pytest.fixture()
def notices() -> list[NoticeDismissal]:
    return [
        NoticeDismissal("update_banner", "theme", DismissalScope.GLOBAL),
        NoticeDismissal("welcome_tour", "theme", DismissalScope.USER),
    ]


@pytest.fixture()
def app(session_maker, notices: list[NoticeDismissal]) -> Iterator[FastAPI]:
    """Create the FastAPI app with a test database dependency override."""
    application = create_app(notices)

    async def override_get_db() -> AsyncIterator[AsyncSession]:
        async with session_maker() as session:
            yield session

    application.dependency_overrides[get_db] = override_get_db
    application.state.rate_limiter = RateLimiter(InMemoryRedis(), limit=1_000, window_seconds=60)
    yield application


@pytest_asyncio.fixture()
async def async_client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client

