"""
Shared fixtures for the test suite.

Every test gets its own application wired to a private in-memory SQLite
database, so tests never see each other's users or tasks.
"""

from collections.abc import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from todo_api.config import Settings
from todo_api.db import create_engine_from_settings, create_session_factory, init_db
from todo_api.dependencies.services import get_mailer

from tests.fakes import FakeMailer

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url=TEST_DATABASE_URL,
        secret_key="test-secret-key",
        session_cookie_secure=False,
        email_user=None,
        email_pass=None,
    )


@pytest.fixture
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture
def app(settings: Settings, mailer: FakeMailer) -> FastAPI:
    """
    Create a new application instance with the fake mailer plugged in.
    """
    from main import create_app

    app_ = create_app(settings)
    app_.dependency_overrides[get_mailer] = lambda: mailer
    return app_


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """
    Test client bound to the app. Entering it runs the lifespan, which
    creates the tables.
    """
    with TestClient(app) as c:
        yield c


@pytest_asyncio.fixture
async def session_factory(
    settings: Settings,
) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Session factory over a freshly initialised database, for service tests."""
    engine = create_engine_from_settings(settings)
    await init_db(engine)
    yield create_session_factory(engine)
    await engine.dispose()
