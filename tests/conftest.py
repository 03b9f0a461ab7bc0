"""Shared pytest fixtures."""

from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import pytest
import yaml
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import wearly.db.models  # noqa: F401 - register all models on Base
from wearly.db.base import Base
from wearly.db.models import GeneralPost, Outfit, PostType, User
from wearly.lib.results import ContentSummary, ProfileSummary
from wearly.lib.hooks import hooks


@pytest.fixture
def temp_app_yaml(tmp_path):
    """Create a temporary app.yaml file for testing."""
    config_path = tmp_path / "app.yaml"

    def _create_config(config: dict):
        with open(config_path, "w") as f:
            yaml.safe_dump(config, f)
        return config_path

    return _create_config


@pytest.fixture
def mock_config_path(temp_app_yaml):
    """Fixture that patches get_config_path to return a custom path."""
    def _mock(config: dict):
        config_path = temp_app_yaml(config)
        patcher = patch("wearly.config.get_config_path", return_value=config_path)
        return patcher.start(), patcher

    return _mock


@pytest.fixture(autouse=True)
def clean_hooks():
    """Start and finish every test with an empty hook registry."""
    hooks.clear()
    yield
    hooks.clear()


# ---------------------------------------------------------------------------
# Database (one SQLite file per test)
# ---------------------------------------------------------------------------

@pytest.fixture
def db_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'wearly-test.db'}"


@pytest.fixture
async def db_engine(db_url):
    engine = create_async_engine(db_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_maker):
    async with session_maker() as session:
        yield session


# ---------------------------------------------------------------------------
# Row factories
#
# Factories return plain result objects rather than ORM rows: a store rollback
# expires every instance in the session and async sessions cannot lazy-load.
# ---------------------------------------------------------------------------

@pytest.fixture
def make_user(db_session):
    async def _make(username: str, full_name: str | None = None, **kwargs) -> ProfileSummary:
        user = User(username=username, full_name=full_name, **kwargs)
        db_session.add(user)
        await db_session.commit()
        return ProfileSummary.from_user(user)

    return _make


@pytest.fixture
def make_outfit(db_session):
    async def _make(owner: ProfileSummary, title: str = "Weekend look", **kwargs) -> ContentSummary:
        outfit = Outfit(user_id=owner.id, title=title, **kwargs)
        db_session.add(outfit)
        await db_session.commit()
        return ContentSummary.from_item(outfit)

    return _make


@pytest.fixture
def make_post(db_session):
    async def _make(owner: ProfileSummary, title: str = "Store opening", **kwargs) -> ContentSummary:
        kwargs.setdefault("post_type", PostType.EVENT.value)
        post = GeneralPost(user_id=owner.id, title=title, **kwargs)
        db_session.add(post)
        await db_session.commit()
        return ContentSummary.from_item(post)

    return _make


@pytest.fixture
def timestamps():
    """Strictly increasing timestamps for ordering assertions."""
    base = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
    return [base + timedelta(minutes=i) for i in range(10)]


@pytest.fixture
async def alice(make_user):
    return await make_user("alice", "Alice Martin")


@pytest.fixture
async def bob(make_user):
    return await make_user("bob", "Bob Chen")


@pytest.fixture
async def carol(make_user):
    return await make_user("carol")
