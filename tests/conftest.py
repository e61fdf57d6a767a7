from __future__ import annotations

from typing import Optional, Tuple

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from ideahub.config import settings
from ideahub.database import Database
from ideahub.main import create_app
from ideahub.models.idea import Category, Idea, IdeaStatus
from ideahub.models.user import Role, User
from ideahub.services.auth import create_access_token, hash_password
from ideahub.storage import Storage


@pytest.fixture(autouse=True)
def _test_settings(monkeypatch) -> None:
    """Cheap bcrypt rounds, and never reach Gemini."""
    monkeypatch.setattr(settings, "BCRYPT_ROUNDS", 4)
    monkeypatch.setattr(settings, "GEMINI_API_KEY", "")


@pytest_asyncio.fixture()
async def database():
    db = Database("sqlite+aiosqlite://")
    await db.create_all()
    yield db
    await db.dispose()


@pytest_asyncio.fixture()
async def storage(database):
    async with database.session_factory() as session:
        yield Storage(session)


@pytest_asyncio.fixture()
async def client(database):
    app = create_app(database)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


@pytest.fixture()
def make_user(database):
    """Insert a user in its own session; returns (user, bearer headers)."""

    async def _make(
        username: str = "alice",
        role: Role = Role.USER,
        password: str = "secret",
    ) -> Tuple[User, dict]:
        async with database.session_factory() as session:
            user = await Storage(session).create_user(
                username=username,
                email=f"{username}@example.com",
                password_hash=hash_password(password),
                full_name=username.title(),
                role=role,
            )
        headers = {"Authorization": f"Bearer {create_access_token(user)}"}
        return user, headers

    return _make


@pytest.fixture()
def make_idea(database):
    """Insert an idea in its own session, optionally moving it to a status."""

    async def _make(
        author_id: int,
        status: IdeaStatus = IdeaStatus.APPROVED,
        title: str = "Solar benches",
        category: Category = Category.ENVIRONMENT,
        reason: Optional[str] = None,
    ) -> Idea:
        async with database.session_factory() as session:
            storage = Storage(session)
            idea = await storage.create_idea(
                author_id=author_id,
                title=title,
                description="Benches that charge phones.",
                category=category,
            )
            if status != IdeaStatus.PENDING:
                idea = await storage.update_idea(idea, status=status, rejection_reason=reason)
        return idea

    return _make
