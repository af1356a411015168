"""Service test fixtures — async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - app.state.db_manager and app.state.identity_verifier replaced per client
    - Bearer tokens "token-<role>" resolve to the seeded user with that role

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
    - Fake identity verifier instead of HTTP mocking: the Supabase wire contract
      has its own tests in test_identity_provider.py
"""

import uuid
from datetime import datetime

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from sodav.core.domain_types import ProviderIdentity
from sodav.core.errors import IdentityProviderError
from sodav.db.base import Base
from sodav.infrastructure.database import get_db, DatabaseSessionManager
from sodav.main import app
from sodav.models.api_key import ApiKey
from sodav.models.user import User
from sodav.services.api_key_store import hash_api_key

ROLES = ("admin", "manager", "user", "listener")


class FakeIdentityVerifier:
    """Maps bearer tokens to identities; 'provider-down' simulates an outage."""

    def __init__(self):
        self.identities: dict[str, ProviderIdentity] = {}

    def register(self, token: str, user_id: str, email: str | None = None):
        self.identities[token] = ProviderIdentity(
            id=user_id, email=email, claims={"id": user_id, "role": "authenticated"},
        )

    async def verify_token(self, token: str) -> ProviderIdentity | None:
        if token == "provider-down":
            raise IdentityProviderError("connection refused", "transport")
        return self.identities.get(token)


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def identity_verifier():
    return FakeIdentityVerifier()


@pytest.fixture
async def client(test_engine, test_session_factory, identity_verifier):
    """FastAPI test client with DB and identity provider overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    app.state.db_manager = fake_manager
    app.state.identity_verifier = identity_verifier

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    del app.state.db_manager
    del app.state.identity_verifier


@pytest.fixture
async def seed_users(test_db, identity_verifier) -> dict[str, User]:
    """One user per role, each reachable with bearer token 'token-<role>'.

    'token-orphan' verifies with the identity provider but has no profile.
    """
    users = {}
    for role in ROLES:
        user = User(
            email=f"{role}@sodav.sn", full_name=f"{role.title()} Test",
            organization="SODAV", role=role,
        )
        test_db.add(user)
        users[role] = user
    await test_db.commit()
    for role, user in users.items():
        await test_db.refresh(user)
        identity_verifier.register(f"token-{role}", str(user.id), user.email)
    identity_verifier.register("token-orphan", str(uuid.uuid4()), "orphan@sodav.sn")
    return users


@pytest.fixture
def make_api_key(test_db):
    """Factory: insert an API key for a user and return its raw value."""
    async def _make(
        owner: User,
        permissions: list[str],
        *,
        raw_key: str | None = None,
        active: bool = True,
        expires_at: datetime | None = None,
        name: str = "test key",
    ) -> str:
        raw_key = raw_key or uuid.uuid4().hex + uuid.uuid4().hex
        test_db.add(ApiKey(
            user_id=owner.id,
            name=name,
            key_hash=hash_api_key(raw_key),
            key_prefix=raw_key[:8],
            permissions=permissions,
            active=active,
            expires_at=expires_at,
        ))
        await test_db.commit()
        return raw_key
    return _make
