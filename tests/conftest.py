import os

os.environ.setdefault("ENVIRONMENT", "development")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, select
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import Session
from sqlalchemy.pool import NullPool

from friendship_api.common import get_current_user
from friendship_api.config import settings
from friendship_api.database import Base
from friendship_api.init_db import get_db
from friendship_api.main import app
from friendship_api.models import Friendship, User
from friendship_api.schemas.friends import FriendshipStatus


class Caller:
    """Identity handed to the app in place of a verified token."""

    def __init__(self):
        self.identity = {}

    def login(self, user):
        self.identity = {"uid": f"firebase-uid-{user.id}", settings.user_id_claim: str(user.id)}

    def logout(self):
        self.identity = {}


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'friendship.db'}"


@pytest.fixture
def sync_engine(db_url):
    engine = create_engine(db_url)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def caller():
    return Caller()


@pytest.fixture
def client(sync_engine, db_url, caller):
    # NullPool: every request opens its connection on the loop that serves it
    async_engine = create_async_engine(db_url.replace("sqlite://", "sqlite+aiosqlite://", 1), poolclass=NullPool)
    TestingSessionLocal = async_sessionmaker(
        bind=async_engine, class_=AsyncSession, autoflush=False, expire_on_commit=False
    )

    async def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            await db.close()

    async def override_get_current_user():
        return caller.identity

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = override_get_current_user
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(sync_engine):
    def _make_user(username, profile_picture=None):
        with Session(sync_engine, expire_on_commit=False) as session:
            user = User(username=username, profile_picture=profile_picture)
            session.add(user)
            session.commit()
            return user
    return _make_user


@pytest.fixture
def make_friendship(sync_engine):
    def _make_friendship(user, friend, status=FriendshipStatus.PENDING):
        with Session(sync_engine, expire_on_commit=False) as session:
            friendship = Friendship(user_id=user.id, friend_id=friend.id, status=status)
            session.add(friendship)
            session.commit()
            return friendship
    return _make_friendship


@pytest.fixture
def load_friendships(sync_engine):
    def _load_friendships():
        with Session(sync_engine) as session:
            rows = session.execute(select(Friendship).order_by(Friendship.id)).scalars().all()
            return [(row.id, row.user_id, row.friend_id, row.status) for row in rows]
    return _load_friendships
