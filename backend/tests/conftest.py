"""
Test fixtures.

Every test gets its own SQLite file under tmp_path, so nothing leaks
between tests and no environment variables are needed.
"""

import pytest
from fastapi.testclient import TestClient

from carebridge.config import Settings
from carebridge.db import Base, build_engine, build_session_maker
from carebridge.main import create_app

PASSWORD = "password123"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'carebridge.db'}",
        secret_key="test-secret",
        auto_create_tables=True,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    # with 블록 안에서 lifespan(테이블 생성)이 실행됨
    with TestClient(app) as c:
        yield c


@pytest.fixture
async def session_maker(settings):
    engine = build_engine(settings)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield build_session_maker(engine)
    await engine.dispose()


@pytest.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


def register(client, username, role, name=None):
    r = client.post(
        "/register",
        json={"username": username, "password": PASSWORD, "name": name or username.title(), "role": role},
    )
    assert r.status_code == 201, r.text
    return r.json()["user"]


def login_headers(client, username):
    r = client.post("/login", json={"username": username, "password": PASSWORD})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['token']}"}


@pytest.fixture
def make_user(client):
    """register + login 을 한 번에. (user dict, auth headers) 반환"""
    def _make(username, role, name=None):
        user = register(client, username, role, name)
        return user, login_headers(client, username)
    return _make
