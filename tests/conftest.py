import os

os.environ.setdefault("ADMIN_USERNAME", "eva")
os.environ.setdefault("ADMIN_PASSWORD", "s3cret")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("PUBLIC_BASE_URL", "https://contest.example")

from datetime import datetime, timedelta

import httpx
import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from quiz_contest.core.db import get_session
from quiz_contest.core.security import create_admin_token
from quiz_contest.main import app
from quiz_contest.models import Base, Question, Submission


T0 = datetime(2025, 8, 15, 9, 0, 0)


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as s:
        yield s


@pytest.fixture
async def client(session_factory):
    async def _get_session():
        async with session_factory() as s:
            yield s

    app.dependency_overrides[get_session] = _get_session
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {create_admin_token('eva')}"}


@pytest.fixture
def add_question(session):
    async def _add(text="Who?", correct="A", **kw):
        q = Question(
            question_text=text,
            options={"A": "one", "B": "two", "C": "three", "D": "four"},
            correct_answer=correct,
            **kw,
        )
        session.add(q)
        await session.commit()
        return q

    return _add


@pytest.fixture
def add_submission(session):
    counter = {"n": 0}

    async def _add(mobile=None, score=0, reference_id=None, panchayath="Kottayam", name=None, minutes=None):
        counter["n"] += 1
        n = counter["n"]
        s = Submission(
            name=name or f"Participant {n}",
            mobile=mobile or f"90000000{n:02d}",
            panchayath=panchayath,
            reference_id=reference_id,
            answers={},
            score=score,
            created_at=T0 + timedelta(minutes=n if minutes is None else minutes),
        )
        session.add(s)
        await session.commit()
        return s

    return _add
