from contextlib import asynccontextmanager
from datetime import date

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from calendar_service.core.db import get_db, init_db
from calendar_service.core.locks import KeyedLockRegistry
from calendar_service.main import app
from calendar_service.models.allowance import AnnualAllowance
from calendar_service.models.employee import Employee
from calendar_service.models.holiday_type import HolidayType
from calendar_service.services.ledger import HolidayLedger

VACATION = 1
HOURS = 2


@pytest_asyncio.fixture
async def engine():
    # 테스트마다 새 in-memory DB
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
        autoflush=False,
        class_=AsyncSession,
    )


async def seed(factory) -> None:
    """
    alice, bob / Vacation(일 단위, 2024년 20일) / Hours(시간 단위, 2024년 40시간)
    """
    async with factory() as session:
        session.add_all(
            [
                Employee(username="alice", start_date=date(2020, 1, 1)),
                Employee(username="bob", start_date=date(2021, 6, 1)),
                HolidayType(id=VACATION, name="Vacation", is_hourly=False),
                HolidayType(id=HOURS, name="Hours", is_hourly=True),
            ]
        )
        await session.flush()
        session.add_all(
            [
                AnnualAllowance(holiday_type_id=VACATION, quantity=20, year=2024),
                AnnualAllowance(holiday_type_id=HOURS, quantity=40, year=2024),
            ]
        )
        await session.commit()


@pytest_asyncio.fixture
async def seeded(session_factory):
    await seed(session_factory)
    return session_factory


@pytest_asyncio.fixture
async def session(seeded):
    async with seeded() as session:
        yield session


@pytest_asyncio.fixture
async def ledger(session):
    return HolidayLedger(session, KeyedLockRegistry())


@asynccontextmanager
async def api_client(session_factory, raise_app_exceptions=True):
    """
    테스트 DB 세션과 새 락 레지스트리로 앱을 띄운 httpx 클라이언트.
    raise_app_exceptions=False면 처리되지 않은 예외도 500 응답으로 받는다.
    """
    async def _get_test_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_test_db
    app.state.booking_locks = KeyedLockRegistry()

    transport = ASGITransport(app=app, raise_app_exceptions=raise_app_exceptions)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(session_factory):
    async with api_client(session_factory) as ac:
        yield ac
