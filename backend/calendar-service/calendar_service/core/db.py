import logging
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from calendar_service.core.config import settings

logger = logging.getLogger(__name__)

# SQLAlchemy Async Engine
engine: AsyncEngine = create_async_engine(
    settings.SQLALCHEMY_DATABASE_URL,
    echo=settings.SQL_ECHO,
    future=True,
)

# 세션 팩토리
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    expire_on_commit=False,
    autoflush=False,
    class_=AsyncSession,
)

# Base 클래스 (모든 모델의 부모)
Base = declarative_base()


async def get_db() -> AsyncIterator[AsyncSession]:
    """
    요청마다 세션을 열고 끝나면 닫는다.
    async_sessionmaker를 Depends에 직접 넘기면 FastAPI가 가변 키워드 인자를
    query parameter로 노출하므로 여기서 직접 세션을 만든다.
    """
    async with AsyncSessionLocal() as session:
        yield session


async def init_db(bind: AsyncEngine | None = None) -> None:
    """
    애플리케이션 시작 시 한 번 호출해서 모델 기반 테이블을 생성.
    이미 있으면 아무 일도 안 함 (CREATE TABLE IF NOT EXISTS 느낌).
    """
    # 모델 모듈을 import해야 Base.metadata에 테이블이 등록된다
    from calendar_service.models import allowance, booking, employee, holiday_type  # noqa: F401

    target = bind or engine
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ready (%s)", target.url.render_as_string(hide_password=True))
