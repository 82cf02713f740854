"""데이터베이스 엔진 및 세션 설정 모듈.

Database engine and session configuration module.
Sets up the async SQLAlchemy engine, session factory, and ORM base class
for the client store. PostgreSQL (asyncpg) is the default backend;
SQLite (aiosqlite) URLs are accepted for local runs and tests.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from app.config import settings


def engine_options(database_url: str) -> dict[str, Any]:
    """연결 URL에 맞는 엔진 옵션을 반환합니다.

    Build engine keyword arguments for the given URL.
    Pool sizing only applies to server databases; SQLite keeps the default pool.

    Args:
        database_url: 비동기 SQLAlchemy 연결 문자열 (Async SQLAlchemy URL)

    Returns:
        dict[str, Any]: create_async_engine 키워드 인자 (Engine keyword arguments)
    """
    if database_url.startswith("sqlite"):
        return {"echo": settings.DEBUG}

    # pool_pre_ping=True: 커넥션 풀에서 꺼낸 연결의 유효성을 사전 확인 (Validates connections before use)
    return {
        "echo": settings.DEBUG,
        "pool_pre_ping": True,
        "pool_size": 5,
        "max_overflow": 10,
    }


# 비동기 데이터베이스 엔진 — Async database engine
engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    **engine_options(settings.DATABASE_URL),
)

# 비동기 세션 팩토리 — Async session factory
# expire_on_commit=False: 커밋 후에도 객체 속성 접근 가능 (Allows attribute access after commit without refresh)
async_session: async_sessionmaker[AsyncSession] = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """SQLAlchemy 선언적 베이스 클래스.

    Declarative base class for all ORM models.
    All models inherit from this class to register with the metadata.
    """

    pass

