"""테스트 인프라 — 임시 SQLite DB, 세션, 샘플 고객 픽스처.

Test infrastructure — Temporary SQLite DB, session, and client fixtures.
Each test gets its own SQLite file through aiosqlite, so no database
server is required. Schema is created per engine; data is seeded per test.
"""

import os

# app.database 임포트 전에 설정 — must be set before app.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("QUERY_LOG_ENABLED", "true")

from collections.abc import AsyncGenerator
from datetime import datetime, timezone
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.database import Base
from app.models import *  # noqa: F401,F403 — register all models with metadata
from app.models.client import Client
from app.repositories.client_repository import client_repository
from app.schemas.client import ClientRecord
from app.seed import SAMPLE_CLIENTS, seed_clients
from app.utils.query_log import QueryLogger

CLARICE_CPF = "10919444522"


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진. 임시 파일 DB에 스키마를 생성합니다."""
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'clients.db'}", echo=False)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session
        await session.rollback()


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def clients(db: AsyncSession) -> list[Client]:
    """샘플 고객 10명을 생성합니다."""
    await seed_clients(db)
    return list(await client_repository.get_all(db))


@pytest_asyncio.fixture
async def add_client(db: AsyncSession):
    """고객 1명을 추가하는 헬퍼를 반환합니다."""
    async def _add(name: str, cpf: str, **fields: Any) -> Client:
        data: dict[str, Any] = {
            "name": name,
            "cpf": cpf,
            "income": 1000.0,
            "birth_date": datetime(1990, 1, 1, tzinfo=timezone.utc),
            "children": 0,
        }
        data.update(fields)
        return await client_repository.create(db, data)

    return _add


@pytest.fixture
def records() -> list[ClientRecord]:
    """샘플 고객과 같은 내용의 메모리 레코드 목록 (id 1부터)."""
    return [
        ClientRecord(
            id=index,
            name=name,
            cpf=cpf,
            income=income,
            birth_date=birth_date,
            children=children,
        )
        for index, (name, cpf, income, birth_date, children) in enumerate(SAMPLE_CLIENTS, start=1)
    ]


@pytest.fixture
def clarice() -> ClientRecord:
    """단일 고객 시나리오용 레코드."""
    return ClientRecord(
        id=1,
        name="Clarice Lispector",
        cpf=CLARICE_CPF,
        income=4000.0,
        birth_date=datetime(1920, 12, 10, tzinfo=timezone.utc),
        children=0,
    )


class FakeAxiomClient:
    """Axiom 클라이언트 대역 — 전송된 이벤트를 기록합니다."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.ingested: list[tuple[str, list[dict[str, Any]]]] = []

    def ingest_events(self, dataset: str, events: list[dict[str, Any]]) -> None:
        if self.fail:
            raise RuntimeError("axiom unavailable")
        self.ingested.append((dataset, events))

    @property
    def events(self) -> list[dict[str, Any]]:
        return [event for _, batch in self.ingested for event in batch]


@pytest.fixture
def axiom() -> FakeAxiomClient:
    return FakeAxiomClient()


@pytest.fixture
def recording_logger(axiom: FakeAxiomClient) -> QueryLogger:
    """이벤트를 FakeAxiomClient로 보내는 조회 로거."""
    return QueryLogger(client=axiom, dataset="client-queries", enabled=True)


@pytest.fixture
def failing_axiom() -> FakeAxiomClient:
    """전송 시 예외를 던지는 Axiom 클라이언트 대역."""
    return FakeAxiomClient(fail=True)
