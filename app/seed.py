"""초기 데이터 시드 스크립트 — 샘플 고객 생성.

Seed script — Creates the sample client set.
Run this script once to bootstrap the database with development data.

Usage:
    python -m app.seed

Creates:
    - tb_client 테이블 (tb_client table, if missing)
    - 10명의 샘플 고객 (10 sample clients, including Clarice Lispector / 10919444522)
"""

import asyncio
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.database import async_session, engine, Base
from app.models import Client  # noqa: F401 — register model with metadata
from app.repositories.client_repository import client_repository


def _utc(value: str) -> datetime:
    return datetime.fromisoformat(value).replace(tzinfo=timezone.utc)


# 샘플 고객 — (name, cpf, income, birth_date, children)
SAMPLE_CLIENTS: list[tuple[str, str, float, datetime, int]] = [
    ("Conceição Evaristo", "10619244881", 1500.0, _utc("2020-07-13T20:50:00"), 2),
    ("Lázaro Ramos", "10619244882", 2500.0, _utc("1996-12-23T07:00:00"), 2),
    ("Clarice Lispector", "10919444522", 4000.0, _utc("1920-12-10T00:00:00"), 0),
    ("Carolina Maria de Jesus", "10419244771", 7500.0, _utc("1996-12-23T07:00:00"), 0),
    ("Gilberto Gil", "10419344882", 2500.0, _utc("1949-05-05T07:00:00"), 4),
    ("Djamila Ribeiro", "10619244884", 4500.0, _utc("1975-11-10T07:00:00"), 1),
    ("Jorge Amado", "10619244885", 10000.0, _utc("1912-08-10T07:00:00"), 0),
    ("Toni Morrison", "10219344681", 10000.0, _utc("1940-02-23T07:00:00"), 0),
    ("Chimamanda Adichie", "10114274861", 1500.0, _utc("1956-09-23T07:00:00"), 2),
    ("Silvio Almeida", "10164334861", 4800.0, _utc("1970-09-23T07:00:00"), 2),
]


async def seed_clients(db: AsyncSession) -> int:
    """샘플 고객을 삽입합니다.

    Insert the sample clients into an empty table.

    Idempotent: 고객이 하나라도 있으면 건너뜁니다 (Skips if any client exists).

    Args:
        db: 비동기 데이터베이스 세션 (Async database session, not committed here)

    Returns:
        int: 삽입된 고객 수 (Number of clients inserted)
    """
    if await client_repository.count(db) > 0:
        return 0

    for name, cpf, income, birth_date, children in SAMPLE_CLIENTS:
        obj_data: dict[str, Any] = {
            "name": name,
            "cpf": cpf,
            "income": income,
            "birth_date": birth_date,
            "children": children,
        }
        await client_repository.create(db, obj_data)
    return len(SAMPLE_CLIENTS)


async def seed() -> None:
    """데이터베이스를 초기 데이터로 시드합니다.

    Seed the database with initial data.
    Creates tables if they don't exist, then inserts the sample clients.
    """
    # 테이블 생성 — DDL 실행 (Create all tables from ORM metadata)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as db:
        inserted: int = await seed_clients(db)
        if inserted == 0:
            print("Already seeded. Skipping.")
            return

        await db.commit()
        print(f"Seeded: {inserted} clients")


if __name__ == "__main__":
    asyncio.run(seed())
