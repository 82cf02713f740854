"""고객 SQLAlchemy ORM 모델 정의.

Client SQLAlchemy ORM model definition.
A client is identified by its CPF (Brazilian tax identifier) and keyed
by a surrogate integer id assigned by the database.

Tables:
    - tb_client: 고객 레코드 (Client records)
"""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, validates

from app.database import Base
from app.schemas.client import to_utc


class Client(Base):
    """고객 모델 — 조회 엔진이 읽는 유일한 엔티티.

    Client model — the only entity read by the query engine.
    Rows are written by an external write path (or the seed script) and
    never mutated by the query layer.

    Attributes:
        id: 대리 키, 자동 증가 (Surrogate key, autoincrement, never reused)
        name: 고객 이름 (Client full name)
        cpf: CPF 세금 식별자, 11자리 숫자 문자열 (11-digit CPF tax identifier)
        income: 소득 (Non-negative income)
        birth_date: 생년월일시 UTC (Birth instant in UTC)
        children: 자녀 수 (Number of children, non-negative)
    """

    __tablename__ = "tb_client"

    # 고객 고유 식별자 — BigInteger는 SQLite에서 자동 증가되지 않으므로 Integer 변형 사용
    # (BigInteger does not autoincrement on SQLite, so fall back to Integer there)
    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    # 고객 이름 — Client display name (max 255 chars, required)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # CPF — 고객당 하나, 중복 불가 (Unique per client)
    cpf: Mapped[str] = mapped_column(String(11), unique=True, nullable=False)
    income: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    # 생년월일시 — Birth instant (timezone-aware, stored as UTC)
    birth_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    children: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    @validates("birth_date")
    def _birth_date_as_utc(self, key: str, value: datetime) -> datetime:
        # SQLite는 오프셋을 버리므로 쓰기 시점에 UTC로 변환
        # (SQLite drops the offset, so convert to UTC on write)
        return to_utc(value)
