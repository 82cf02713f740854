"""고객 레코드 Pydantic 스키마 정의.

Client record Pydantic schema definition.
ClientRecord is the immutable value the query engine reads. ORM rows are
converted into records before they leave the service layer, so callers
never hold a live session-bound object.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator


def to_utc(value: datetime) -> datetime:
    """시각을 UTC 기준 aware datetime으로 정규화합니다.

    Normalize a datetime to a timezone-aware UTC value.
    Naive values are read as UTC (SQLite returns naive datetimes even for
    timezone-aware columns).

    Args:
        value: 변환할 시각 (Datetime to normalize)

    Returns:
        datetime: UTC aware datetime
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class ClientRecord(BaseModel):
    """고객 레코드 스키마 (불변).

    Immutable client record schema.

    Attributes:
        id: 대리 키 (Surrogate key, assigned by the store)
        name: 고객 이름 (Client name, non-empty)
        cpf: 11자리 숫자 CPF (11-digit CPF, opaque exact-match key)
        income: 소득 (Income, non-negative)
        birth_date: 생년월일시 UTC (Birth instant, UTC)
        children: 자녀 수 (Children count, non-negative)
    """

    model_config = {"frozen": True, "from_attributes": True}

    id: int
    name: str = Field(..., min_length=1)
    cpf: str = Field(..., pattern=r"^\d{11}$")
    income: float = Field(..., ge=0)
    birth_date: datetime
    children: int = Field(..., ge=0)

    @field_validator("birth_date")
    @classmethod
    def _birth_date_as_utc(cls, value: datetime) -> datetime:
        return to_utc(value)
