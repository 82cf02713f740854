"""고객 조회 조건(Predicate) Pydantic 스키마 정의.

Client query predicate Pydantic schema definitions.
Each predicate is a small frozen model tagged by a ``kind`` literal, so the
six filter shapes form one discriminated union (ClientPredicate) that can be
built directly in code or parsed from a plain mapping such as decoded JSON.

Usage:
    NameEquals(name="clarice lispector")
    parse_predicate({"kind": "income_greater_than", "threshold": 5000})

Building a model directly with bad field values raises pydantic's
ValidationError. Input from outside the program (JSON, query params) should
go through parse_predicate, whose only error is InvalidPredicateError.
"""

import math
from collections.abc import Mapping
from datetime import datetime
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError, field_validator

from app.schemas.client import to_utc
from app.utils.exceptions import InvalidPredicateError

_FROZEN = {"frozen": True}


class NameEquals(BaseModel):
    """이름 완전 일치 조건 (대소문자 무시).

    Case-insensitive full-name equality.
    """

    model_config = _FROZEN

    kind: Literal["name_equals"] = "name_equals"
    name: str


class NameContains(BaseModel):
    """이름 부분 일치 조건 (대소문자 무시). 빈 문자열은 모든 고객과 일치.

    Case-insensitive substring match. An empty substring matches every record.
    """

    model_config = _FROZEN

    kind: Literal["name_contains"] = "name_contains"
    substring: str


class IncomeGreaterThan(BaseModel):
    """소득 초과 조건 (엄격한 >).

    Strict ``income > threshold``.
    """

    model_config = _FROZEN

    kind: Literal["income_greater_than"] = "income_greater_than"
    threshold: float = Field(..., allow_inf_nan=False)


class ChildrenLessThan(BaseModel):
    """자녀 수 미만 조건 (엄격한 <).

    Strict ``children < threshold``. Zero or negative thresholds match nothing.
    """

    model_config = _FROZEN

    kind: Literal["children_less_than"] = "children_less_than"
    threshold: int


class BirthDateBetween(BaseModel):
    """생년월일 구간 조건 (양 끝 포함).

    Inclusive ``start <= birth_date <= end``. Bounds are normalized to UTC
    (naive values read as UTC). A reversed interval is valid and matches nothing.
    """

    model_config = _FROZEN

    kind: Literal["birth_date_between"] = "birth_date_between"
    start: datetime
    end: datetime

    @field_validator("start", "end")
    @classmethod
    def _bound_as_utc(cls, value: datetime) -> datetime:
        return to_utc(value)


class NameAndCpfEquals(BaseModel):
    """이름(대소문자 무시) + CPF(정확히 일치) 복합 조건.

    Case-insensitive name equality AND exact CPF equality.
    The CPF is compared as-is: no digit extraction, no formatting.
    """

    model_config = _FROZEN

    kind: Literal["name_and_cpf_equals"] = "name_and_cpf_equals"
    name: str
    cpf: str


# 판별 유니온 — Discriminated union over the six predicate shapes
ClientPredicate = Annotated[
    Union[
        NameEquals,
        NameContains,
        IncomeGreaterThan,
        ChildrenLessThan,
        BirthDateBetween,
        NameAndCpfEquals,
    ],
    Field(discriminator="kind"),
]

PREDICATE_TYPES: tuple[type[BaseModel], ...] = (
    NameEquals,
    NameContains,
    IncomeGreaterThan,
    ChildrenLessThan,
    BirthDateBetween,
    NameAndCpfEquals,
)

_predicate_adapter: TypeAdapter[ClientPredicate] = TypeAdapter(ClientPredicate)


def fold_case(value: str) -> str:
    """대소문자 무시 비교용 정규화 — Case folding shared by memory and SQL evaluation."""
    return value.lower()


def validate_predicate(predicate: Any) -> ClientPredicate:
    """조회 조건의 구조적 유효성을 검사합니다.

    Check that a predicate is one of the known shapes and that its parameters
    can be evaluated. Models built through pydantic validation always pass;
    this guards against foreign objects and ``model_construct`` bypasses.

    Args:
        predicate: 검사할 조회 조건 (Predicate to check)

    Returns:
        ClientPredicate: 동일한 조회 조건 (The same predicate, narrowed)

    Raises:
        InvalidPredicateError: 알 수 없는 타입 또는 평가 불가능한 파라미터
                               (Unknown type or parameters that cannot be evaluated)
    """
    if type(predicate) not in PREDICATE_TYPES:
        raise InvalidPredicateError(f"Unsupported predicate type: {type(predicate).__name__}")

    text_fields: dict[type, tuple[str, ...]] = {
        NameEquals: ("name",),
        NameContains: ("substring",),
        NameAndCpfEquals: ("name", "cpf"),
    }
    for field_name in text_fields.get(type(predicate), ()):
        if not isinstance(getattr(predicate, field_name), str):
            raise InvalidPredicateError(f"Predicate {field_name} must be text")

    if isinstance(predicate, IncomeGreaterThan):
        threshold = predicate.threshold
        if isinstance(threshold, bool) or not isinstance(threshold, (int, float)) or not math.isfinite(threshold):
            raise InvalidPredicateError(f"Income threshold must be a finite number, got {threshold!r}")

    if isinstance(predicate, ChildrenLessThan):
        threshold = predicate.threshold
        if isinstance(threshold, bool) or not isinstance(threshold, int):
            raise InvalidPredicateError(f"Children threshold must be an integer, got {threshold!r}")

    if isinstance(predicate, BirthDateBetween):
        # 레코드 생년월일은 UTC aware — naive 경계값은 비교 불가
        # Record birth dates are UTC-aware, so naive bounds are not comparable
        bounds = (predicate.start, predicate.end)
        if not all(isinstance(b, datetime) and b.tzinfo is not None for b in bounds):
            raise InvalidPredicateError("Birth date bounds must be timezone-aware datetimes")

    return predicate


def parse_predicate(data: Mapping[str, Any]) -> ClientPredicate:
    """매핑 데이터로부터 조회 조건을 생성합니다.

    Build a predicate from a plain mapping, dispatching on its ``kind`` key.

    Args:
        data: 조건 데이터 (Mapping with a ``kind`` key and the predicate's fields)

    Returns:
        ClientPredicate: 검증된 조회 조건 (Validated predicate)

    Raises:
        InvalidPredicateError: 알 수 없는 kind 또는 잘못된 필드 값
                               (Unknown kind or malformed field values)
    """
    try:
        return _predicate_adapter.validate_python(data)
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or "predicate"
        raise InvalidPredicateError(
            f"Invalid predicate at '{location}': {first['msg']}"
        ) from exc
