"""조회 조건 스키마 및 파싱 테스트.

Predicate schema tests — parsing from mappings, validation errors, and
the immutable ClientRecord shape.
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from app.schemas.client import ClientRecord
from app.schemas.client_query import (
    BirthDateBetween,
    ChildrenLessThan,
    IncomeGreaterThan,
    NameAndCpfEquals,
    NameContains,
    NameEquals,
    parse_predicate,
    validate_predicate,
)
from app.utils.exceptions import ClientQueryError, InvalidPredicateError


class TestParsePredicate:
    """매핑 데이터로부터 조회 조건 생성."""

    @pytest.mark.parametrize("data, expected_type", [
        ({"kind": "name_equals", "name": "Clarice Lispector"}, NameEquals),
        ({"kind": "name_contains", "substring": ""}, NameContains),
        ({"kind": "income_greater_than", "threshold": 5000}, IncomeGreaterThan),
        ({"kind": "children_less_than", "threshold": 3}, ChildrenLessThan),
        ({"kind": "birth_date_between", "start": "1980-01-01T00:00:00Z",
          "end": "2000-12-31T23:59:59Z"}, BirthDateBetween),
        ({"kind": "name_and_cpf_equals", "name": "Clarice Lispector",
          "cpf": "10919444522"}, NameAndCpfEquals),
    ])
    def test_each_kind(self, data, expected_type):
        assert isinstance(parse_predicate(data), expected_type)

    def test_iso_bounds_are_utc(self):
        predicate = parse_predicate({
            "kind": "birth_date_between",
            "start": "1980-01-01T00:00:00-03:00",
            "end": "1980-01-02T00:00:00",
        })
        assert predicate.start == datetime(1980, 1, 1, 3, tzinfo=timezone.utc)
        assert predicate.end == datetime(1980, 1, 2, tzinfo=timezone.utc)

    def test_unknown_kind(self):
        with pytest.raises(InvalidPredicateError):
            parse_predicate({"kind": "name_like", "name": "x"})

    def test_missing_kind(self):
        with pytest.raises(InvalidPredicateError):
            parse_predicate({"name": "x"})

    def test_missing_field(self):
        with pytest.raises(InvalidPredicateError) as exc_info:
            parse_predicate({"kind": "name_and_cpf_equals", "name": "x"})
        assert "cpf" in exc_info.value.detail

    def test_malformed_date_bound(self):
        with pytest.raises(InvalidPredicateError):
            parse_predicate({"kind": "birth_date_between", "start": "yesterday", "end": "today"})

    @pytest.mark.parametrize("threshold", ["nan", "inf", "-inf", "abc"])
    def test_non_finite_income_threshold(self, threshold):
        with pytest.raises(InvalidPredicateError):
            parse_predicate({"kind": "income_greater_than", "threshold": threshold})

    def test_fractional_children_threshold(self):
        with pytest.raises(InvalidPredicateError):
            parse_predicate({"kind": "children_less_than", "threshold": 2.5})

    def test_not_a_mapping(self):
        with pytest.raises(InvalidPredicateError):
            parse_predicate("name_equals")  # type: ignore[arg-type]

    def test_reversed_interval_is_valid(self):
        """역순 구간은 오류가 아님 (빈 결과로 평가)."""
        predicate = parse_predicate({
            "kind": "birth_date_between",
            "start": "2000-01-01T00:00:00Z",
            "end": "1990-01-01T00:00:00Z",
        })
        assert validate_predicate(predicate) is predicate

    def test_error_hierarchy(self):
        with pytest.raises(ClientQueryError):
            parse_predicate({})


class TestPredicateModels:
    """조회 조건 모델."""

    def test_predicates_are_frozen(self):
        predicate = NameEquals(name="x")
        with pytest.raises(ValidationError):
            predicate.name = "y"

    def test_predicates_are_hashable_values(self):
        assert NameContains(substring="li") == NameContains(substring="li")
        assert hash(NameContains(substring="li")) == hash(NameContains(substring="li"))

    def test_validate_rejects_foreign_object(self):
        with pytest.raises(InvalidPredicateError):
            validate_predicate("name_equals")

    def test_validate_rejects_non_text_name(self):
        with pytest.raises(InvalidPredicateError):
            validate_predicate(NameEquals.model_construct(name=None))

    @pytest.mark.parametrize("model, data", [
        (IncomeGreaterThan, {"threshold": float("nan")}),
        (ChildrenLessThan, {"threshold": 2.5}),
        (BirthDateBetween, {"start": "x", "end": "2000-01-01T00:00:00Z"}),
    ])
    def test_direct_build_vs_parse_errors(self, model, data):
        # 직접 생성은 pydantic 오류, parse_predicate는 InvalidPredicateError
        with pytest.raises(ValidationError):
            model(**data)
        kind = model.model_fields["kind"].default
        with pytest.raises(InvalidPredicateError):
            parse_predicate({"kind": kind, **data})


class TestClientRecord:
    """고객 레코드 스키마."""

    def _data(self, **overrides):
        data = {
            "id": 1,
            "name": "Clarice Lispector",
            "cpf": "10919444522",
            "income": 4000.0,
            "birth_date": datetime(1920, 12, 10),
            "children": 0,
        }
        data.update(overrides)
        return data

    def test_naive_birth_date_read_as_utc(self):
        record = ClientRecord(**self._data())
        assert record.birth_date.tzinfo is not None
        assert record.birth_date == datetime(1920, 12, 10, tzinfo=timezone.utc)

    def test_record_is_immutable(self):
        record = ClientRecord(**self._data())
        with pytest.raises(ValidationError):
            record.income = 1.0

    @pytest.mark.parametrize("overrides", [
        {"name": ""},
        {"cpf": "109.194.445-22"},
        {"cpf": "1091944452"},
        {"income": -1.0},
        {"children": -1},
    ])
    def test_invalid_fields(self, overrides):
        with pytest.raises(ValidationError):
            ClientRecord(**self._data(**overrides))
