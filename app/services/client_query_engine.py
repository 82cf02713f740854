"""고객 조회 엔진 — 조회 조건 평가 로직.

Client Query Engine — predicate evaluation logic.
Evaluates one ClientPredicate against a record source held in memory.
The engine is stateless: the record source is supplied per call and is
never mutated, so concurrent evaluations need no synchronization.

Usage:
    from app.services.client_query_engine import client_query_engine
    client_query_engine.find_many(NameContains(substring="li"), records)
"""

from collections.abc import Callable, Iterable
from typing import Any

from app.schemas.client import ClientRecord
from app.schemas.client_query import (
    BirthDateBetween,
    ChildrenLessThan,
    ClientPredicate,
    IncomeGreaterThan,
    NameAndCpfEquals,
    NameContains,
    NameEquals,
    fold_case,
    validate_predicate,
)
from app.utils.query_log import QueryLogger, query_logger


def _name_equals(predicate: NameEquals, record: ClientRecord) -> bool:
    return fold_case(record.name) == fold_case(predicate.name)


def _name_contains(predicate: NameContains, record: ClientRecord) -> bool:
    return fold_case(predicate.substring) in fold_case(record.name)


def _income_greater_than(predicate: IncomeGreaterThan, record: ClientRecord) -> bool:
    return record.income > predicate.threshold


def _children_less_than(predicate: ChildrenLessThan, record: ClientRecord) -> bool:
    return record.children < predicate.threshold


def _birth_date_between(predicate: BirthDateBetween, record: ClientRecord) -> bool:
    # start > end 이면 항상 False — a reversed interval matches nothing
    return predicate.start <= record.birth_date <= predicate.end


def _name_and_cpf_equals(predicate: NameAndCpfEquals, record: ClientRecord) -> bool:
    return record.cpf == predicate.cpf and fold_case(record.name) == fold_case(predicate.name)


# 조건 타입별 평가 함수 — Fixed dispatch table, one evaluator per predicate shape
_EVALUATORS: dict[type, Callable[[Any, ClientRecord], bool]] = {
    NameEquals: _name_equals,
    NameContains: _name_contains,
    IncomeGreaterThan: _income_greater_than,
    ChildrenLessThan: _children_less_than,
    BirthDateBetween: _birth_date_between,
    NameAndCpfEquals: _name_and_cpf_equals,
}


class ClientQueryEngine:
    """메모리 레코드 소스에 대해 조회 조건을 평가하는 엔진.

    Engine evaluating predicates against an in-memory record source.
    Results keep the source's iteration order.
    """

    def __init__(self, logger: QueryLogger | None = None) -> None:
        self._logger: QueryLogger = logger or query_logger

    def evaluate(self, predicate: ClientPredicate, record: ClientRecord) -> bool:
        """레코드 1건이 조건과 일치하는지 판단합니다.

        Decide whether a single record matches the predicate.

        Raises:
            InvalidPredicateError: 잘못된 조회 조건 (Malformed predicate)
        """
        validate_predicate(predicate)
        return _EVALUATORS[type(predicate)](predicate, record)

    def find_one(
        self,
        predicate: ClientPredicate,
        source: Iterable[ClientRecord],
    ) -> ClientRecord | None:
        """조건과 일치하는 첫 번째 레코드를 반환합니다.

        Return the first matching record in the source's iteration order,
        or None when nothing matches. Intended for key-like predicates
        (NameEquals, NameAndCpfEquals); with duplicate names the earliest
        record wins.

        Args:
            predicate: 조회 조건 (Predicate to evaluate)
            source: 레코드 소스 (Record source, iterated once)

        Returns:
            ClientRecord | None: 첫 번째 일치 레코드 또는 None (First match or None)

        Raises:
            InvalidPredicateError: 잘못된 조회 조건 (Malformed predicate)
        """
        with self._logger.track("find_one", "memory", predicate) as event:
            matches = _EVALUATORS[type(validate_predicate(predicate))]
            found: ClientRecord | None = next(
                (record for record in source if matches(predicate, record)), None
            )
            event.match_count = 0 if found is None else 1
        return found

    def find_many(
        self,
        predicate: ClientPredicate,
        source: Iterable[ClientRecord],
    ) -> list[ClientRecord]:
        """조건과 일치하는 모든 레코드를 반환합니다.

        Return every matching record, eagerly materialized, in source order.
        An empty list (never an error) means nothing matched.

        Args:
            predicate: 조회 조건 (Predicate to evaluate)
            source: 레코드 소스 (Record source, iterated once)

        Returns:
            list[ClientRecord]: 일치 레코드 목록 (Matching records)

        Raises:
            InvalidPredicateError: 잘못된 조회 조건 (Malformed predicate)
        """
        with self._logger.track("find_many", "memory", predicate) as event:
            matches = _EVALUATORS[type(validate_predicate(predicate))]
            results: list[ClientRecord] = [
                record for record in source if matches(predicate, record)
            ]
            event.match_count = len(results)
        return results


# 싱글턴 인스턴스 — Singleton instance
client_query_engine: ClientQueryEngine = ClientQueryEngine()
