"""고객 레포지토리 — 조회 조건을 SQL 필터로 변환하는 쿼리 계층.

Client Repository — translates client predicates into SQL filters.
Each of the six predicate shapes maps to one native SQLAlchemy expression,
so the database evaluates the filter with the same semantics as the
in-memory ClientQueryEngine. Results are ordered by id, the store's
natural order.
"""

from sqlalchemy import ColumnElement, Select, String, and_, false, func, select, true
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.client import Client
from app.repositories.base import BaseRepository
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

# children 컬럼(Integer)의 최댓값 — 이보다 큰 임계값은 바인딩 시 오버플로
# (Largest value of the Integer children column; larger thresholds overflow when bound)
_CHILDREN_MAX = 2**31 - 1


def build_filter(predicate: ClientPredicate) -> ColumnElement[bool]:
    """조회 조건을 SQLAlchemy WHERE 절 표현식으로 변환합니다.

    Translate a predicate into a SQLAlchemy WHERE expression over tb_client.

    Args:
        predicate: 조회 조건 (Validated predicate)

    Returns:
        ColumnElement[bool]: WHERE 절 표현식 (Boolean filter expression)

    Raises:
        InvalidPredicateError: 잘못된 조회 조건 (Malformed predicate)
    """
    validate_predicate(predicate)
    folded_name = func.lower(Client.name, type_=String)

    if isinstance(predicate, NameEquals):
        return folded_name == fold_case(predicate.name)
    if isinstance(predicate, NameContains):
        # autoescape — 입력의 '%', '_'는 와일드카드가 아닌 문자로 취급
        # ('%' and '_' in the input are matched literally)
        return folded_name.contains(fold_case(predicate.substring), autoescape=True)
    if isinstance(predicate, IncomeGreaterThan):
        return Client.income > predicate.threshold
    if isinstance(predicate, ChildrenLessThan):
        if predicate.threshold <= 0:
            return false()
        if predicate.threshold > _CHILDREN_MAX:
            return true()
        return Client.children < predicate.threshold
    if isinstance(predicate, BirthDateBetween):
        # BETWEEN은 대칭이 아님 — start > end 이면 빈 결과
        # (BETWEEN is not symmetric: a reversed interval yields no rows)
        return Client.birth_date.between(predicate.start, predicate.end)
    # NameAndCpfEquals — validate_predicate가 나머지 타입을 이미 거부함
    return and_(
        folded_name == fold_case(predicate.name),
        Client.cpf == predicate.cpf,
    )


class ClientRepository(BaseRepository[Client]):
    """고객 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the tb_client table.
    """

    def __init__(self) -> None:
        """ClientRepository를 초기화합니다.

        Initialize the ClientRepository with the Client model.
        """
        super().__init__(Client)

    def _query(self, predicate: ClientPredicate) -> Select:
        return select(Client).where(build_filter(predicate)).order_by(Client.id)

    async def find_one(
        self,
        db: AsyncSession,
        predicate: ClientPredicate,
    ) -> Client | None:
        """조건과 일치하는 첫 번째 고객을 조회합니다.

        Retrieve the matching client with the lowest id, or None.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            predicate: 조회 조건 (Predicate to evaluate)

        Returns:
            Client | None: 첫 번째 일치 고객 또는 None (First match or None)
        """
        result = await db.execute(self._query(predicate).limit(1))
        return result.scalars().first()

    async def find_many(
        self,
        db: AsyncSession,
        predicate: ClientPredicate,
    ) -> list[Client]:
        """조건과 일치하는 모든 고객을 id 순으로 조회합니다.

        Retrieve every matching client, ordered by id.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            predicate: 조회 조건 (Predicate to evaluate)

        Returns:
            list[Client]: 일치 고객 목록 (Matching clients, possibly empty)
        """
        result = await db.execute(self._query(predicate))
        return list(result.scalars().all())


# 싱글턴 인스턴스 — Singleton instance
client_repository: ClientRepository = ClientRepository()
