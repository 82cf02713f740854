"""고객 조회 서비스 — 데이터베이스 기반 고객 조회 로직.

Client Query Service — database-backed client lookup logic.
Exposes the same find_one / find_many contract as ClientQueryEngine, but
lets the database evaluate the predicate through ClientRepository.
ORM rows are converted into immutable ClientRecord values before returning.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.client import Client
from app.repositories.client_repository import client_repository
from app.schemas.client import ClientRecord
from app.schemas.client_query import ClientPredicate, validate_predicate
from app.utils.query_log import QueryLogger, query_logger


class ClientQueryService:
    """고객 조회 비즈니스 로직을 처리하는 서비스.

    Service handling client lookups against the database store.
    Holds no per-query state; the session is supplied per call.
    """

    def __init__(self, logger: QueryLogger | None = None) -> None:
        self._logger: QueryLogger = logger or query_logger

    def _to_record(self, client: Client) -> ClientRecord:
        """고객 모델을 불변 레코드로 변환합니다.

        Convert a Client model instance to a ClientRecord.
        """
        return ClientRecord.model_validate(client)

    async def find_one(
        self,
        db: AsyncSession,
        predicate: ClientPredicate,
    ) -> ClientRecord | None:
        """조건과 일치하는 첫 번째 고객을 조회합니다.

        Retrieve the first matching client (lowest id), or None.
        Zero matches is not an error.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            predicate: 조회 조건 (Predicate to evaluate)

        Returns:
            ClientRecord | None: 첫 번째 일치 고객 또는 None (First match or None)

        Raises:
            InvalidPredicateError: 잘못된 조회 조건 (Malformed predicate)
        """
        with self._logger.track("find_one", "database", predicate) as event:
            client: Client | None = await client_repository.find_one(
                db, validate_predicate(predicate)
            )
            event.match_count = 0 if client is None else 1
        return None if client is None else self._to_record(client)

    async def find_many(
        self,
        db: AsyncSession,
        predicate: ClientPredicate,
    ) -> list[ClientRecord]:
        """조건과 일치하는 모든 고객을 조회합니다.

        Retrieve every matching client ordered by id; empty list when none match.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            predicate: 조회 조건 (Predicate to evaluate)

        Returns:
            list[ClientRecord]: 일치 고객 목록 (Matching clients)

        Raises:
            InvalidPredicateError: 잘못된 조회 조건 (Malformed predicate)
        """
        with self._logger.track("find_many", "database", predicate) as event:
            clients: list[Client] = await client_repository.find_many(
                db, validate_predicate(predicate)
            )
            event.match_count = len(clients)
        return [self._to_record(c) for c in clients]

    async def get_client(self, db: AsyncSession, client_id: int) -> ClientRecord | None:
        """ID로 고객을 조회합니다 — Retrieve a client by id, or None."""
        client: Client | None = await client_repository.get_by_id(db, client_id)
        return None if client is None else self._to_record(client)

    async def list_clients(self, db: AsyncSession) -> list[ClientRecord]:
        """전체 고객을 id 순으로 조회합니다 — Snapshot of every client, ordered by id.

        The returned list is a valid in-memory record source for ClientQueryEngine.
        """
        clients = await client_repository.get_all(db)
        return [self._to_record(c) for c in clients]

    async def count_clients(self, db: AsyncSession) -> int:
        """전체 고객 수 — Total number of clients."""
        return await client_repository.count(db)


# 싱글턴 인스턴스 — Singleton instance
client_query_service: ClientQueryService = ClientQueryService()
