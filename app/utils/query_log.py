"""Axiom 고객 조회 로깅 모듈.

Axiom client-query logging module.
Builds one structured event per query and sends it to Axiom.
Logs: operation, record source, predicate, match count, duration, error reason.
Sensitive fields (cpf, password, token, secret) are automatically masked.
When Axiom is not configured, events go to the standard ``logging`` logger.
"""

import json
import logging
import re
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from axiom_py import Client as AxiomClient
from pydantic import BaseModel

from app.config import settings

logger = logging.getLogger(__name__)

# 마스킹 대상 필드 패턴 — Fields to mask in logged predicates
_SENSITIVE_KEYS = re.compile(
    r"(cpf|password|passwd|secret|token|authorization|api_key|apikey|credential)",
    re.IGNORECASE,
)


def _mask_dict(data: Any, depth: int = 0) -> Any:
    """민감 필드 자동 마스킹 — Recursively mask sensitive fields in dicts/lists."""
    if depth > 5:
        return "..."
    if isinstance(data, dict):
        return {
            k: "***" if _SENSITIVE_KEYS.search(k) else _mask_dict(v, depth + 1)
            for k, v in data.items()
        }
    if isinstance(data, list):
        return [_mask_dict(item, depth + 1) for item in data[:20]]
    return data


def _truncate(value: Any, max_len: int = 2000) -> Any:
    """로그 크기 제한 — Truncate large values to prevent oversized logs."""
    if isinstance(value, str) and len(value) > max_len:
        return value[:max_len] + "...(truncated)"
    return value


class QueryEvent:
    """조회 1회에 대한 로그 이벤트 빌더.

    Mutable log event for a single query; the caller fills in the match
    count once the result is known.
    """

    def __init__(self, operation: str, source: str, predicate: Any) -> None:
        self.operation: str = operation
        self.source: str = source
        self.predicate: Any = predicate
        self.match_count: int | None = None
        self.error: str | None = None

    def to_dict(self, duration_ms: float) -> dict[str, Any]:
        predicate = self.predicate
        if isinstance(predicate, BaseModel):
            predicate = predicate.model_dump(mode="json")
        elif not isinstance(predicate, dict):
            predicate = _truncate(repr(predicate), 500)

        event: dict[str, Any] = {
            "operation": self.operation,
            "source": self.source,
            "predicate": _mask_dict(predicate),
            "duration_ms": duration_ms,
        }
        if self.match_count is not None:
            event["match_count"] = self.match_count
        if self.error:
            event["error"] = self.error
        return event


class QueryLogger:
    """고객 조회를 Axiom에 로깅하는 로거.

    Logger that ships client-query events to Axiom, falling back to the
    standard logging module when no Axiom token/dataset is configured.
    """

    def __init__(
        self,
        client: AxiomClient | None = None,
        dataset: str | None = None,
        enabled: bool | None = None,
    ) -> None:
        self._dataset: str = dataset if dataset is not None else settings.AXIOM_DATASET
        self._enabled: bool = settings.QUERY_LOG_ENABLED if enabled is None else enabled
        self._client: AxiomClient | None = client

        if self._client is None and settings.AXIOM_API_TOKEN and self._dataset:
            self._client = AxiomClient(token=settings.AXIOM_API_TOKEN)

    @contextmanager
    def track(self, operation: str, source: str, predicate: Any) -> Iterator[QueryEvent]:
        """조회 실행 구간을 측정하고 종료 시 이벤트를 전송합니다.

        Time the enclosed query and emit its event on exit. Exceptions raised
        inside the block are recorded on the event and re-raised.

        Args:
            operation: 조회 연산 이름 (Operation name, e.g. "find_many")
            source: 레코드 소스 종류 (Record source kind: "memory" or "database")
            predicate: 조회 조건 (Predicate being evaluated)

        Yields:
            QueryEvent: 결과 수를 기록할 이벤트 (Event to record the match count on)
        """
        event = QueryEvent(operation, source, predicate)
        start_time = time.time()
        try:
            yield event
        except Exception as exc:
            event.error = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            duration_ms = round((time.time() - start_time) * 1000, 2)
            self.emit(event.to_dict(duration_ms))

    def emit(self, log_event: dict[str, Any]) -> None:
        """이벤트 1건을 전송합니다 — Send a single event."""
        if not self._enabled:
            return

        if self._client is None:
            logger.debug("client query %s", json.dumps(log_event, default=str))
            return

        # Axiom 전송 — Send to Axiom
        try:
            self._client.ingest_events(self._dataset, [log_event])
        except Exception:
            # 로깅 실패가 조회 결과에 영향주지 않도록 — Never break a query on log failure
            logger.warning("Axiom ingest failed for client query event", exc_info=True)


# 싱글턴 인스턴스 — Singleton instance
query_logger: QueryLogger = QueryLogger()
