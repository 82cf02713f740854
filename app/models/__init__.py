"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata before tables are created.

Modules:
    client: 고객 (Client records keyed by id, identified by CPF)
"""

from app.models.client import Client

__all__ = [
    "Client",
]
