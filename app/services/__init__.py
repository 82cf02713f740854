"""서비스 패키지 — 고객 조회 로직 계층.

Service package — Client query logic layer.
ClientQueryEngine evaluates predicates over in-memory records;
ClientQueryService runs the same predicates against the database
through ClientRepository.
"""
