"""레포지토리 패키지 — 데이터베이스 쿼리 계층.

Repository package — Database query layer.
BaseRepository supplies generic reads; ClientRepository translates
client predicates into SQL filters.
"""
