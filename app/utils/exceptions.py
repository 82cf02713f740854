"""고객 조회 예외 클래스 모듈.

Client query exception classes module.
"Not found" is never an error in this package: lookups return None or an
empty list. The only failure a caller sees is a structurally invalid predicate.

Usage:
    from app.utils.exceptions import InvalidPredicateError
    raise InvalidPredicateError("Unknown predicate kind: 'name_like'")
"""


class ClientQueryError(Exception):
    """고객 조회 계층의 기본 예외.

    Base exception for the client query layer.

    Args:
        detail: 오류 메시지 (Error message, default: "Client query failed")
    """

    def __init__(self, detail: str = "Client query failed") -> None:
        super().__init__(detail)
        self.detail: str = detail


class InvalidPredicateError(ClientQueryError):
    """잘못된 조회 조건 예외 — 조건 파라미터가 구조적으로 유효하지 않을 때 사용.

    Raised when a predicate's parameters are structurally invalid
    (unknown predicate type, unparsable payload, non-finite threshold,
    non-comparable date bounds). Distinguishes upstream data-entry mistakes
    from legitimate empty results.

    Args:
        detail: 오류 메시지 (Error message, default: "Invalid predicate")
    """

    def __init__(self, detail: str = "Invalid predicate") -> None:
        super().__init__(detail)
