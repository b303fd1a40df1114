"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Provides pre-configured HTTPException subclasses for the error kinds the
request lifecycle reports. Services raise them directly; FastAPI renders
them as ``{"detail": ...}`` responses.

Usage:
    from ertis.utils.exceptions import NotFoundError, IllegalTransitionError
    raise NotFoundError("Request not found")
    raise IllegalTransitionError("pending -> completed is not allowed")
"""

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 요청한 리소스를 찾을 수 없을 때 사용.

    404 Not Found exception.
    Raised when a request, employee, user or notification id is unknown.

    Args:
        detail: 오류 메시지 (Error message, default: "Resource not found")
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class DuplicateError(HTTPException):
    """409 Conflict 예외 — 중복 리소스 생성 시도 시 사용.

    409 Conflict exception.
    Raised when attempting to create a resource that violates a uniqueness constraint
    (e.g. duplicate email, second employee profile for the same user).

    Args:
        detail: 오류 메시지 (Error message, default: "Resource already exists")
    """

    def __init__(self, detail: str = "Resource already exists") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ForbiddenError(HTTPException):
    """403 Forbidden 예외 — 역할 또는 소유권 위반 시 사용.

    403 Forbidden exception.
    Raised on a role violation (citizen mutating a request, employee using an
    admin-only transition) or an ownership violation (employee acting on a
    request assigned to someone else).

    Args:
        detail: 오류 메시지 (Error message, default: "Insufficient permissions")
    """

    def __init__(self, detail: str = "Insufficient permissions") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class UnauthorizedError(HTTPException):
    """401 Unauthorized 예외 — 인증 실패 시 사용.

    401 Unauthorized exception.
    Raised when authentication is missing, invalid, or expired.

    Args:
        detail: 오류 메시지 (Error message, default: "Authentication required")
    """

    def __init__(self, detail: str = "Authentication required") -> None:
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class BadRequestError(HTTPException):
    """400 Bad Request 예외 — 잘못된 요청 데이터 시 사용.

    400 Bad Request exception.
    Raised when the request data is invalid beyond what Pydantic validation catches
    (e.g. unknown category key).

    Args:
        detail: 오류 메시지 (Error message, default: "Bad request")
    """

    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class IllegalTransitionError(HTTPException):
    """400 예외 — 상태 전이 그래프에 없는 전이 요청 시 사용.

    Raised when the requested (current -> target) status pair is not an edge
    of the lifecycle graph, or is reserved for the assignment dispatcher.

    Args:
        detail: 오류 메시지 (Error message)
    """

    def __init__(self, detail: str = "Illegal status transition") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class InvalidStateError(HTTPException):
    """409 예외 — 현재 상태가 작업의 전제 조건을 만족하지 않을 때 사용.

    Raised when an operation's precondition on the current status is not met
    (e.g. assigning a request that is not pending).

    Args:
        detail: 오류 메시지 (Error message)
    """

    def __init__(self, detail: str = "Operation not allowed in the current state") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ConflictError(HTTPException):
    """409 예외 — 동일 요청에 대한 동시 변경 경쟁에서 패배했을 때 사용.

    Raised when the request changed between the moment it was read and the
    moment the update was written (stale version).

    Args:
        detail: 오류 메시지 (Error message)
    """

    def __init__(self, detail: str = "Request was modified concurrently") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)
