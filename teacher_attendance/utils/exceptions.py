"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Provides pre-configured HTTPException subclasses for common error patterns
and for the attendance-engine failure taxonomy (schedule resolution, QR
token validation). Services raise these directly; routers only re-map the
schedule-resolution family where an endpoint contract demands a different
status code.

Usage:
    from teacher_attendance.utils.exceptions import NotFoundError, NonWorkingDayError
    raise NotFoundError("Work schedule not found")
    raise NonWorkingDayError(target)
"""

from datetime import date

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 요청한 리소스를 찾을 수 없을 때 사용.

    404 Not Found exception.
    Raised when a requested resource (template, assignment, teacher, etc.) does not exist.

    Args:
        detail: 오류 메시지 (Error message, default: "Resource not found")
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class DuplicateError(HTTPException):
    """409 Conflict 예외 — 중복 리소스 생성 또는 충돌 상태에서 사용.

    409 Conflict exception.
    Raised when a write violates a uniqueness constraint or a referential
    rule (e.g. duplicate template name, deleting a template still in use).

    Args:
        detail: 오류 메시지 (Error message, default: "Resource already exists")
    """

    def __init__(self, detail: str = "Resource already exists") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ForbiddenError(HTTPException):
    """403 Forbidden 예외 — 권한 부족 시 사용.

    403 Forbidden exception.
    Raised when the authenticated user's role does not allow the operation
    (e.g. a teacher calling an admin endpoint, an admin scanning a QR code).

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
    (e.g. malformed "HH:MM" times, valid_until before valid_from).

    Args:
        detail: 오류 메시지 (Error message, default: "Bad request")
    """

    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ScheduleNotResolvedError(HTTPException):
    """404 — 해당 날짜의 유효 스케줄을 결정할 수 없음.

    No effective schedule could be resolved for a date. Two concrete
    subclasses distinguish a benign non-working day from missing
    configuration; callers that only care about "no schedule" catch this base.

    Args:
        target: 해석 대상 날짜 (Date that failed to resolve)
        detail: 오류 메시지 (Error message)
    """

    def __init__(self, target: date, detail: str) -> None:
        self.target: date = target
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ScheduleConfigurationError(ScheduleNotResolvedError):
    """설정 누락 — 기간 적용도 기본 템플릿도 없음. 관리자 조치 필요.

    Configuration missing: no assignment covers the date and no default
    template exists.
    """

    def __init__(self, target: date) -> None:
        super().__init__(target, f"No work schedule configured for {target.isoformat()}: set a default schedule")


class NonWorkingDayError(ScheduleNotResolvedError):
    """비근무일 — 스케줄은 있으나 해당 요일은 근무일이 아님.

    Benign: a template applies but its working days exclude the date's weekday.
    """

    def __init__(self, target: date) -> None:
        super().__init__(target, f"{target.isoformat()} is not a working day")


class InvalidQRTokenError(HTTPException):
    """400 — 존재하지 않거나 비활성화된 QR 토큰.

    QR token not found or deactivated.
    """

    def __init__(self, detail: str = "Invalid or inactive QR code") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ExpiredQRTokenError(HTTPException):
    """400 — 유효 시간 밖의 QR 토큰 스캔.

    QR token scanned outside its [valid_from, valid_until] window.
    """

    def __init__(self, detail: str = "QR code is not valid at this time") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
