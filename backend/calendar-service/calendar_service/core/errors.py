import logging
from typing import Any, Dict

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class LedgerError(Exception):
    """
    휴가 할당량 처리 중 발생하는 업무 오류의 부모 클래스.
    kind는 응답 바디의 "error" 값으로 그대로 나간다.
    """

    kind = "LedgerError"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str, **payload: Any) -> None:
        super().__init__(detail)
        self.detail = detail
        self.payload: Dict[str, Any] = payload

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.kind, "detail": self.detail, **self.payload}


class EmployeeNotFound(LedgerError):
    kind = "EmployeeNotFound"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, username: str) -> None:
        super().__init__(f"Employee '{username}' not found", username=username)


class HolidayTypeNotFound(LedgerError):
    kind = "HolidayTypeNotFound"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, holiday_type_id: int) -> None:
        super().__init__(
            f"Holiday type {holiday_type_id} not found",
            holiday_type_id=holiday_type_id,
        )


class BookingNotFound(LedgerError):
    kind = "BookingNotFound"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, booking_id: int) -> None:
        super().__init__(f"Booking {booking_id} not found", booking_id=booking_id)


class AllowanceNotConfigured(LedgerError):
    kind = "AllowanceNotConfigured"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, holiday_type_id: int, year: int) -> None:
        super().__init__(
            f"No allowance configured for holiday type {holiday_type_id} in {year}",
            holiday_type_id=holiday_type_id,
            year=year,
        )


class DuplicateAllowance(LedgerError):
    kind = "DuplicateAllowance"
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, holiday_type_id: int, year: int, count: int) -> None:
        super().__init__(
            f"{count} allowances configured for holiday type {holiday_type_id} in {year}",
            holiday_type_id=holiday_type_id,
            year=year,
            count=count,
        )


class InvalidRange(LedgerError):
    kind = "InvalidRange"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, start_date, end_date) -> None:
        super().__init__(
            "End date cannot be before start date",
            start_date=start_date.isoformat(),
            end_date=end_date.isoformat(),
        )


class AllowanceExceeded(LedgerError):
    kind = "AllowanceExceeded"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, used_span: int, new_span: int, allowed: int) -> None:
        remaining = allowed - used_span
        super().__init__(
            "Employee has already used or would exceed their allowed holidays "
            f"of this type for the year. Remaining: {remaining}",
            used_span=used_span,
            new_span=new_span,
            allowed=allowed,
            remaining=remaining,
        )
        self.used_span = used_span
        self.new_span = new_span
        self.allowed = allowed
        self.remaining = remaining


async def _ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # 스토리지 장애 등은 내부 내용을 해석하지 않고 500으로 돌려준다
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "InternalError", "detail": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LedgerError, _ledger_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
