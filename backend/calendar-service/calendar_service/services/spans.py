"""
휴가 기간(일수) 계산과 사용량 집계.

날짜는 datetime.date로만 다룬다. 시간 정보가 섞이면 서머타임/타임존 때문에
일수가 하루 어긋날 수 있으므로 datetime이 들어오면 날짜 부분만 쓴다.
"""
from datetime import date, datetime
from typing import Iterable, Optional

from calendar_service.core.errors import InvalidRange


def _as_date(value: date) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def day_span(start_date: date, end_date: Optional[date] = None) -> int:
    """
    시작일~종료일(포함) 일수.
    종료일이 없으면 하루, 종료일이 시작일보다 앞이면 InvalidRange.
    """
    start = _as_date(start_date)
    if end_date is None:
        return 1

    end = _as_date(end_date)
    if end < start:
        raise InvalidRange(start, end)
    return (end - start).days + 1


def used_span(bookings: Iterable, exclude_id: Optional[int] = None) -> int:
    """
    이미 (username, holiday_type_id, accounting_year)로 필터링된 예약 목록의
    총 사용 일수. exclude_id는 수정 중인 예약을 빼고 셀 때 사용.
    """
    total = 0
    for booking in bookings:
        if exclude_id is not None and booking.id == exclude_id:
            continue
        total += day_span(booking.start_date, booking.end_date)
    return total
