from datetime import date, datetime, timezone
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from calendar_service.core.db import get_db
from calendar_service.models.booking import HolidayBooking
from calendar_service.models.employee import Employee
from calendar_service.models.holiday_type import HolidayType
from calendar_service.schemas.employee import EmployeeStatus

router = APIRouter(
    prefix="/status",
    tags=["status"],
)


def classify(is_hourly_flags: List[bool]) -> str:
    """
    해당 날짜를 덮는 pending 예약들의 is_hourly 목록으로 상태 결정.
    예약이 없으면 working, 일 단위 예약이 있으면 off, 시간 단위뿐이면 partial.
    """
    if not is_hourly_flags:
        return "working"
    if all(is_hourly_flags):
        return "partial"
    return "off"


@router.get(
    "",
    response_model=List[EmployeeStatus],
)
async def employee_status(
    on: Optional[date] = Query(None, description="기준일 (기본값: 오늘, UTC)"),
    db: AsyncSession = Depends(get_db),
):
    """
    재직 중인 직원(퇴사일 없음 또는 기준일 이후)의 기준일 근무 상태.
    GET /status?on=2024-03-04
    """
    day = on or datetime.now(timezone.utc).date()

    emp_stmt = (
        select(Employee)
        .where(or_(Employee.end_date.is_(None), Employee.end_date >= day))
        .order_by(Employee.username)
    )
    employees = (await db.execute(emp_stmt)).scalars().all()

    covering = (
        select(HolidayBooking.username, HolidayType.is_hourly)
        .join(HolidayType, HolidayBooking.holiday_type_id == HolidayType.id)
        .where(
            HolidayBooking.pending.is_(True),
            or_(
                HolidayBooking.start_date == day,
                and_(
                    HolidayBooking.start_date <= day,
                    HolidayBooking.end_date >= day,
                ),
            ),
        )
    )
    flags: Dict[str, List[bool]] = {}
    for username, is_hourly in (await db.execute(covering)).all():
        flags.setdefault(username, []).append(bool(is_hourly))

    return [
        EmployeeStatus(
            username=e.username,
            start_date=e.start_date,
            end_date=e.end_date,
            status=classify(flags.get(e.username, [])),
        )
        for e in employees
    ]
