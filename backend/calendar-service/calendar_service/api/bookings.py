from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from calendar_service.core.db import get_db
from calendar_service.core.deps import get_ledger
from calendar_service.core.errors import BookingNotFound
from calendar_service.models.booking import HolidayBooking
from calendar_service.models.holiday_type import HolidayType
from calendar_service.schemas.booking import (
    Booking,
    BookingCreate,
    BookingListItem,
    BookingUpdate,
)
from calendar_service.services.ledger import HolidayLedger

router = APIRouter(
    prefix="/bookings",
    tags=["bookings"],
)


@router.get(
    "",
    response_model=List[BookingListItem],
)
async def list_bookings(
    username: Optional[str] = Query(None),
    start_date: Optional[date] = Query(None),
    holiday_type_id: Optional[int] = Query(None),
    year: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """
    휴가 예약 목록 조회. year는 accounting_year 기준.

    예:
    GET /bookings?username=alice
    GET /bookings?username=alice&holiday_type_id=1&year=2024
    """
    stmt = select(HolidayBooking, HolidayType.name, HolidayType.is_hourly).join(
        HolidayType, HolidayBooking.holiday_type_id == HolidayType.id
    )

    if username is not None:
        stmt = stmt.where(HolidayBooking.username == username)
    if start_date is not None:
        stmt = stmt.where(HolidayBooking.start_date == start_date)
    if holiday_type_id is not None:
        stmt = stmt.where(HolidayBooking.holiday_type_id == holiday_type_id)
    if year is not None:
        stmt = stmt.where(HolidayBooking.accounting_year == year)

    stmt = stmt.order_by(HolidayBooking.start_date, HolidayBooking.id)

    result = await db.execute(stmt)
    items = []
    for booking, type_name, is_hourly in result.all():
        base = Booking.model_validate(booking)
        items.append(
            BookingListItem(
                **base.model_dump(),
                holiday_type_name=type_name,
                is_hourly=is_hourly,
            )
        )
    return items


@router.get(
    "/{booking_id}",
    response_model=Booking,
)
async def get_booking(
    booking_id: int,
    db: AsyncSession = Depends(get_db),
):
    booking = await db.get(HolidayBooking, booking_id)
    if booking is None:
        raise BookingNotFound(booking_id)
    return booking


@router.post(
    "",
    response_model=Booking,
    status_code=status.HTTP_201_CREATED,
)
async def create_booking(
    payload: BookingCreate,
    ledger: HolidayLedger = Depends(get_ledger),
):
    """
    휴가 예약 생성.
    - 직원/휴가 유형 존재 확인 (404)
    - 종료일 < 시작일이면 400 InvalidRange
    - 해당 연도 할당량 설정이 없으면 404 AllowanceNotConfigured
    - 사용량 + 신규 일수 > 할당량이면 400 AllowanceExceeded
    """
    return await ledger.propose_booking(
        username=payload.username,
        start_date=payload.start_date,
        end_date=payload.end_date,
        holiday_type_id=payload.holiday_type_id,
        accounting_year=payload.accounting_year,
    )


@router.put(
    "/{booking_id}",
    response_model=Booking,
)
async def update_booking(
    booking_id: int,
    payload: BookingUpdate,
    ledger: HolidayLedger = Depends(get_ledger),
):
    """
    휴가 예약 수정. 날짜/유형/회계연도가 바뀐 경우에만 할당량을 다시 검사하고,
    pending만 바뀐 경우(승인 처리 등)는 검사 없이 저장한다.
    """
    return await ledger.propose_booking(
        username=None,
        start_date=payload.start_date,
        end_date=payload.end_date,
        holiday_type_id=payload.holiday_type_id,
        accounting_year=payload.accounting_year,
        booking_id=booking_id,
        pending=payload.pending,
    )


@router.delete(
    "/{booking_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_booking(
    booking_id: int,
    ledger: HolidayLedger = Depends(get_ledger),
):
    await ledger.delete_booking(booking_id)
