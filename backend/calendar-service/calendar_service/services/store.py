from typing import Any, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from calendar_service.core.errors import BookingNotFound
from calendar_service.models.allowance import AnnualAllowance
from calendar_service.models.booking import HolidayBooking
from calendar_service.models.employee import Employee
from calendar_service.models.holiday_type import HolidayType

BOOKING_FIELDS = (
    "username",
    "start_date",
    "end_date",
    "holiday_type_id",
    "pending",
    "accounting_year",
)


class BookingStore:
    """
    휴가 할당량 계산에 필요한 조회/저장만 모아둔 저장소.
    flush까지만 하고 commit/rollback은 호출하는 쪽(ledger)이 책임진다.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def find_employee(self, username: str) -> Optional[Employee]:
        result = await self.db.execute(
            select(Employee).where(Employee.username == username)
        )
        return result.scalar_one_or_none()

    async def find_holiday_type(self, holiday_type_id: int) -> Optional[HolidayType]:
        result = await self.db.execute(
            select(HolidayType).where(HolidayType.id == holiday_type_id)
        )
        return result.scalar_one_or_none()

    async def find_allowance(self, holiday_type_id: int, year: int) -> List[AnnualAllowance]:
        """
        (holiday_type_id, year)에 해당하는 설정을 모두 반환.
        유니크 제약 이전에 들어간 중복 데이터를 호출자가 감지할 수 있게 리스트로 준다.
        """
        result = await self.db.execute(
            select(AnnualAllowance)
            .where(
                AnnualAllowance.holiday_type_id == holiday_type_id,
                AnnualAllowance.year == year,
            )
            .order_by(AnnualAllowance.id)
        )
        return list(result.scalars().all())

    async def list_bookings(
        self,
        username: Optional[str] = None,
        holiday_type_id: Optional[int] = None,
        accounting_year: Optional[int] = None,
        exclude_id: Optional[int] = None,
    ) -> List[HolidayBooking]:
        stmt = select(HolidayBooking)

        if username is not None:
            stmt = stmt.where(HolidayBooking.username == username)
        if holiday_type_id is not None:
            stmt = stmt.where(HolidayBooking.holiday_type_id == holiday_type_id)
        if accounting_year is not None:
            stmt = stmt.where(HolidayBooking.accounting_year == accounting_year)
        if exclude_id is not None:
            stmt = stmt.where(HolidayBooking.id != exclude_id)

        stmt = stmt.order_by(HolidayBooking.start_date, HolidayBooking.id)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def find_booking(self, booking_id: int) -> Optional[HolidayBooking]:
        result = await self.db.execute(
            select(HolidayBooking)
            .where(HolidayBooking.id == booking_id)
            # 락 대기 중 다른 요청이 바꾼 값을 반영하기 위해 identity map 값을 덮어쓴다
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def insert_booking(self, **fields: Any) -> HolidayBooking:
        booking = HolidayBooking(**{k: fields[k] for k in BOOKING_FIELDS if k in fields})
        self.db.add(booking)
        await self.db.flush()
        return booking

    async def update_booking(self, booking_id: int, **fields: Any) -> HolidayBooking:
        booking = await self.find_booking(booking_id)
        if booking is None:
            raise BookingNotFound(booking_id)

        for key in BOOKING_FIELDS:
            if key in fields:
                setattr(booking, key, fields[key])
        await self.db.flush()
        return booking

    async def delete_booking(self, booking_id: int) -> None:
        booking = await self.find_booking(booking_id)
        if booking is None:
            raise BookingNotFound(booking_id)

        await self.db.delete(booking)
        await self.db.flush()
