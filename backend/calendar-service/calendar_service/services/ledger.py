import logging
from datetime import date
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from calendar_service.core.errors import (
    AllowanceExceeded,
    AllowanceNotConfigured,
    BookingNotFound,
    DuplicateAllowance,
    EmployeeNotFound,
    HolidayTypeNotFound,
    InvalidRange,
    LedgerError,
)
from calendar_service.core.locks import KeyedLockRegistry
from calendar_service.models.booking import HolidayBooking
from calendar_service.services.spans import day_span, used_span
from calendar_service.services.store import BookingStore

logger = logging.getLogger(__name__)


def usage_key(username: str, holiday_type_id: int, accounting_year: int) -> tuple:
    return (username, holiday_type_id, accounting_year)


class HolidayLedger:
    """
    직원별/휴가 유형별/회계연도별 할당량을 기준으로 휴가 예약을 검증하고 저장한다.

    자체 상태는 없고, 매 판단마다 저장소에서 새로 읽는다.
    같은 사용량 키에 대한 "조회 → 판단 → 저장"은 locks로 직렬화되고,
    락을 잡은 뒤 새로 시작한 한 번의 트랜잭션 안에서 처리된다.
    세션에 커밋되지 않은 변경이 있으면 락 대기 전에 버려진다.
    """

    def __init__(self, db: AsyncSession, locks: KeyedLockRegistry) -> None:
        self.db = db
        self.store = BookingStore(db)
        self.locks = locks

    async def resolve_allowance(self, holiday_type_id: int, year: int) -> int:
        """
        (holiday_type_id, year)에 설정된 할당량.
        설정이 없으면 0으로 취급하지 않고 AllowanceNotConfigured.
        """
        rows = await self.store.find_allowance(holiday_type_id, year)
        if not rows:
            raise AllowanceNotConfigured(holiday_type_id, year)
        if len(rows) > 1:
            raise DuplicateAllowance(holiday_type_id, year, len(rows))
        return rows[0].quantity

    async def _check_allowance(
        self,
        username: str,
        holiday_type_id: int,
        accounting_year: int,
        new_span: int,
        exclude_id: Optional[int] = None,
    ) -> None:
        bookings = await self.store.list_bookings(
            username=username,
            holiday_type_id=holiday_type_id,
            accounting_year=accounting_year,
            exclude_id=exclude_id,
        )
        used = used_span(bookings, exclude_id=exclude_id)
        allowed = await self.resolve_allowance(holiday_type_id, accounting_year)

        # 남은 할당량을 정확히 채우는 건 허용 (>= 아님)
        if used + new_span > allowed:
            raise AllowanceExceeded(used_span=used, new_span=new_span, allowed=allowed)

    async def propose_booking(
        self,
        username: Optional[str],
        start_date: date,
        end_date: Optional[date],
        holiday_type_id: int,
        accounting_year: int,
        booking_id: Optional[int] = None,
        pending: Optional[bool] = None,
    ) -> HolidayBooking:
        """
        새 예약(booking_id 없음) 또는 기존 예약 수정을 검증하고 저장.

        - 신규: 항상 할당량 재검증, pending=True로 생성
        - 수정: 유형/회계연도/시작일/종료일 중 하나라도 바뀐 경우에만 재검증,
          pending은 호출자가 준 값(없으면 기존 값)을 사용
        거절되면 아무것도 저장하지 않는다.
        """
        if end_date is not None and end_date < start_date:
            raise InvalidRange(start_date, end_date)

        keys = []
        if booking_id is not None:
            existing = await self.store.find_booking(booking_id)
            if existing is None:
                raise BookingNotFound(booking_id)
            # 수정 시 예약 소유자는 바뀌지 않는다
            username = existing.username
            keys.append(usage_key(existing.username, existing.holiday_type_id, existing.accounting_year))
        keys.append(usage_key(username, holiday_type_id, accounting_year))

        # 락 대기 전에 읽기 트랜잭션을 끝낸다.
        # (REPEATABLE READ에서는 여기서 잡힌 스냅샷이 락 안의 재조회까지 이어진다)
        if self.db.in_transaction():
            await self.db.rollback()

        async with self.locks.hold(keys):
            try:
                booking = await self._admit(
                    username=username,
                    start_date=start_date,
                    end_date=end_date,
                    holiday_type_id=holiday_type_id,
                    accounting_year=accounting_year,
                    booking_id=booking_id,
                    pending=pending,
                )
            except LedgerError as exc:
                await self.db.rollback()
                logger.info(
                    "Booking rejected: user=%s type=%s year=%s reason=%s",
                    username,
                    holiday_type_id,
                    accounting_year,
                    exc.kind,
                )
                raise
            except Exception:
                await self.db.rollback()
                logger.error(
                    "Storage failure while saving booking for user=%s type=%s year=%s",
                    username,
                    holiday_type_id,
                    accounting_year,
                )
                raise

            await self.db.commit()

        await self.db.refresh(booking)
        logger.info(
            "Booking %s %s: user=%s type=%s year=%s span=%d pending=%s",
            booking.id,
            "updated" if booking_id is not None else "created",
            booking.username,
            booking.holiday_type_id,
            booking.accounting_year,
            day_span(booking.start_date, booking.end_date),
            booking.pending,
        )
        return booking

    async def _admit(
        self,
        username: str,
        start_date: date,
        end_date: Optional[date],
        holiday_type_id: int,
        accounting_year: int,
        booking_id: Optional[int],
        pending: Optional[bool],
    ) -> HolidayBooking:
        # 락을 잡은 뒤 다시 읽어서 그 사이 변경을 반영
        current = None
        if booking_id is not None:
            current = await self.store.find_booking(booking_id)
            if current is None:
                raise BookingNotFound(booking_id)

        if await self.store.find_employee(username) is None:
            raise EmployeeNotFound(username)
        if await self.store.find_holiday_type(holiday_type_id) is None:
            raise HolidayTypeNotFound(holiday_type_id)

        new_span = day_span(start_date, end_date)

        if current is None:
            needs_check = True
        else:
            # pending만 바뀐 수정은 할당량 검사를 건너뛴다
            needs_check = (
                current.holiday_type_id != holiday_type_id
                or current.accounting_year != accounting_year
                or current.start_date != start_date
                or current.end_date != end_date
            )

        if needs_check:
            await self._check_allowance(
                username,
                holiday_type_id,
                accounting_year,
                new_span,
                exclude_id=booking_id,
            )

        fields = dict(
            start_date=start_date,
            end_date=end_date,
            holiday_type_id=holiday_type_id,
            accounting_year=accounting_year,
        )
        if current is None:
            return await self.store.insert_booking(
                username=username,
                pending=True if pending is None else pending,
                **fields,
            )

        return await self.store.update_booking(
            booking_id,
            pending=current.pending if pending is None else pending,
            **fields,
        )

    async def delete_booking(self, booking_id: int) -> None:
        """삭제는 할당량과 무관하게 항상 허용"""
        try:
            await self.store.delete_booking(booking_id)
        except Exception:
            await self.db.rollback()
            raise
        await self.db.commit()
        logger.info("Booking %s deleted", booking_id)
