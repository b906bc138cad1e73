from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from calendar_service.core.db import get_db
from calendar_service.core.locks import KeyedLockRegistry
from calendar_service.services.ledger import HolidayLedger


def get_booking_locks(request: Request) -> KeyedLockRegistry:
    """앱 단위로 하나만 존재하는 예약 락 레지스트리 (main.py에서 app.state에 등록)"""
    return request.app.state.booking_locks


async def get_ledger(
    db: AsyncSession = Depends(get_db),
    locks: KeyedLockRegistry = Depends(get_booking_locks),
) -> HolidayLedger:
    return HolidayLedger(db, locks)
