from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from calendar_service.core.db import get_db
from calendar_service.models.allowance import AnnualAllowance
from calendar_service.models.holiday_type import HolidayType
from calendar_service.schemas.allowance import (
    AllowanceCreate,
    AllowanceRead,
    AllowanceUpdate,
)

router = APIRouter(
    prefix="/allowances",
    tags=["allowances"],
)


def _joined_select():
    return select(AnnualAllowance, HolidayType.name, HolidayType.is_hourly).join(
        HolidayType, AnnualAllowance.holiday_type_id == HolidayType.id
    )


def _to_read(allowance: AnnualAllowance, name: str, is_hourly: bool) -> AllowanceRead:
    return AllowanceRead(
        id=allowance.id,
        holiday_type_id=allowance.holiday_type_id,
        quantity=allowance.quantity,
        year=allowance.year,
        holiday_type_name=name,
        is_hourly=is_hourly,
    )


async def _read_one(db: AsyncSession, allowance_id: int) -> AllowanceRead:
    result = await db.execute(_joined_select().where(AnnualAllowance.id == allowance_id))
    row = result.one_or_none()
    if row is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Allowance not found",
        )
    return _to_read(*row)


async def _validate_payload(
    db: AsyncSession,
    payload: AllowanceCreate | AllowanceUpdate,
    allowance_id: Optional[int] = None,
) -> None:
    """
    - holiday type이 존재해야 함
    - (holiday_type_id, year) 조합은 하나만 허용
    """
    if await db.get(HolidayType, payload.holiday_type_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Holiday type not found",
        )

    stmt = select(AnnualAllowance.id).where(
        AnnualAllowance.holiday_type_id == payload.holiday_type_id,
        AnnualAllowance.year == payload.year,
    )
    if allowance_id is not None:
        stmt = stmt.where(AnnualAllowance.id != allowance_id)

    result = await db.execute(stmt)
    if result.first() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Allowance already configured for this holiday type and year",
        )


async def _commit_or_conflict(db: AsyncSession) -> None:
    try:
        await db.commit()
    except IntegrityError:
        # 동시에 같은 (type, year)를 만든 경우 유니크 제약에서 걸린다
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Allowance already configured for this holiday type and year",
        )


@router.get(
    "",
    response_model=List[AllowanceRead],
)
async def list_allowances(
    year: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """
    연간 할당량 설정 목록.
    예: GET /allowances?year=2024
    """
    stmt = _joined_select()
    if year is not None:
        stmt = stmt.where(AnnualAllowance.year == year)
    stmt = stmt.order_by(AnnualAllowance.year, AnnualAllowance.holiday_type_id)

    result = await db.execute(stmt)
    return [_to_read(*row) for row in result.all()]


@router.post(
    "",
    response_model=AllowanceRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_allowance(
    payload: AllowanceCreate,
    db: AsyncSession = Depends(get_db),
):
    await _validate_payload(db, payload)

    allowance = AnnualAllowance(
        holiday_type_id=payload.holiday_type_id,
        quantity=payload.quantity,
        year=payload.year,
    )
    db.add(allowance)
    await _commit_or_conflict(db)
    await db.refresh(allowance)

    return await _read_one(db, allowance.id)


@router.put(
    "/{allowance_id}",
    response_model=AllowanceRead,
)
async def update_allowance(
    allowance_id: int,
    payload: AllowanceUpdate,
    db: AsyncSession = Depends(get_db),
):
    allowance = await db.get(AnnualAllowance, allowance_id)
    if allowance is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Allowance not found",
        )

    await _validate_payload(db, payload, allowance_id=allowance_id)

    allowance.holiday_type_id = payload.holiday_type_id
    allowance.quantity = payload.quantity
    allowance.year = payload.year
    await _commit_or_conflict(db)

    return await _read_one(db, allowance_id)


@router.delete(
    "/{allowance_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_allowance(
    allowance_id: int,
    db: AsyncSession = Depends(get_db),
):
    allowance = await db.get(AnnualAllowance, allowance_id)
    if allowance is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Allowance not found",
        )

    await db.delete(allowance)
    await db.commit()
