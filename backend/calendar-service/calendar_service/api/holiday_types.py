from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from calendar_service.core.db import get_db
from calendar_service.models.holiday_type import HolidayType as HolidayTypeModel
from calendar_service.schemas.holiday_type import (
    HolidayType as HolidayTypeSchema,
    HolidayTypeCreate,
    HolidayTypeUpdate,
)

router = APIRouter(
    prefix="/holiday-types",
    tags=["holiday-types"],
)


async def _get_or_404(db: AsyncSession, holiday_type_id: int) -> HolidayTypeModel:
    holiday_type = await db.get(HolidayTypeModel, holiday_type_id)
    if holiday_type is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Holiday type not found",
        )
    return holiday_type


@router.post(
    "",
    response_model=HolidayTypeSchema,
    status_code=status.HTTP_201_CREATED,
)
async def create_holiday_type(
    payload: HolidayTypeCreate,
    db: AsyncSession = Depends(get_db),
):
    holiday_type = HolidayTypeModel(name=payload.name, is_hourly=payload.is_hourly)
    db.add(holiday_type)
    await db.commit()
    await db.refresh(holiday_type)

    return holiday_type


@router.get(
    "",
    response_model=List[HolidayTypeSchema],
)
async def list_holiday_types(
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(HolidayTypeModel).order_by(HolidayTypeModel.id))
    return result.scalars().all()


@router.get(
    "/{holiday_type_id}",
    response_model=HolidayTypeSchema,
)
async def get_holiday_type(
    holiday_type_id: int,
    db: AsyncSession = Depends(get_db),
):
    return await _get_or_404(db, holiday_type_id)


@router.put(
    "/{holiday_type_id}",
    response_model=HolidayTypeSchema,
)
async def update_holiday_type(
    holiday_type_id: int,
    payload: HolidayTypeUpdate,
    db: AsyncSession = Depends(get_db),
):
    holiday_type = await _get_or_404(db, holiday_type_id)

    holiday_type.name = payload.name
    holiday_type.is_hourly = payload.is_hourly

    await db.commit()
    await db.refresh(holiday_type)

    return holiday_type


@router.delete(
    "/{holiday_type_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_holiday_type(
    holiday_type_id: int,
    db: AsyncSession = Depends(get_db),
):
    holiday_type = await _get_or_404(db, holiday_type_id)

    await db.delete(holiday_type)
    await db.commit()
