from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from calendar_service.core.db import get_db
from calendar_service.models.employee import Employee as EmployeeModel
from calendar_service.schemas.employee import (
    Employee as EmployeeSchema,
    EmployeeCreate,
    EmployeeUpdate,
)

router = APIRouter(
    prefix="/employees",
    tags=["employees"],
)


async def _get_or_404(db: AsyncSession, username: str) -> EmployeeModel:
    result = await db.execute(
        select(EmployeeModel).where(EmployeeModel.username == username)
    )
    employee = result.scalar_one_or_none()

    if employee is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Employee not found",
        )
    return employee


@router.post(
    "",
    response_model=EmployeeSchema,
    status_code=status.HTTP_201_CREATED,
)
async def create_employee(
    payload: EmployeeCreate,
    db: AsyncSession = Depends(get_db),
):
    existing = await db.get(EmployeeModel, payload.username)
    if existing is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Employee already exists",
        )

    employee = EmployeeModel(
        username=payload.username,
        start_date=payload.start_date,
        end_date=payload.end_date,
    )
    db.add(employee)
    await db.commit()
    await db.refresh(employee)

    return employee


@router.get(
    "",
    response_model=List[EmployeeSchema],
)
async def list_employees(
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(EmployeeModel).order_by(EmployeeModel.username))
    return result.scalars().all()


@router.get(
    "/{username}",
    response_model=EmployeeSchema,
)
async def get_employee(
    username: str,
    db: AsyncSession = Depends(get_db),
):
    return await _get_or_404(db, username)


@router.put(
    "/{username}",
    response_model=EmployeeSchema,
)
async def update_employee(
    username: str,
    payload: EmployeeUpdate,
    db: AsyncSession = Depends(get_db),
):
    employee = await _get_or_404(db, username)

    employee.start_date = payload.start_date
    employee.end_date = payload.end_date

    await db.commit()
    await db.refresh(employee)

    return employee


@router.delete(
    "/{username}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_employee(
    username: str,
    db: AsyncSession = Depends(get_db),
):
    # 예약이 남아 있어도 연쇄 삭제/차단하지 않는다
    employee = await _get_or_404(db, username)

    await db.delete(employee)
    await db.commit()
    # 204 No Content → 바디 없음
