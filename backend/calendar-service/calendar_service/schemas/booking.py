from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class BookingCreate(BaseModel):
    """
    POST /bookings 요청 바디.
    end_date가 없으면 하루짜리 휴가로 본다.
    """
    username: str = Field(..., min_length=1)
    start_date: date
    end_date: Optional[date] = None
    holiday_type_id: int = Field(..., ge=1)
    accounting_year: int = Field(..., ge=1900, le=9999)


class BookingUpdate(BaseModel):
    """
    PUT /bookings/{id} 요청 바디.
    pending은 필수: 호출자가 명시적으로 확정(False) 처리할 수 있어야 한다.
    """
    model_config = ConfigDict(extra="forbid")

    start_date: date
    end_date: Optional[date] = None
    holiday_type_id: int = Field(..., ge=1)
    pending: bool
    accounting_year: int = Field(..., ge=1900, le=9999)


class Booking(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    start_date: date
    end_date: Optional[date] = None
    holiday_type_id: int
    pending: bool
    accounting_year: int
    created_at: Optional[datetime] = None


class BookingListItem(Booking):
    """목록 조회용: holiday type 정보를 조인해서 함께 반환"""
    holiday_type_name: str
    is_hourly: bool

