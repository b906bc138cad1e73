from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class EmployeeBase(BaseModel):
    start_date: date
    end_date: Optional[date] = None

    @model_validator(mode="after")
    def check_dates(self):
        # 퇴사일은 입사일보다 앞설 수 없다
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class EmployeeCreate(EmployeeBase):
    """POST /employees 요청 바디"""
    username: str = Field(..., min_length=1, max_length=100)


class EmployeeUpdate(EmployeeBase):
    """PUT /employees/{username} 요청 바디 (username은 변경 불가)"""
    model_config = ConfigDict(extra="forbid")


class Employee(EmployeeBase):
    """응답용 스키마"""
    model_config = ConfigDict(from_attributes=True)

    username: str
    created_at: Optional[datetime] = None


class EmployeeStatus(BaseModel):
    """GET /status 응답: 기준일의 근무 상태"""
    username: str
    start_date: date
    end_date: Optional[date] = None
    status: Literal["working", "off", "partial"]
