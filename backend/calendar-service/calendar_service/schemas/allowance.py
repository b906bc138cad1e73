from pydantic import BaseModel, ConfigDict, Field


class AllowanceBase(BaseModel):
    holiday_type_id: int = Field(..., ge=1)
    quantity: int = Field(..., gt=0)
    year: int = Field(..., ge=1900, le=9999)


class AllowanceCreate(AllowanceBase):
    """POST /allowances 요청 바디"""
    pass


class AllowanceUpdate(AllowanceBase):
    model_config = ConfigDict(extra="forbid")


class AllowanceRead(AllowanceBase):
    """holiday type 이름과 단위를 함께 돌려준다"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    holiday_type_name: str
    is_hourly: bool
