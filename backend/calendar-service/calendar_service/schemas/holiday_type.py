from pydantic import BaseModel, ConfigDict, Field


class HolidayTypeBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    is_hourly: bool = False


class HolidayTypeCreate(HolidayTypeBase):
    pass


class HolidayTypeUpdate(HolidayTypeBase):
    model_config = ConfigDict(extra="forbid")


class HolidayType(HolidayTypeBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
