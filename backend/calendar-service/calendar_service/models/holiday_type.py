from sqlalchemy import Boolean, Column, Integer, String

from calendar_service.core.db import Base


class HolidayType(Base):
    __tablename__ = "holiday_types"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    # True면 allowance quantity가 시간 단위, False면 일 단위
    is_hourly = Column(Boolean, nullable=False, default=False)
