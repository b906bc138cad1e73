from sqlalchemy import Column, ForeignKey, Integer, UniqueConstraint

from calendar_service.core.db import Base


class AnnualAllowance(Base):
    __tablename__ = "annual_allowances"
    __table_args__ = (
        UniqueConstraint("holiday_type_id", "year", name="uq_allowance_type_year"),
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    holiday_type_id = Column(Integer, ForeignKey("holiday_types.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)  # 일 또는 시간 (holiday type의 is_hourly 기준)
    year = Column(Integer, nullable=False)
