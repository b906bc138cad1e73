from datetime import datetime

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Index, Integer, String

from calendar_service.core.db import Base


class HolidayBooking(Base):
    __tablename__ = "holiday_bookings"
    __table_args__ = (
        Index("ix_booking_usage_key", "username", "holiday_type_id", "accounting_year"),
        # 삭제된 id를 재사용하지 않도록 (SQLite는 AUTOINCREMENT가 있어야 보장)
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(100), ForeignKey("employees.username"), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)  # None이면 하루짜리
    holiday_type_id = Column(Integer, ForeignKey("holiday_types.id"), nullable=False)
    pending = Column(Boolean, nullable=False, default=True)
    # 실제 날짜와 무관하게 어느 해의 할당량에서 차감할지
    accounting_year = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
