from sqlalchemy import Column, Date, DateTime, String, func

from calendar_service.core.db import Base


class Employee(Base):
    __tablename__ = "employees"

    username = Column(String(100), primary_key=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)  # None이면 재직 중
    created_at = Column(
        DateTime,
        server_default=func.now(),
        nullable=False,
    )
