import logging

from fastapi import FastAPI

from calendar_service.api.allowances import router as allowances_router
from calendar_service.api.bookings import router as bookings_router
from calendar_service.api.employees import router as employees_router
from calendar_service.api.holiday_types import router as holiday_types_router
from calendar_service.api.status import router as status_router
from calendar_service.core.config import settings
from calendar_service.core.db import engine, init_db
from calendar_service.core.errors import register_exception_handlers
from calendar_service.core.locks import KeyedLockRegistry
from calendar_service.core.log_config import setup_logging

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Calendar Service",
    version="0.1.0",
    description="Work calendar service: employees, holiday types, annual allowances, holiday bookings (REST + SQLAlchemy)",
)

# 같은 (직원, 휴가 유형, 회계연도)에 대한 예약 검증/저장을 직렬화
app.state.booking_locks = KeyedLockRegistry()

register_exception_handlers(app)


@app.on_event("startup")
async def on_startup() -> None:
    logger.info("Starting %s", settings.SERVICE_NAME)
    await init_db()


@app.on_event("shutdown")
async def on_shutdown() -> None:
    logger.info("Shutting down %s", settings.SERVICE_NAME)
    await engine.dispose()


@app.get("/health")
async def health_check():
    return {
        "status": "ok",
        "service": settings.SERVICE_NAME,
    }


@app.get("/")
async def root():
    return {
        "message": "Calendar Service is running",
        "docs": "/docs",
    }


app.include_router(employees_router)
app.include_router(holiday_types_router)
app.include_router(allowances_router)
app.include_router(bookings_router)
app.include_router(status_router)
