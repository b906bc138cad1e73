from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # DB URL 환경 변수 관리 (MySQL 배포 시 mysql+asyncmy://... 로 교체)
    SQLALCHEMY_DATABASE_URL: str = "sqlite+aiosqlite:///./calendar.db"
    SQL_ECHO: bool = False

    SERVICE_NAME: str = "calendar-service"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
