import logging
import sys

from calendar_service.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str | None = None) -> None:
    """
    서비스 전체 로깅 설정. main.py에서 앱 생성 시 한 번 호출.
    """
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format=LOG_FORMAT,
        stream=sys.stdout,
    )
    # SQL 로그는 SQL_ECHO로만 제어
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.SQL_ECHO else logging.WARNING
    )
