# backend/stayhub/db/session.py

from typing import Any, Dict

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from stayhub.core.config import settings
from stayhub.db.base import Base


def engine_options(database_url: str) -> Dict[str, Any]:
    """
    DB 종류별 create_engine 옵션.
    - sqlite: 스케줄러 스레드와 요청 스레드가 같은 연결을 쓸 수 있도록 check_same_thread 해제
    - 그 외(PostgreSQL): 끊긴 연결을 재사용하지 않도록 pool_pre_ping
    """
    if database_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


engine = create_engine(settings.DATABASE_URL, future=True, **engine_options(settings.DATABASE_URL))

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


def init_db() -> None:
    """알림/예약 테이블 생성 (운영 스키마 변경은 alembic revision 으로)"""
    import stayhub.domain.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
