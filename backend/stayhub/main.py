from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stayhub.api.v1.api import api_router
from stayhub.core.config import settings
from stayhub.db.session import init_db
from stayhub.services.scheduler import shutdown_scheduler, start_scheduler


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI Lifespan - 앱 시작/종료 시 실행
    """
    # Startup
    if settings.SCHEDULER_ENABLED:
        start_scheduler()
    yield
    # Shutdown
    shutdown_scheduler()


def create_app() -> FastAPI:
    app = FastAPI(
        title="StayHub Notification Backend",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # DB 초기화
    init_db()

    # v1 REST API + WebSocket
    app.include_router(api_router, prefix="/api/v1")

    return app

app = create_app()
