# /backend/carebridge/main.py

from __future__ import annotations
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from carebridge.config import Settings, get_settings
from carebridge.db import Base, build_engine, build_session_maker
from carebridge.errors import register_error_handlers
from carebridge.api.routers import auth, patient, caregiver, medications, appointments, daily_tasks

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    설정 객체를 받아 앱을 만듭니다. 테스트에서는 Settings(...)를 직접 넘깁니다.
    엔진/세션 팩토리는 app.state에 붙여서 요청마다 get_db()가 꺼내 씁니다.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    engine = build_engine(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # 앱 시작 시
        if settings.auto_create_tables:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            logger.info("Database tables ensured")
        try:
            yield
        finally:
            # 앱 종료 시
            await engine.dispose()

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_maker = build_session_maker(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(auth.router)
    app.include_router(patient.router)
    app.include_router(caregiver.router)
    app.include_router(medications.router)
    app.include_router(appointments.router)
    app.include_router(daily_tasks.router)

    @app.get("/health")
    async def health():
        return {"ok": True}

    return app
