"""
PropNotes FastAPI 메인
"""

import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from app.api.routes import router
from app.config import settings
from app.db.database import Database, get_database
from app.errors import (
    Conflict,
    EmptyCompletion,
    MalformedResponse,
    NotFound,
    PropNotesError,
    TransportError,
)
from app.llm import BaseLLMRunner, get_llm_runner

# 예외 -> HTTP 상태 코드
ERROR_STATUS_CODES = {
    NotFound: 404,
    Conflict: 409,
    MalformedResponse: 502,
    EmptyCompletion: 502,
    TransportError: 502,
}


def setup_logging(level: Optional[str] = None) -> None:
    """loguru 기본 핸들러를 설정된 레벨로 교체"""
    logger.remove()
    logger.add(sys.stderr, level=(level or settings.LOG_LEVEL).upper())


def create_app(
    database: Optional[Database] = None,
    runner: Optional[BaseLLMRunner] = None,
) -> FastAPI:
    """
    앱 생성

    Args:
        database: 사용할 Database (기본: 설정의 DATABASE_URL)
        runner: 사용할 LLM Runner (기본: 설정의 LLM_PROVIDER)
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.database = database or get_database()
        app.state.llm_runner = runner or get_llm_runner()

        await app.state.database.init()
        logger.info(
            f"PropNotes started (env={settings.ENV}, "
            f"llm={app.state.llm_runner.provider_name})"
        )
        yield
        await app.state.database.dispose()

    app = FastAPI(
        title="PropNotes",
        description="현장 노트 기반 상업용 매물 관리 및 자연어 랭킹 API",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS 설정
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # 프로덕션에서는 제한 필요
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(PropNotesError)
    async def propnotes_error_handler(request: Request, exc: PropNotesError):
        status_code = 500
        for error_type, code in ERROR_STATUS_CODES.items():
            if isinstance(exc, error_type):
                status_code = code
                break

        if status_code >= 500:
            logger.error(f"{request.method} {request.url.path} 실패: {exc.message}")

        return JSONResponse(status_code=status_code, content={"detail": exc.to_dict()})

    # 라우터 등록
    app.include_router(router, prefix="/api/v1")

    @app.get("/")
    async def root():
        """헬스 체크"""
        return {
            "name": "PropNotes",
            "status": "running",
            "version": "0.1.0",
        }

    @app.get("/health")
    async def health(request: Request):
        """상세 헬스 체크"""
        db_ok = await request.app.state.database.ping()
        llm = request.app.state.llm_runner

        return {
            "status": "healthy" if db_ok else "degraded",
            "database": db_ok,
            "llm_provider": llm.provider_name,
            "llm_available": llm.is_available,
        }

    return app


setup_logging()
app = create_app()
