"""
데이터베이스 관리
SQLAlchemy 비동기 엔진과 세션을 생성합니다.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from loguru import logger
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from app.config import settings
from .models import Base


def create_engine(database_url: Optional[str] = None, echo: Optional[bool] = None) -> AsyncEngine:
    """비동기 엔진 생성 (인메모리 SQLite는 연결 1개를 공유)"""
    url = database_url or settings.DATABASE_URL
    kwargs = {}

    if url.startswith("sqlite") and (":memory:" in url or url.endswith("://")):
        kwargs["poolclass"] = StaticPool
        kwargs["connect_args"] = {"check_same_thread": False}

    return create_async_engine(
        url,
        echo=settings.DB_ECHO if echo is None else echo,
        **kwargs,
    )


class Database:
    """
    엔진 + 세션 팩토리 묶음

    요청 처리와 백그라운드 작업이 각자 세션을 열어 사용합니다.
    """

    def __init__(self, database_url: Optional[str] = None):
        self.url = database_url or settings.DATABASE_URL
        self.engine = create_engine(self.url)
        self.session_maker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        self.logger = logger.bind(component="Database")

    async def init(self) -> None:
        """테이블 생성"""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        self.logger.info("Database initialized successfully")

    async def drop(self) -> None:
        """테이블 삭제"""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        self.logger.info("Database tables dropped")

    async def ping(self) -> bool:
        """연결 확인"""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            self.logger.warning(f"Database ping failed: {e}")
            return False

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """세션 컨텍스트 (오류 시 롤백)"""
        session = self.session_maker()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            self.logger.error(f"Database error: {e}")
            raise
        finally:
            await session.close()

    async def dispose(self) -> None:
        await self.engine.dispose()


# 글로벌 인스턴스
_database: Optional[Database] = None


def get_database() -> Database:
    """싱글톤 Database 반환"""
    global _database
    if _database is None:
        _database = Database()
    return _database
