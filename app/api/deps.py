"""
API 의존성
"""

from typing import AsyncIterator

from fastapi import Request, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.database import Database
from app.llm import BaseLLMRunner


def get_db(request: Request) -> Database:
    return request.app.state.database


async def get_session(database: Database = Depends(get_db)) -> AsyncIterator[AsyncSession]:
    """요청 단위 세션"""
    async with database.session() as session:
        yield session


def get_runner(request: Request) -> BaseLLMRunner:
    return request.app.state.llm_runner
