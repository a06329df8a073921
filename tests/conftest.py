"""
PropNotes 테스트 공통 fixture
"""

import asyncio
import sys
sys.path.insert(0, ".")

import pytest
from fastapi.testclient import TestClient

from app.api.main import create_app
from app.db import Database
from tests.fakes import FakeRunner

IN_MEMORY_URL = "sqlite+aiosqlite://"


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def run_with_db():
    """
    인메모리 DB를 만든 뒤 async 시나리오를 실행

    사용법:
        async def scenario(database): ...
        result = run_with_db(scenario)
    """
    def runner(scenario):
        async def main():
            database = Database(IN_MEMORY_URL)
            await database.init()
            try:
                return await scenario(database)
            finally:
                await database.dispose()

        return asyncio.run(main())

    return runner


@pytest.fixture
def client(fake_runner):
    app = create_app(database=Database(IN_MEMORY_URL), runner=fake_runner)
    with TestClient(app) as test_client:
        yield test_client
