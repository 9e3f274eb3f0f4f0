# tests/conftest.py
"""
Pytest 共享夹具。

- 单元测试使用 `tests/helpers/tools/fakes.py` 中的内存替身；
- 集成测试使用临时 SQLite 文件库 (sqlite+aiosqlite) 与真实仓库。
"""

from __future__ import annotations

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine

from pagetrans.application.dedup import QueueDuplicationChecker
from pagetrans.application.resolvers import TranslationResolver
from pagetrans.application.services import JobMonitorService
from pagetrans.application.validation import TranslationRequestValidator
from pagetrans.config import DatabaseSettings, PageTransConfig
from pagetrans.domain.languages import DEFAULT_SUPPORTED_LANGUAGES
from pagetrans.infrastructure.cache.memory import MemoryCacheHandler
from pagetrans.infrastructure.db import (
    create_async_db_engine,
    create_async_sessionmaker,
    create_schema,
    dispose_engine,
)
from pagetrans.infrastructure.queue.memory import InMemoryWorkQueue
from pagetrans.infrastructure.uow import SqlAlchemyUnitOfWork, UowFactory
from tests.helpers.tools.fakes import (
    FakeDocumentStore,
    FakeLanguageIdentifier,
    FakeTranslator,
    InMemoryUowFactory,
)
from tests.helpers.tools.pipeline import Pipeline, build_pipeline

REPORT_PAGES = {3: "The quarterly revenue grew by twelve percent."}


@pytest.fixture
def test_config() -> PageTransConfig:
    return PageTransConfig(
        database={"url": "sqlite+aiosqlite:///:memory:"},
        active_engine="debug",
    )


# =========================
# 单元测试夹具（内存替身）
# =========================


@pytest.fixture
def cache() -> MemoryCacheHandler:
    return MemoryCacheHandler()


@pytest.fixture
def translator() -> FakeTranslator:
    return FakeTranslator()


@pytest.fixture
def identifier() -> FakeLanguageIdentifier:
    return FakeLanguageIdentifier("en")


@pytest.fixture
def documents() -> FakeDocumentStore:
    return FakeDocumentStore({"report.pdf": dict(REPORT_PAGES), "blank.pdf": {1: "   "}})


@pytest.fixture
def memory_uow_factory() -> InMemoryUowFactory:
    return InMemoryUowFactory()


@pytest.fixture
def work_queue() -> InMemoryWorkQueue:
    return InMemoryWorkQueue(max_attempts=2)


@pytest.fixture
def dedup(cache) -> QueueDuplicationChecker:
    return QueueDuplicationChecker(cache, ttl_seconds=300)


@pytest.fixture
def validator(documents) -> TranslationRequestValidator:
    return TranslationRequestValidator(
        locator=documents,
        extractor=documents,
        supported_languages=DEFAULT_SUPPORTED_LANGUAGES,
        default_target_language="es",
    )


@pytest.fixture
def resolver(memory_uow_factory, cache, translator, identifier) -> TranslationResolver:
    return TranslationResolver(
        uow_factory=memory_uow_factory,
        cache=cache,
        translator=translator,
        language_identifier=identifier,
        cache_ttl=604800,
    )


@pytest.fixture
def pipeline(
    memory_uow_factory, cache, translator, identifier, validator, work_queue, dedup
) -> Pipeline:
    return build_pipeline(
        memory_uow_factory, cache, translator, identifier, validator, work_queue, dedup
    )


# =========================
# 集成测试夹具（SQLite 文件库）
# =========================


@pytest_asyncio.fixture
async def db_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    # NullPool 下每个连接都是新的 :memory: 库，因此使用临时文件
    settings = DatabaseSettings(url=f"sqlite+aiosqlite:///{tmp_path / 'pagetrans.db'}")
    engine = create_async_db_engine(settings)
    await create_schema(engine)
    try:
        yield engine
    finally:
        await dispose_engine(engine)


@pytest.fixture
def uow_factory(db_engine) -> UowFactory:
    sessionmaker = create_async_sessionmaker(db_engine)
    return lambda: SqlAlchemyUnitOfWork(sessionmaker)


@pytest.fixture
def monitor(uow_factory) -> JobMonitorService:
    return JobMonitorService(uow_factory)

