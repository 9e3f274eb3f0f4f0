# tests/unit/di/test_container.py
from pathlib import Path

import pytest

from pagetrans.adapters.translators.debug import DebugEngine
from pagetrans.application.coordinator import Coordinator
from pagetrans.bootstrap import create_app_config, create_container, dotenv_files
from pagetrans.config import PageTransConfig
from pagetrans.infrastructure.cache.memory import MemoryCacheHandler
from pagetrans.infrastructure.queue.memory import InMemoryWorkQueue
from pagetrans.infrastructure.redis.queue import RedisStreamWorkQueue
from pagetrans.workers import TranslationWorker

pytestmark = pytest.mark.unit


@pytest.fixture
def container(tmp_path: Path):
    config = PageTransConfig(
        database={"url": f"sqlite+aiosqlite:///{tmp_path / 'c.db'}"},
        documents={"directory": tmp_path},
        worker={"worker_id": 77, "poll_interval": 0.5},
        active_engine="debug",
    )
    return create_container(config)


def test_memory_backends_are_shared_singletons(container) -> None:
    cache = container.cache_handler()
    assert isinstance(cache, MemoryCacheHandler)
    assert container.cache_handler() is cache
    assert isinstance(container.work_queue(), InMemoryWorkQueue)
    assert container.work_queue() is container.work_queue()


def test_redis_queue_selected_by_config(tmp_path: Path) -> None:
    config = PageTransConfig(
        queue={"kind": "redis"},
        redis={"url": "redis://localhost:6379/0"},
        worker={"worker_id": 5},
    )
    container = create_container(config)
    container.redis_client.override(object())
    queue = container.work_queue()
    assert isinstance(queue, RedisStreamWorkQueue)
    assert queue.dead_letter_stream == "pagetrans:translate_page:dlq"


@pytest.mark.asyncio
async def test_application_graph_wires_debug_engine(container) -> None:
    engine = await container.translation_engine()
    assert isinstance(engine, DebugEngine)
    assert engine.initialized

    coordinator = await container.coordinator()
    assert isinstance(coordinator, Coordinator)

    worker = await container.translation_worker()
    assert isinstance(worker, TranslationWorker)
    assert worker.worker_id == 77
    await container.shutdown_resources()


def test_dotenv_files_by_mode(tmp_path: Path) -> None:
    for name in (".env", ".env.dev", ".env.test"):
        (tmp_path / name).write_text("")
    assert [p.name for p in dotenv_files("prod", tmp_path)] == [".env"]
    assert [p.name for p in dotenv_files("dev", tmp_path)] == [".env", ".env.dev"]
    assert [p.name for p in dotenv_files("test", tmp_path)] == [
        ".env",
        ".env.dev",
        ".env.test",
    ]


def test_dotenv_values_do_not_override_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    (tmp_path / ".env").write_text(
        "PAGETRANS_OLLAMA__MODEL=from-env-file\nPAGETRANS_DEDUP__TTL_SECONDS=10\n"
    )
    (tmp_path / ".env.dev").write_text("PAGETRANS_DEDUP__TTL_SECONDS=20\n")
    monkeypatch.setenv("PAGETRANS_OLLAMA__MODEL", "from-shell")
    # 先设置再删除，使 monkeypatch 在测试结束时清理 dotenv 写入的变量
    monkeypatch.setenv("PAGETRANS_DEDUP__TTL_SECONDS", "1")
    monkeypatch.delenv("PAGETRANS_DEDUP__TTL_SECONDS")

    config = create_app_config("dev", tmp_path)

    assert config.ollama.model == "from-shell"
    assert config.dedup.ttl_seconds == 20
