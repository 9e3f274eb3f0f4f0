# tests/unit/test_config.py
import pytest
from pydantic import ValidationError

from pagetrans.config import PageTransConfig

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PAGETRANS_REDIS__URL", raising=False)
    monkeypatch.delenv("PAGETRANS_CACHE__KIND", raising=False)
    monkeypatch.delenv("PAGETRANS_QUEUE__KIND", raising=False)


def test_defaults() -> None:
    cfg = PageTransConfig()
    assert cfg.cache.translation_ttl_seconds == 7 * 24 * 3600
    assert cfg.dedup.ttl_seconds == 300
    assert cfg.dedup.atomic_claim is False
    assert cfg.language.default_target == "es"
    assert cfg.queue.claim_idle_seconds == 300
    assert cfg.ollama.model == "llama3.2:1b"
    assert cfg.ollama.temperature == 0.3


def test_nested_environment_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PAGETRANS_OLLAMA__MODEL", "mistral")
    monkeypatch.setenv("PAGETRANS_DEDUP__TTL_SECONDS", "60")
    monkeypatch.setenv("PAGETRANS_ACTIVE_ENGINE", "debug")
    cfg = PageTransConfig()
    assert cfg.ollama.model == "mistral"
    assert cfg.dedup.ttl_seconds == 60
    assert cfg.active_engine == "debug"


def test_redis_backends_require_url() -> None:
    with pytest.raises(ValidationError):
        PageTransConfig(queue={"kind": "redis"})
    cfg = PageTransConfig(queue={"kind": "redis"}, redis={"url": "redis://localhost:6379/0"})
    assert cfg.queue.kind == "redis"


def test_rejects_sync_database_driver() -> None:
    with pytest.raises(ValidationError):
        PageTransConfig(database={"url": "sqlite:///pagetrans.db"})


def test_default_target_must_be_supported() -> None:
    with pytest.raises(ValidationError):
        PageTransConfig(language={"supported": ["en", "fr"], "default_target": "es"})


def test_invalid_language_code() -> None:
    with pytest.raises(ValidationError):
        PageTransConfig(language={"supported": ["es", "not a code"]})


def test_backoff_consistency() -> None:
    with pytest.raises(ValidationError):
        PageTransConfig(retry_policy={"initial_backoff": 10, "max_backoff": 1})
