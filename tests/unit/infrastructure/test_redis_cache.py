# tests/unit/infrastructure/test_redis_cache.py
"""RedisCacheHandler 的单元测试（使用模拟客户端）。"""

import json
from unittest.mock import AsyncMock, Mock

import pytest
import redis.asyncio as aioredis

from pagetrans.infrastructure.redis.cache import RedisCacheHandler

pytestmark = pytest.mark.unit


class TestRedisCacheHandler:
    @pytest.fixture
    def mock_redis_client(self):
        client = Mock()
        client.get = AsyncMock(return_value=None)
        client.set = AsyncMock(return_value=True)
        client.delete = AsyncMock()
        return client

    @pytest.fixture
    def handler(self, mock_redis_client):
        return RedisCacheHandler(mock_redis_client, key_prefix="pt:")

    @pytest.mark.asyncio
    async def test_set_serializes_with_prefix_and_ttl(self, handler, mock_redis_client):
        await handler.set("k", {"translated_text": "hola"}, ttl=604800)
        mock_redis_client.set.assert_awaited_once_with(
            "pt:k", json.dumps({"translated_text": "hola"}), ex=604800
        )

    @pytest.mark.asyncio
    async def test_get_deserializes(self, handler, mock_redis_client):
        mock_redis_client.get.return_value = '{"a": 1}'
        assert await handler.get("k") == {"a": 1}
        mock_redis_client.get.assert_awaited_once_with("pt:k")

    @pytest.mark.asyncio
    async def test_get_miss_returns_none(self, handler):
        assert await handler.get("k") is None

    @pytest.mark.asyncio
    async def test_corrupt_value_is_a_miss(self, handler, mock_redis_client):
        mock_redis_client.get.return_value = "{not json"
        assert await handler.get("k") is None

    @pytest.mark.asyncio
    async def test_connection_error_on_get_is_a_miss(self, handler, mock_redis_client):
        mock_redis_client.get.side_effect = aioredis.ConnectionError("down")
        assert await handler.get("k") is None

    @pytest.mark.asyncio
    async def test_connection_error_on_set_propagates(self, handler, mock_redis_client):
        mock_redis_client.set.side_effect = aioredis.ConnectionError("down")
        with pytest.raises(aioredis.ConnectionError):
            await handler.set("k", True, ttl=300)

    @pytest.mark.asyncio
    async def test_add_uses_set_nx(self, handler, mock_redis_client):
        assert await handler.add("k", True, ttl=300) is True
        mock_redis_client.set.assert_awaited_once_with("pt:k", "true", ex=300, nx=True)

        mock_redis_client.set.return_value = None
        assert await handler.add("k", True, ttl=300) is False

    @pytest.mark.asyncio
    async def test_delete(self, handler, mock_redis_client):
        await handler.delete("k")
        mock_redis_client.delete.assert_awaited_once_with("pt:k")
