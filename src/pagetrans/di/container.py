# src/pagetrans/di/container.py
"""
应用依赖注入 (DI) 容器。

使用 `dependency-injector` 装配配置、数据库、UoW、缓存、队列、
翻译引擎、应用服务与 Worker。核心代码不持有任何进程级单例，
所有协作者都由本容器创建并注入。

注意：翻译引擎与 Redis 客户端是异步 Resource，依赖它们的提供者
在调用时返回 awaitable（例如 `await container.coordinator()`）。
"""

import os
from typing import Optional

from dependency_injector import containers, providers

from pagetrans.adapters.extraction import FilesystemDocumentLocator, PyMuPdfTextExtractor
from pagetrans.adapters.language import LangDetectIdentifier
from pagetrans.adapters.translators.factory import init_translation_engine
from pagetrans.application.coordinator import Coordinator
from pagetrans.application.dedup import QueueDuplicationChecker
from pagetrans.application.resolvers import TranslationResolver
from pagetrans.application.services import (
    JobMonitorService,
    RequestTranslationService,
    TranslationStatusService,
)
from pagetrans.application.validation import TranslationRequestValidator
from pagetrans.config import PageTransConfig
from pagetrans.infrastructure.cache.memory import MemoryCacheHandler
from pagetrans.infrastructure.db import create_async_db_engine, create_async_sessionmaker
from pagetrans.infrastructure.queue.memory import InMemoryWorkQueue
from pagetrans.infrastructure.redis._client import init_redis_client
from pagetrans.infrastructure.redis.cache import RedisCacheHandler
from pagetrans.infrastructure.redis.queue import RedisStreamWorkQueue
from pagetrans.infrastructure.uow import SqlAlchemyUnitOfWork
from pagetrans.workers import TranslationWorker


def resolve_worker_id(configured: Optional[int]) -> int:
    return configured if configured is not None else os.getpid()


class AppContainer(containers.DeclarativeContainer):
    """PageTrans 应用的核心 DI 容器。"""

    # ==================================================================
    # 核心提供者
    # ==================================================================

    config = providers.Singleton(PageTransConfig)

    db_engine = providers.Singleton(
        create_async_db_engine, settings=config.provided.database
    )

    db_sessionmaker = providers.Singleton(create_async_sessionmaker, engine=db_engine)

    uow_factory = providers.Factory(
        SqlAlchemyUnitOfWork,
        sessionmaker=db_sessionmaker,
    )

    worker_id = providers.Singleton(
        resolve_worker_id, configured=config.provided.worker.worker_id
    )

    # ==================================================================
    # 共享 KV 与队列
    # ==================================================================

    redis_client = providers.Resource(init_redis_client, url=config.provided.redis.url)

    cache_handler = providers.Selector(
        config.provided.cache.kind,
        redis=providers.Singleton(
            RedisCacheHandler,
            client=redis_client,
            key_prefix=config.provided.redis.key_prefix,
        ),
        memory=providers.Singleton(
            MemoryCacheHandler,
            key_prefix=config.provided.redis.key_prefix,
        ),
    )

    work_queue = providers.Selector(
        config.provided.queue.kind,
        redis=providers.Singleton(
            RedisStreamWorkQueue,
            client=redis_client,
            stream_name=config.provided.queue.stream_name,
            consumer_group=config.provided.queue.consumer_group,
            consumer_name=providers.Callable(str, worker_id),
            max_attempts=config.provided.retry_policy.max_attempts,
            claim_idle_seconds=config.provided.queue.claim_idle_seconds,
        ),
        memory=providers.Singleton(
            InMemoryWorkQueue,
            max_attempts=config.provided.retry_policy.max_attempts,
        ),
    )

    # ==================================================================
    # 适配器
    # ==================================================================

    translation_engine = providers.Resource(
        init_translation_engine,
        config=config,
        engine_name=config.provided.active_engine,
    )

    language_identifier = providers.Singleton(
        LangDetectIdentifier,
        supported=config.provided.language.supported,
        sample_chars=config.provided.language.detection_sample_chars,
    )

    text_extractor = providers.Singleton(PyMuPdfTextExtractor)

    document_locator = providers.Singleton(
        FilesystemDocumentLocator, directory=config.provided.documents.directory
    )

    # ==================================================================
    # 应用服务
    # ==================================================================

    request_validator = providers.Factory(
        TranslationRequestValidator,
        locator=document_locator,
        extractor=text_extractor,
        supported_languages=config.provided.language.supported,
        default_target_language=config.provided.language.default_target,
    )

    dedup_checker = providers.Factory(
        QueueDuplicationChecker,
        cache=cache_handler,
        ttl_seconds=config.provided.dedup.ttl_seconds,
    )

    translation_resolver = providers.Factory(
        TranslationResolver,
        uow_factory=uow_factory.provider,
        cache=cache_handler,
        translator=translation_engine,
        language_identifier=language_identifier,
        cache_ttl=config.provided.cache.translation_ttl_seconds,
    )

    request_translation_service = providers.Factory(
        RequestTranslationService,
        validator=request_validator,
        resolver=translation_resolver,
        dedup=dedup_checker,
        uow_factory=uow_factory.provider,
        queue=work_queue,
        atomic_claim=config.provided.dedup.atomic_claim,
    )

    translation_status_service = providers.Factory(
        TranslationStatusService,
        validator=request_validator,
        resolver=translation_resolver,
    )

    job_monitor_service = providers.Factory(
        JobMonitorService,
        uow_factory=uow_factory.provider,
    )

    # ==================================================================
    # 顶层门面与 Worker
    # ==================================================================

    coordinator = providers.Factory(
        Coordinator,
        request_service=request_translation_service,
        status_service=translation_status_service,
        monitor_service=job_monitor_service,
    )

    translation_worker = providers.Factory(
        TranslationWorker,
        resolver=translation_resolver,
        dedup=dedup_checker,
        uow_factory=uow_factory.provider,
        consumer=work_queue,
        worker_id=worker_id,
        poll_interval=config.provided.worker.poll_interval,
        initial_backoff=config.provided.retry_policy.initial_backoff,
        max_backoff=config.provided.retry_policy.max_backoff,
    )
