"""
PageTrans 核心契约包：异常、接口协议与数据类型。
"""
from .exceptions import (
    APIError, ClientRequestError, ConfigurationError, DocumentNotFoundError,
    EmptyContentError, EngineNotFoundError, InvalidJobTransitionError,
    PageTransError, PersistenceError, TransientTranslationError, ValidationError,
)
from .interfaces import (
    AiTranslator, CacheHandler, Delivery, DocumentLocator, LanguageIdentifier,
    TextExtractor, WorkQueue, WorkQueueConsumer,
)
from .types import (
    ACTIVE_JOB_STATUSES, TERMINAL_JOB_STATUSES, JobStatus, LanguageGuess,
    Origin, RequestOutcome, Resolution, StatusOutcome, TranslationPayload,
    TranslationRecord, TranslationRequestKey, WorkItem,
)
from .uow import IJobRepository, ITranslationRepository, IUnitOfWork

__all__ = [
    # from exceptions.py
    "PageTransError", "ConfigurationError", "EngineNotFoundError",
    "ClientRequestError", "ValidationError", "DocumentNotFoundError",
    "EmptyContentError", "APIError", "TransientTranslationError",
    "PersistenceError", "InvalidJobTransitionError",
    # from interfaces.py
    "CacheHandler", "TextExtractor", "DocumentLocator", "LanguageIdentifier",
    "AiTranslator", "WorkQueue", "WorkQueueConsumer", "Delivery",
    # from types.py
    "Origin", "JobStatus", "ACTIVE_JOB_STATUSES", "TERMINAL_JOB_STATUSES",
    "TranslationRequestKey", "LanguageGuess", "Resolution", "TranslationRecord",
    "WorkItem", "TranslationPayload", "RequestOutcome", "StatusOutcome",
    # from uow.py
    "IUnitOfWork", "ITranslationRepository", "IJobRepository",
]
